"""Batch Coordinator - concurrent dedup fan-out for one submitted batch"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from pricereports.core.errors import StoreError
from pricereports.services.dedup_engine import DedupEngine, DedupOutcome
from pricereports.services.normalizer import NormalizedReport
from pricereports.services.observation_store import ObservationStore

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    """Collective result of one batch; never shown to the submitting client"""
    accepted: int
    persisted: int = 0
    duplicates: int = 0
    skipped: int = 0
    failed: int = 0
    new_contributor: bool = False


class BatchCoordinator:
    """
    Run one dedup decision per report, all at once, and settle them together.

    A failing decision is counted and logged; it never cancels or fails its
    siblings. The caller learns only that the batch was accepted.
    """

    def __init__(self, store: ObservationStore, engine: DedupEngine):
        self.store = store
        self.engine = engine

    async def _is_new_contributor(self, reporter: str) -> bool:
        try:
            return not await self.store.has_reporter(reporter)
        except StoreError as exc:
            # Only the notification depends on this flag
            logger.warning("Reporter check failed, assuming known reporter: %s", exc)
            return False

    async def process(self, batch: Sequence[NormalizedReport], reporter: str) -> BatchOutcome:
        outcome = BatchOutcome(accepted=len(batch))
        outcome.new_contributor = await self._is_new_contributor(reporter)

        results = await asyncio.gather(
            *(self.engine.decide(report, reporter) for report in batch),
            return_exceptions=True,
        )

        for report, result in zip(batch, results):
            if isinstance(result, BaseException):
                outcome.failed += 1
                if isinstance(result, StoreError):
                    logger.error(
                        "Dedup failed for %s@%s: %s", report.sku_id, report.store_id, result
                    )
                else:
                    logger.error(
                        "Unexpected dedup failure for %s@%s",
                        report.sku_id,
                        report.store_id,
                        exc_info=result,
                    )
            elif result is DedupOutcome.PERSISTED:
                outcome.persisted += 1
            elif result is DedupOutcome.DUPLICATE:
                outcome.duplicates += 1
            else:
                outcome.skipped += 1

        logger.debug("Batch outcome: %s", outcome)
        return outcome
