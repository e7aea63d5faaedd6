"""Dedup Engine - decide whether a report is a meaningful price change"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from pricereports.core.config import settings
from pricereports.services.normalizer import NormalizedReport
from pricereports.services.observation_store import ObservationStore

logger = logging.getLogger(__name__)


class DedupOutcome(str, Enum):
    SKIPPED = "skipped"      # negative price, client asked us not to persist
    DUPLICATE = "duplicate"  # same price already current within the window
    PERSISTED = "persisted"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DedupEngine:
    """
    Per (store, item) persist-or-skip decision.

    Decision Logic:
    - price < 0: skip, no store access at all
    - no observation for the pair inside the lookback window: persist
    - latest observation has a different price (exact compare): persist
    - latest observation has the same price: duplicate, nothing written

    The lookup and the insert are not isolated from concurrent requests, so
    two identical submissions racing each other may both persist.
    """

    def __init__(
        self,
        store: ObservationStore,
        lookback: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.lookback = lookback if lookback is not None else timedelta(hours=settings.LOOKBACK_HOURS)
        self.clock = clock

    async def decide(self, report: NormalizedReport, reporter: str) -> DedupOutcome:
        if report.is_skip:
            return DedupOutcome.SKIPPED

        now = self.clock()
        latest = await self.store.latest_since(
            report.sku_id, report.store_id, now - self.lookback
        )

        if latest is not None and latest.price == report.price:
            logger.debug(
                "Duplicate price %s for %s@%s", report.price, report.sku_id, report.store_id
            )
            return DedupOutcome.DUPLICATE

        await self.store.add(report, reporter, created_at=now)
        return DedupOutcome.PERSISTED
