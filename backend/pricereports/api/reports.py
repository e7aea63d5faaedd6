"""Report endpoints - batch ingestion and store/item reads"""
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from pricereports.api.responses import envelope
from pricereports.core.config import settings
from pricereports.core.database import AsyncSessionLocal
from pricereports.core.rate_limit import client_address, limiter
from pricereports.schemas.report import ReportBatchRequest
from pricereports.services.batch_coordinator import BatchCoordinator
from pricereports.services.dedup_engine import DedupEngine
from pricereports.services.fingerprint import fingerprint
from pricereports.services.normalizer import normalize_batch
from pricereports.services.notifier import Notifier
from pricereports.services.observation_store import ObservationStore
from pricereports.services.query_filter import build_query

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store() -> ObservationStore:
    return ObservationStore(AsyncSessionLocal)


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


@router.post("/reports")
@limiter.limit(settings.RATE_LIMIT)
async def submit_reports(
    request: Request,
    data: ReportBatchRequest,
    background_tasks: BackgroundTasks,
    store: ObservationStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Accept a batch of price reports.

    The whole batch is validated before any store access. Each report then
    gets its own concurrent dedup decision; the response only says the batch
    was accepted, never which reports were persisted.
    """
    batch = normalize_batch(data.reports, data.version)
    logger.debug("Received %d reports (version %d)", len(batch), data.version)

    address = client_address(request)
    reporter = fingerprint(address)

    coordinator = BatchCoordinator(store, DedupEngine(store))
    outcome = await coordinator.process(batch, reporter)

    if outcome.new_contributor:
        # Runs after the response has been sent
        background_tasks.add_task(notifier.notify_new_contributor, address, outcome.accepted)

    return envelope(200, "OK")


@router.get("/reports")
async def list_reports(
    storeId: Optional[str] = Query(None, description="Store to read"),
    itemIds: Optional[List[str]] = Query(None, description="Restrict to these items"),
    itemIdsBracketed: Optional[List[str]] = Query(None, alias="itemIds[]", include_in_schema=False),
    page: int = Query(0, description="Zero-based page of results"),
    store: ObservationStore = Depends(get_store),
):
    """Newest-first observations for a store, one page at a time."""
    query = build_query(storeId, (itemIds or []) + (itemIdsBracketed or []), page)
    logger.debug("Received query: %s", query)

    observations = await store.fetch_page(query)
    return envelope(
        200,
        "OK",
        [observation.model_dump(mode="json", by_alias=True) for observation in observations],
    )
