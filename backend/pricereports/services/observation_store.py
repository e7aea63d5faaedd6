"""Observation Store - async repository over the price_observations table"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pricereports.core.errors import StoreError
from pricereports.models.observation import PriceObservation
from pricereports.schemas.report import ObservationOut
from pricereports.services.normalizer import NormalizedReport
from pricereports.services.query_filter import ReportQuery

logger = logging.getLogger(__name__)


class ObservationStore:
    """
    Append-only access to price observations.

    Every operation opens its own session, so one store instance can serve
    many concurrent dedup decisions. Database failures surface as StoreError.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Store %s failed: %s", operation, exc)
            raise StoreError(f"Store {operation} failed") from exc

    async def latest_since(
        self, sku_id: str, store_id: str, since: datetime
    ) -> Optional[PriceObservation]:
        """Most recent observation for the pair created at or after ``since``."""
        async with self._session("lookup") as session:
            result = await session.execute(
                select(PriceObservation)
                .where(
                    PriceObservation.sku_id == sku_id,
                    PriceObservation.store_id == store_id,
                    PriceObservation.created_at >= since,
                )
                .order_by(PriceObservation.created_at.desc())
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def add(
        self, report: NormalizedReport, reporter: str, created_at: datetime
    ) -> PriceObservation:
        observation = PriceObservation(
            name=report.name,
            sku_id=report.sku_id,
            store_id=report.store_id,
            price=report.price,
            reporter=reporter,
            created_at=created_at,
        )
        async with self._session("insert") as session:
            session.add(observation)
            await session.commit()
        return observation

    async def has_reporter(self, reporter: str) -> bool:
        async with self._session("reporter check") as session:
            result = await session.execute(
                select(exists().where(PriceObservation.reporter == reporter))
            )
            return bool(result.scalar())

    async def fetch_page(self, query: ReportQuery) -> List[ObservationOut]:
        """Run a paginated read; id and reporter are never selected."""
        statement = select(
            PriceObservation.name,
            PriceObservation.sku_id,
            PriceObservation.store_id,
            PriceObservation.price,
            PriceObservation.created_at,
        ).where(PriceObservation.store_id == query.store_id)

        if query.sku_ids:
            statement = statement.where(PriceObservation.sku_id.in_(query.sku_ids))

        statement = (
            statement
            .order_by(PriceObservation.created_at.desc(), PriceObservation.id)
            .offset(query.offset)
            .limit(query.limit)
        )

        async with self._session("query") as session:
            result = await session.execute(statement)
            return [ObservationOut.model_validate(row._asdict()) for row in result.all()]
