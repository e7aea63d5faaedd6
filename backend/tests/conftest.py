import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so point them at a scratch database first
_TEST_DIR = tempfile.mkdtemp(prefix="pricereports-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/test.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["NOTIFY_WEBHOOK_URL"] = ""
os.environ["FINGERPRINT_SALT"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from pricereports.core.database import Base, engine
from pricereports.core.errors import StoreError
from pricereports.main import app
from pricereports.models.observation import PriceObservation

NOW = datetime(2025, 2, 7, 12, 0, tzinfo=timezone.utc)


class FakeStore:
    """In-memory stand-in for ObservationStore that records every access."""

    def __init__(self):
        self.rows = []
        self.reads = []
        self.writes = []
        self.failing_skus = set()
        self.reporter_check_fails = False

    def seed(self, sku_id, store_id, price, created_at, reporter="seed"):
        self.rows.append(PriceObservation(
            sku_id=sku_id,
            store_id=store_id,
            price=price,
            reporter=reporter,
            created_at=created_at,
        ))

    async def latest_since(self, sku_id, store_id, since):
        self.reads.append((sku_id, store_id))
        if sku_id in self.failing_skus:
            raise StoreError("Store lookup failed")
        matches = [
            row for row in self.rows
            if row.sku_id == sku_id and row.store_id == store_id and row.created_at >= since
        ]
        # Let sibling decisions run between the lookup and the insert
        await asyncio.sleep(0)
        return max(matches, key=lambda row: row.created_at) if matches else None

    async def add(self, report, reporter, created_at):
        observation = PriceObservation(
            name=report.name,
            sku_id=report.sku_id,
            store_id=report.store_id,
            price=report.price,
            reporter=reporter,
            created_at=created_at,
        )
        self.writes.append(observation)
        self.rows.append(observation)
        return observation

    async def has_reporter(self, reporter):
        if self.reporter_check_fails:
            raise StoreError("Store reporter check failed")
        return any(row.reporter == reporter for row in self.rows)


class FakeNotifier:
    def __init__(self):
        self.contributors = []
        self.critical = []

    async def notify_new_contributor(self, address, report_count):
        self.contributors.append((address, report_count))

    async def report_critical(self, message):
        self.critical.append(message)


async def _reset_db(rows=()):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
        if rows:
            await conn.execute(insert(PriceObservation), list(rows))
    await engine.dispose()


def reset_db(rows=()):
    asyncio.run(_reset_db(rows))


def observation_row(sku_id, store_id, price, minutes_ago, name=None, reporter="seed"):
    return {
        "name": name,
        "sku_id": sku_id,
        "store_id": store_id,
        "price": price,
        "reporter": reporter,
        "created_at": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    }


@pytest.fixture()
def fake_store():
    return FakeStore()


@pytest.fixture()
def seeded_client():
    """Factory: reset the database with the given rows and open a client."""
    opened = []

    def _open(rows=()):
        reset_db(rows)
        test_client = TestClient(app)
        test_client.__enter__()
        opened.append(test_client)
        app.state.notifier = FakeNotifier()
        return test_client

    yield _open

    for test_client in opened:
        test_client.__exit__(None, None, None)


@pytest.fixture()
def client(seeded_client):
    return seeded_client()


@pytest.fixture()
def notifier(client):
    return app.state.notifier
