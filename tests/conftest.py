# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Shared test fixtures for all metrics tests.

Unit tests run against a file-backed SQLite database per test; the same
repositories and upsert code paths are used as in production.
"""

import uuid
from datetime import date, datetime
from typing import Optional

import pytest

from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.core.vocabulary import MetricVocabulary
from kaiville_metrics.storage.database import Database
from kaiville_metrics.storage.models import Profile, ResearchArticle

TODAY = date(2026, 3, 14)


class ContentSeeder:
    """Writes research center rows the engine only ever reads."""

    def __init__(self, db: Database):
        self._db = db

    async def article(self, status: str, moderated_at: Optional[datetime] = None) -> uuid.UUID:
        article_id = uuid.uuid4()
        async with self._db.session() as session:
            session.add(ResearchArticle(id=article_id, status=status, moderated_at=moderated_at))
            await session.commit()
        return article_id

    async def articles(self, status: str, count: int, moderated_at: Optional[datetime] = None) -> None:
        for _ in range(count):
            await self.article(status, moderated_at)

    async def profiles(self, count: int) -> None:
        async with self._db.session() as session:
            session.add_all([Profile(id=uuid.uuid4()) for _ in range(count)])
            await session.commit()


@pytest.fixture
async def db(tmp_path):
    """Fresh SQLite database with engine-owned and content tables."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path}/metrics.db")
    await database.create_tables(include_content=True)
    yield database
    await database.close()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def engine(db) -> MetricsEngine:
    """MetricsEngine with a fixed clock (TODAY) and the reject policy."""
    return MetricsEngine.from_database(db, clock=lambda: TODAY)


@pytest.fixture
def quarantine_engine(db) -> MetricsEngine:
    vocabulary = MetricVocabulary(policy="quarantine")
    return MetricsEngine.from_database(db, vocabulary=vocabulary, clock=lambda: TODAY)


@pytest.fixture
def seed(db) -> ContentSeeder:
    return ContentSeeder(db)
