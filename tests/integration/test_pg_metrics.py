# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
"""Integration tests against a real PostgreSQL: atomic upsert and JSONB merge."""

import asyncio
import uuid
from datetime import date, datetime, timezone

import pytest

from kaiville_metrics.analytics.engine import MetricsEngine
from kaiville_metrics.storage.models import Profile, ResearchArticle

DAY = date(2026, 3, 14)


@pytest.fixture
def pg_engine(pg_db):
    return MetricsEngine.from_database(pg_db, clock=lambda: DAY)


class TestPostgresUpsert:
    @pytest.mark.asyncio
    async def test_dialect(self, pg_db):
        assert pg_db.dialect == "postgresql"
        assert await pg_db.ping() is True

    @pytest.mark.asyncio
    async def test_concurrent_increments(self, pg_engine):
        results = await asyncio.gather(
            *(pg_engine.track_metric("article_views", 1) for _ in range(100))
        )
        assert all(results)
        assert await pg_engine.get_metric("article_views") == 100

    @pytest.mark.asyncio
    async def test_concurrent_first_writes_create_one_row(self, pg_engine):
        await asyncio.gather(*(pg_engine.track_metric("votes_cast", 2) for _ in range(20)))
        points = await pg_engine.get_metric_range("votes_cast", DAY, DAY)
        assert len(points) == 1
        assert points[0].value == 40

    @pytest.mark.asyncio
    async def test_jsonb_shallow_merge(self, pg_engine):
        await pg_engine.track_metric("llm_api_calls", 1, {"model": "a", "nested": {"x": 1}})
        await pg_engine.track_metric("llm_api_calls", 1, {"model": "b", "nested": {"y": 2}})
        await pg_engine.track_metric("llm_api_calls", 1)
        points = await pg_engine.get_metric_range("llm_api_calls", DAY, DAY)
        assert points[0].value == 3
        assert points[0].metadata == {"model": "b", "nested": {"y": 2}}

    @pytest.mark.asyncio
    async def test_zero_delta(self, pg_engine):
        assert await pg_engine.track_metric("cache_hits", 0) is True
        assert await pg_engine.get_metric("cache_hits") == 0


class TestPostgresContentQueries:
    @pytest.mark.asyncio
    async def test_dashboard_and_approval_rate(self, pg_db, pg_engine):
        moderated = datetime(2026, 3, 14, 8, 30, tzinfo=timezone.utc)
        async with pg_db.session() as session:
            session.add_all(
                [ResearchArticle(id=uuid.uuid4(), status="approved", moderated_at=moderated) for _ in range(3)]
                + [ResearchArticle(id=uuid.uuid4(), status="rejected", moderated_at=moderated)]
                + [ResearchArticle(id=uuid.uuid4(), status="pending")]
                + [Profile(id=uuid.uuid4()) for _ in range(2)]
            )
            await session.commit()
        await pg_engine.track_metric("search_queries", 5)

        summary = await pg_engine.get_dashboard_summary()
        assert summary.today == {"search_queries": 5}
        assert summary.totals.articles == 3
        assert summary.totals.pending_moderation == 1
        assert summary.totals.users == 2

        assert await pg_engine.get_approval_rate(DAY, DAY) == 75.0
        assert await pg_engine.get_approval_rate("2026-03-15", "2026-03-20") == 0.0
