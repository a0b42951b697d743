# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.
"""Unit tests for the repository layer (SQLite)."""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from kaiville_metrics.storage.models import MetricRecord
from kaiville_metrics.storage.repositories import MetricRepository, _json_path

DAY = date(2026, 3, 14)


@pytest.fixture
def repo(db):
    return MetricRepository(db.session_factory)


class TestMetricRepository:
    @pytest.mark.asyncio
    async def test_increment_creates_single_row(self, repo, db):
        await repo.increment("article_views", DAY, 2)
        await repo.increment("article_views", DAY, 3)
        records = await repo.list_range("article_views", DAY, DAY)
        assert len(records) == 1
        assert records[0].metric_value == 5
        assert records[0].metadata_ == {}
        assert records[0].created_at is not None
        assert records[0].updated_at is not None

    @pytest.mark.asyncio
    async def test_get_value_missing(self, repo):
        assert await repo.get_value("article_views", DAY) is None

    @pytest.mark.asyncio
    async def test_values_for_date(self, repo):
        await repo.increment("votes_cast", DAY, 4)
        await repo.increment("article_views", DAY, 1)
        await repo.increment("article_views", date(2026, 3, 13), 9)
        assert await repo.values_for_date(DAY) == {"article_views": 1, "votes_cast": 4}

    @pytest.mark.asyncio
    async def test_metadata_value_types_preserved(self, repo):
        meta = {"count": 3, "ratio": 0.5, "flag": True, "tags": ["a", "b"], "none": None}
        await repo.increment("cache_hits", DAY, 1, {"seed": 1})
        await repo.increment("cache_hits", DAY, 1, meta)
        records = await repo.list_range("cache_hits", DAY, DAY)
        assert records[0].metadata_ == {"seed": 1, **meta}

    @pytest.mark.asyncio
    async def test_metadata_key_with_dots(self, repo):
        await repo.increment("cache_hits", DAY, 1, {"a": 1})
        await repo.increment("cache_hits", DAY, 1, {"model.name": "x"})
        records = await repo.list_range("cache_hits", DAY, DAY)
        assert records[0].metadata_ == {"a": 1, "model.name": "x"}

    @pytest.mark.asyncio
    async def test_negative_value_refused_by_store(self, db):
        async with db.session() as session:
            session.add(MetricRecord(metric_name="x", metric_date=DAY, metric_value=-1, metadata_={}))
            with pytest.raises(IntegrityError):
                await session.commit()

    def test_json_path_quotes_key(self):
        assert _json_path("model.name") == '$."model.name"'
