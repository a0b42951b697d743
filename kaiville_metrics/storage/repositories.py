# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Repository Layer — Store access for metric buckets and content counts.

All methods create their own session and commit within it, so concurrent
callers never share a transaction.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import bindparam, func, literal_column, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kaiville_metrics.storage.models import MetricRecord, Profile, ResearchArticle

logger = logging.getLogger("kaiville.repository")

_metrics = MetricRecord.__table__
_BUCKET_KEY = ["metric_name", "metric_date"]


# ── Metric Repository ───────────────────────────────────────

class MetricRepository:
    """Reads and atomically increments research_analytics buckets."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def increment(
        self,
        metric_name: str,
        metric_date: date,
        delta: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Add `delta` to a bucket, creating it on first use.

        Single INSERT ... ON CONFLICT DO UPDATE statement: the addition and the
        metadata merge are evaluated by the database, so concurrent increments
        to the same bucket can never overwrite each other.
        """
        metadata = metadata or {}
        async with self._session_factory() as session:
            stmt = self._build_upsert(
                session.bind.dialect.name, metric_name, metric_date, delta, metadata
            )
            await session.execute(stmt)
            await session.commit()
        logger.debug("Incremented %s@%s by %d", metric_name, metric_date, delta)

    def _build_upsert(
        self,
        dialect: str,
        metric_name: str,
        metric_date: date,
        delta: int,
        metadata: Dict[str, Any],
    ):
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:
            raise NotImplementedError(f"No atomic upsert for dialect '{dialect}'")

        stmt = insert(_metrics).values(
            metric_name=metric_name,
            metric_date=metric_date,
            metric_value=delta,
            metadata=metadata,
        )
        current = _metrics.c["metric_value"]
        updates = {
            "metric_value": current + stmt.excluded["metric_value"],
            "updated_at": func.current_timestamp(),
        }
        if metadata:
            updates["metadata"] = _merge_metadata(dialect, metadata, stmt)

        return stmt.on_conflict_do_update(index_elements=_BUCKET_KEY, set_=updates)

    async def get_value(self, metric_name: str, metric_date: date) -> Optional[int]:
        """Value of one bucket, or None when the bucket does not exist."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MetricRecord.metric_value).where(
                    MetricRecord.metric_name == metric_name,
                    MetricRecord.metric_date == metric_date,
                )
            )
            return result.scalar_one_or_none()

    async def list_range(
        self, metric_name: str, start: date, end: date
    ) -> List[MetricRecord]:
        """Buckets for one metric with start <= date <= end, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MetricRecord)
                .where(MetricRecord.metric_name == metric_name)
                .where(MetricRecord.metric_date >= start)
                .where(MetricRecord.metric_date <= end)
                .order_by(MetricRecord.metric_date.asc())
            )
            return list(result.scalars().all())

    async def values_for_date(self, metric_date: date) -> Dict[str, int]:
        """name -> value for every bucket on one date."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MetricRecord.metric_name, MetricRecord.metric_value)
                .where(MetricRecord.metric_date == metric_date)
                .order_by(MetricRecord.metric_name)
            )
            return {name: value for name, value in result.all()}


def _merge_metadata(dialect: str, metadata: Dict[str, Any], stmt):
    """Shallow merge (new keys win) expressed in SQL for the given dialect."""
    current = _metrics.c["metadata"]
    if dialect == "postgresql":
        # jsonb || jsonb replaces top-level keys only
        return func.coalesce(current, func.jsonb_build_object()).op("||")(
            stmt.excluded["metadata"]
        )

    # SQLite: one json_set path per incoming key
    args: List[Any] = []
    for i, (key, value) in enumerate(metadata.items()):
        args.append(bindparam(f"meta_path_{i}", _json_path(key)))
        args.append(func.json(bindparam(f"meta_value_{i}", json.dumps(value, default=str))))
    return func.json_set(func.coalesce(current, literal_column("'{}'")), *args)


def _json_path(key: str) -> str:
    # keys containing double quotes are rejected before reaching the store
    return f'$."{key}"'


# ── Content Repository (collaborator, read-only) ────────────

class ContentRepository:
    """Point-in-time counts from the research center content tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_articles(self, status: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count())
                .select_from(ResearchArticle)
                .where(ResearchArticle.status == status)
            )
            return result.scalar_one()

    async def count_moderated(
        self, status: str, since: datetime, until: datetime
    ) -> int:
        """Articles in `status` with since <= moderated_at < until."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count())
                .select_from(ResearchArticle)
                .where(ResearchArticle.status == status)
                .where(ResearchArticle.moderated_at >= since)
                .where(ResearchArticle.moderated_at < until)
            )
            return result.scalar_one()

    async def count_users(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count()).select_from(Profile))
            return result.scalar_one()
