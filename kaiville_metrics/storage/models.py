# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
ORM Models — Table definitions read and written by the metrics engine.

Owned tables (Base):
  - research_analytics: one row per (metric_name, metric_date) bucket

Collaborator tables (ContentBase, read-only mappings):
  - research_center_articles: only the columns used for counting
  - profiles: row count only

The content tables belong to the research center and already exist in
production; they are mapped here so counts can be expressed in SQLAlchemy
and created by tests.
"""

from __future__ import annotations

import uuid
from datetime import timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    BigInteger,
    JSON,
    String,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
MetadataType = JSON().with_variant(JSONB(), "postgresql")

# BIGSERIAL on Postgres; SQLite only autoincrements INTEGER PRIMARY KEY
IdType = BigInteger().with_variant(Integer(), "sqlite")


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp stored as UTC.

    SQLite keeps no offset, so values are converted to UTC on the way in
    (naive values are taken as UTC) and tagged UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    """Declarative base for tables owned by the metrics engine."""
    pass


class ContentBase(DeclarativeBase):
    """Declarative base for research center tables the engine only reads."""
    pass


# ── Metric Buckets ──────────────────────────────────────────

class MetricRecord(Base):
    __tablename__ = "research_analytics"

    id = Column(IdType, primary_key=True, autoincrement=True)
    metric_name = Column(String(64), nullable=False)
    metric_date = Column(Date, nullable=False)
    metric_value = Column(BigInteger, nullable=False, default=0)
    metadata_ = Column("metadata", MetadataType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        UniqueConstraint("metric_name", "metric_date", name="uq_research_analytics_bucket"),
        CheckConstraint("metric_value >= 0", name="ck_research_analytics_value_non_negative"),
        Index("idx_research_analytics_date", "metric_date"),
    )

    def __repr__(self):
        return f"<Metric {self.metric_name}@{self.metric_date}={self.metric_value}>"


# ── Research Center Content (read-only) ─────────────────────

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


class ResearchArticle(ContentBase):
    __tablename__ = "research_center_articles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    status = Column(String(32), nullable=False, default=STATUS_PENDING)
    moderated_at = Column(UTCDateTime(), nullable=True)

    __table_args__ = (
        Index("idx_research_articles_status_moderated", "status", "moderated_at"),
    )

    def __repr__(self):
        return f"<Article {self.id} status={self.status}>"


class Profile(ContentBase):
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    def __repr__(self):
        return f"<Profile {self.id}>"
