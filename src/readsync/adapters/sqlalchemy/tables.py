"""SQLAlchemy Core tables for the catalog and the tracking records."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)

metadata = MetaData()

catalog_entries_table = Table(
    "catalog_entries",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("title", Text, nullable=False),
    Column("alternative_titles", JSON, nullable=False, default=list),
    Column("cover_image", Text, nullable=True),
    Column("external_id", String(64), nullable=True),
    Column("data_source", String(32), nullable=True),
    Column("is_adult", Boolean, nullable=False, default=False),
    Index("ix_catalog_entries_external", "data_source", "external_id"),
)

tracking_records_table = Table(
    "tracking_records",
    metadata,
    Column("user_id", String(64), nullable=False),
    Column("catalog_entry_id", String(64), nullable=False),
    Column("status", String(32), nullable=False),
    Column("current_chapter", Integer, nullable=True),
    Column("current_volume", Integer, nullable=True),
    Column("rating", Float, nullable=True),
    Column("rated_at", DateTime(timezone=True), nullable=True),
    Column("start_date", Date, nullable=True),
    Column("finish_date", Date, nullable=True),
    Column("notes", Text, nullable=True),
    Column("last_read_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    PrimaryKeyConstraint("user_id", "catalog_entry_id", name="pk_tracking_records"),
)
