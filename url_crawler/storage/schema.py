"""
Table definitions for crawled pages and their content hierarchy.
"""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine

from url_crawler.logger import get_logger

__all__ = ("metadata", "page_table", "content_table", "create_schema", "make_engine")

logger = get_logger("storage")

metadata = MetaData()

page_table = Table(
    "page",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("url", Text, nullable=False),
    Column("title", Text, nullable=True),
    Column("status_code", Integer, nullable=True),
    Column("content_type", String(255), nullable=True),
    Column("last_modified", DateTime(timezone=True), nullable=True),
    Column("crawled_at", DateTime(timezone=True), nullable=False),
)

content_table = Table(
    "content",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("page_id", Integer, ForeignKey("page.id"), nullable=False, index=True),
    Column("tag_type", String(32), nullable=False),
    Column("sequence", String(255), nullable=False),
    Column("level", Integer, nullable=False),
    Column("text_content", Text, nullable=False),
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections get foreign-key enforcement."""
    engine = create_engine(database_url)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_schema(engine: Engine) -> None:
    metadata.create_all(engine)
    logger.debug("Schema ready on %s", engine.url.render_as_string(hide_password=True))
