"""
Persister: writes one page row and its whole content hierarchy as a single
transaction.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from url_crawler.crawler.models import ContentNode, PageRecord
from url_crawler.errors import PersistenceError
from url_crawler.logger import get_logger
from url_crawler.storage.schema import content_table, page_table

__all__ = ("Persister",)

logger = get_logger("storage")


class Persister:
    """Commits :class:`PageRecord` + :class:`ContentNode` batches atomically."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def commit(self, page: PageRecord, nodes: Sequence[ContentNode]) -> int:
        """
        Insert *page*, attach its generated id to *nodes*, insert them and commit.

        Either everything is written or nothing is: any database error rolls
        back the page row as well and is re-raised as :class:`PersistenceError`.

        :return: generated page id
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    page_table.insert().values(
                        url=page.url,
                        title=page.title or None,
                        status_code=page.status_code,
                        content_type=page.content_type or None,
                        last_modified=page.last_modified,
                        crawled_at=page.crawled_at,
                    )
                )
                page_id = result.inserted_primary_key[0]
                owned = [replace(node, page_id=page_id) for node in nodes]
                if owned:
                    conn.execute(
                        content_table.insert(),
                        [
                            {
                                "page_id": node.page_id,
                                "tag_type": node.tag_type,
                                "sequence": node.sequence_path,
                                "level": node.level,
                                "text_content": node.text,
                            }
                            for node in owned
                        ],
                    )
        except SQLAlchemyError as exc:
            logger.error("Error saving page %s: %s", page.url, exc)
            raise PersistenceError(page.url, exc) from exc

        logger.info("Saved page %s (page id %s, %d content nodes)", page.url, page_id, len(nodes))
        return page_id

    def count_pages(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(page_table)).scalar_one()

    def count_content(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(content_table)).scalar_one()

    def load_nodes(self, page_id: int) -> List[ContentNode]:
        """Read back a page's content nodes in insertion (document) order."""
        query = (
            select(
                content_table.c.page_id,
                content_table.c.tag_type,
                content_table.c.sequence,
                content_table.c.level,
                content_table.c.text_content,
            )
            .where(content_table.c.page_id == page_id)
            .order_by(content_table.c.id)
        )
        with self.engine.connect() as conn:
            return [
                ContentNode(
                    page_id=row.page_id,
                    tag_type=row.tag_type,
                    sequence_path=row.sequence,
                    level=row.level,
                    text=row.text_content,
                )
                for row in conn.execute(query)
            ]
