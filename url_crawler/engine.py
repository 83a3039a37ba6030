# File: url_crawler/engine.py
"""url_crawler.engine: сборка зависимостей и запуск одного обхода."""

from __future__ import annotations

from url_crawler.config import CrawlerConfig
from url_crawler.crawler.crawler import AsyncCrawler, CrawlStats
from url_crawler.logger import get_logger
from url_crawler.storage import Persister, create_schema, make_engine

__all__ = ["start_crawl"]

logger = get_logger("engine")


async def start_crawl(cfg: CrawlerConfig) -> CrawlStats:
    """
    Готовит базу данных, запускает AsyncCrawler и возвращает статистику.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода; seed_url обязателен.
    """
    engine = make_engine(cfg.database_url)
    try:
        create_schema(engine)
        persister = Persister(engine)
        async with AsyncCrawler(cfg, persister) as crawler:
            stats = await crawler.crawl()
    except Exception as exc:
        logger.error("Crawl failed: %s", exc)
        raise
    finally:
        engine.dispose()
    return stats
