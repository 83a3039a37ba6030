# File: tests/conftest.py
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from url_crawler.config import CrawlerConfig
from url_crawler.storage import Persister, create_schema, make_engine


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    """SQLite database file inside the test's temporary directory."""
    return f"sqlite:///{tmp_path / 'crawl.sqlite'}"


@pytest.fixture()
def persister(db_url: str):
    """A Persister bound to a fresh schema."""
    engine = make_engine(db_url)
    create_schema(engine)
    yield Persister(engine)
    engine.dispose()


@pytest.fixture()
def basic_config(db_url: str) -> CrawlerConfig:
    """
    Return a valid CrawlerConfig without politeness delay.
    """
    return CrawlerConfig(
        seed_url="http://example.com",
        max_pages=50,
        request_delay=0,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        database_url=db_url,
    )


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start aiohttp apps on free ports; yields a coroutine returning the base URL."""
    runners: list[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _serve
    finally:
        for runner in runners:
            await runner.cleanup()
