# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone

import pytest
from aiohttp import ClientConnectionError, ClientSession, web

from url_crawler.crawler.fetcher import Fetcher, HostRateLimiter, parse_last_modified
from url_crawler.crawler.models import Failed, FetchResult, Rejected


@pytest.fixture()
def fetch_config(basic_config):
    return basic_config.with_overrides(retry_times=0, retry_backoff=0)


AGENTS = web.AppKey("agents", list)


def make_app(hits: dict[str, int] | None = None) -> web.Application:
    app = web.Application()
    seen_agents: list[str] = []
    app[AGENTS] = seen_agents

    async def page(request):
        seen_agents.append(request.headers.get("User-Agent", ""))
        return web.Response(
            text="<html><body><p>hi</p></body></html>",
            content_type="text/html",
            headers={"Last-Modified": "Wed, 21 Oct 2015 07:28:00 GMT"},
        )

    async def missing(_):
        return web.Response(status=404, text="<h1>nope</h1>", content_type="text/html")

    async def plain(_):
        return web.Response(text="just text", content_type="text/plain")

    async def broken(_):
        if hits is not None:
            hits["broken"] = hits.get("broken", 0) + 1
        return web.Response(status=500)

    app.router.add_get("/page", page)
    app.router.add_get("/missing", missing)
    app.router.add_get("/plain", plain)
    app.router.add_get("/broken", broken)
    return app


@pytest.mark.asyncio()
async def test_html_page_is_accepted(serve, fetch_config):
    app = make_app()
    base = await serve(app)
    async with ClientSession(headers={"User-Agent": fetch_config.user_agent}) as session:
        outcome = await Fetcher(session, fetch_config).fetch(f"{base}/page")

    assert isinstance(outcome, FetchResult)
    assert outcome.status_code == 200
    assert outcome.content_type == "text/html"
    assert "<p>hi</p>" in outcome.body
    assert outcome.last_modified == datetime(2015, 10, 21, 7, 28, tzinfo=timezone.utc)
    assert app[AGENTS] == ["TestAgent/1.0"]


@pytest.mark.asyncio()
@pytest.mark.parametrize("path,status", [("/missing", 404), ("/plain", 200)])
async def test_rejections(serve, fetch_config, path, status):
    base = await serve(make_app())
    async with ClientSession() as session:
        outcome = await Fetcher(session, fetch_config).fetch(f"{base}{path}")

    assert isinstance(outcome, Rejected)
    assert outcome.status_code == status


@pytest.mark.asyncio()
async def test_rejected_is_never_retried(serve, fetch_config):
    hits: dict[str, int] = {}
    base = await serve(make_app(hits))
    cfg = fetch_config.with_overrides(retry_times=3)
    async with ClientSession() as session:
        outcome = await Fetcher(session, cfg).fetch(f"{base}/broken")

    assert isinstance(outcome, Rejected)
    assert hits["broken"] == 1


@pytest.mark.asyncio()
async def test_connection_refused_is_failed(unused_tcp_port, fetch_config):
    async with ClientSession() as session:
        outcome = await Fetcher(session, fetch_config).fetch(f"http://127.0.0.1:{unused_tcp_port}/")

    assert isinstance(outcome, Failed)
    assert outcome.url.endswith("/")
    assert outcome.error


@pytest.mark.asyncio()
async def test_transport_faults_are_retried(monkeypatch, fetch_config):
    cfg = fetch_config.with_overrides(retry_times=2)
    calls = {"n": 0}
    expected = FetchResult(url="http://x/", body="<html></html>", status_code=200, content_type="text/html")

    async def flaky(self, url):
        calls["n"] += 1
        if calls["n"] <= 2:
            raise ClientConnectionError("reset by peer")
        return expected

    monkeypatch.setattr(Fetcher, "_request", flaky)
    async with ClientSession() as session:
        outcome = await Fetcher(session, cfg).fetch("http://x/")

    assert outcome is expected
    assert calls["n"] == 3


@pytest.mark.asyncio()
async def test_retries_are_bounded(monkeypatch, fetch_config):
    cfg = fetch_config.with_overrides(retry_times=1)
    calls = {"n": 0}

    async def always_down(self, url):
        calls["n"] += 1
        raise asyncio.TimeoutError()

    monkeypatch.setattr(Fetcher, "_request", always_down)
    async with ClientSession() as session:
        outcome = await Fetcher(session, cfg).fetch("http://x/")

    assert isinstance(outcome, Failed)
    assert outcome.error == "TimeoutError"
    assert calls["n"] == 2


@pytest.mark.asyncio()
async def test_rate_limit_is_per_host():
    limiter = HostRateLimiter(0.2)
    start = time.monotonic()
    await limiter.wait("http://a.test/1")
    await limiter.wait("http://b.test/1")
    assert time.monotonic() - start < 0.15
    await limiter.wait("http://a.test/2")
    assert time.monotonic() - start >= 0.2


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Wed, 21 Oct 2015 07:28:00 GMT", datetime(2015, 10, 21, 7, 28, tzinfo=timezone.utc)),
        ("not a date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_last_modified(value, expected):
    assert parse_last_modified(value) == expected
