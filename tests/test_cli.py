# File: tests/test_cli.py
"""Тесты для CLI (`url_crawler.cli`) с использованием click.testing.CliRunner.
Проверяют команды `interactive`, `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import importlib
import json

import pytest
from click.testing import CliRunner
from url_crawler.cli import cli
from url_crawler.crawler.crawler import CrawlStats
from url_crawler.logger import configure

# the package re-exports the click group as `url_crawler.cli`, shadowing the module
cli_module = importlib.import_module("url_crawler.cli")


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    configure(level="INFO")


@pytest.fixture()
def captured(monkeypatch):
    """Патчим start_crawl: запоминаем конфиг и не ходим в сеть."""
    seen = []

    async def fake_crawl(cfg):
        seen.append(cfg)
        return CrawlStats(persisted=2, rejected=1)

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "UrlCrawler" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "crawler.json"
    cfg_file.write_text(json.dumps({"seed_url": "https://example.com", "max_pages": 4}), encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["seed_url"] == "https://example.com"
    assert data["max_pages"] == 4


def test_bad_config_file(tmp_path):
    cfg_file = tmp_path / "crawler.yaml"
    cfg_file.write_text("max_pages: -1\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_interactive_prompts(captured):
    result = CliRunner().invoke(cli, ["interactive"], input="example.com\n5\n")
    assert result.exit_code == 0, result.output
    assert "Enter website URL to crawl" in result.output
    assert "Enter maximum pages to crawl" in result.output
    assert "Crawling completed!" in result.output
    assert "persisted=2" in result.output
    assert captured[0].seed_url == "https://example.com"
    assert captured[0].max_pages == 5


def test_interactive_keeps_explicit_scheme(captured):
    result = CliRunner().invoke(cli, ["interactive"], input="http://example.com/start\n1\n")
    assert result.exit_code == 0, result.output
    assert captured[0].seed_url == "http://example.com/start"


@pytest.mark.parametrize("budget", ["many", "-3"])
def test_interactive_rejects_bad_budget(captured, budget):
    result = CliRunner().invoke(cli, ["interactive"], input=f"example.com\n{budget}\n")
    assert result.exit_code == 1
    assert captured == []


def test_interactive_zero_budget_is_accepted(captured):
    result = CliRunner().invoke(cli, ["interactive"], input="example.com\n0\n")
    assert result.exit_code == 0, result.output
    assert captured[0].max_pages == 0


def test_crawl_overrides(captured, tmp_path):
    db = f"sqlite:///{tmp_path / 'out.sqlite'}"
    result = CliRunner().invoke(
        cli,
        ["crawl", "example.org", "--max-pages", "9", "--ceiling", "1",
         "--delay", "0", "--concurrency", "3", "--database", db],
    )
    assert result.exit_code == 0, result.output
    cfg = captured[0]
    assert cfg.seed_url == "https://example.org"
    assert (cfg.max_pages, cfg.expansion_ceiling, cfg.request_delay, cfg.concurrency) == (9, 1, 0.0, 3)
    assert cfg.database_url == db


def test_crawl_error_exits(monkeypatch):
    async def broken(cfg):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, ["crawl", "example.org"])
    assert result.exit_code == 1
    assert "database is locked" in result.output
