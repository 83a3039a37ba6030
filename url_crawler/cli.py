#!/usr/bin/env python3
"""
Точка входа для запуска краулера UrlCrawler через командную строку.

Команды:
  interactive  Спросить стартовый URL и бюджет страниц, затем запустить обход
  crawl        Запустить обход без вопросов (URL передаётся аргументом)
  config       Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию

Пример:
  url_crawler crawl example.com --max-pages 20 --database sqlite:///pages.sqlite
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from url_crawler import __version__
from url_crawler.config import CrawlerConfig, load_config
from url_crawler.engine import start_crawl
from url_crawler.logger import configure
from url_crawler.utils import coerce_seed_url

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _run(cfg: CrawlerConfig) -> None:
    try:
        stats = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')
    click.echo(f'Crawling completed! {stats.summary()}')


def _override(cfg: CrawlerConfig, **overrides) -> CrawlerConfig:
    try:
        return cfg.with_overrides(**overrides)
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='UrlCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд UrlCrawler CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('interactive', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def interactive(ctx):
    """Спросить URL и бюджет страниц, затем запустить обход."""
    cfg = ctx.obj['config']
    click.echo('Web Crawler Started!')
    seed = coerce_seed_url(click.prompt('Enter website URL to crawl', type=str))
    raw_budget = click.prompt('Enter maximum pages to crawl', type=str)
    try:
        max_pages = int(raw_budget.strip())
    except ValueError:
        print_error(f'Ожидалось целое число страниц, получено: {raw_budget!r}')
    _run(_override(cfg, seed_url=seed, max_pages=max_pages))


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-pages', '-n', 'max_pages', type=int, default=None,
              help='Бюджет сохранённых страниц (override max_pages)')
@click.option('--ceiling', 'expansion_ceiling', type=int, default=None,
              help='Глубина, до которой раскрываются ссылки')
@click.option('--delay', 'request_delay', type=float, default=None,
              help='Пауза между запросами к одному хосту (секунд)')
@click.option('--concurrency', type=int, default=None,
              help='Число одновременно обрабатываемых страниц')
@click.option('--database', 'database_url', default=None,
              help='SQLAlchemy URL базы данных')
@click.pass_context
def crawl(ctx, url, max_pages, expansion_ceiling, request_delay, concurrency, database_url):
    """Запустить обход с URL из аргумента."""
    cfg = _override(
        ctx.obj['config'],
        seed_url=url,
        max_pages=max_pages,
        expansion_ceiling=expansion_ceiling,
        request_delay=request_delay,
        concurrency=concurrency,
        database_url=database_url,
    )
    click.echo(f'Starting crawl from: {cfg.seed_url}')
    _run(cfg)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
