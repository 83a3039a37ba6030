# cli.py

"""
Точка входа для запуска UrlCrawler из корня репозитория без установки пакета.

Пример запуска:
    python cli.py interactive
    python cli.py --config configs/default.yaml crawl example.com --max-pages 10
"""
from url_crawler.cli import cli

if __name__ == '__main__':
    cli()
