# setup.py
from setuptools import setup, find_packages

setup(
    name="url_crawler",
    version="0.1.0",
    description="Breadth-first web crawler that stores pages and their content hierarchy",
    packages=find_packages(include=["url_crawler", "url_crawler.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12.3",
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "url_crawler=url_crawler.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
