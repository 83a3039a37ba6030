"""
Загрузка и валидация конфигурации краулера UrlCrawler.
Схема описана через Pydantic, файлы читаются из YAML или JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from url_crawler.utils import coerce_seed_url

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; WebCrawler/1.0)"


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: Optional[str] = Field(None, description="Стартовый URL обхода.")
    max_pages: int = Field(100, ge=0, description="Бюджет сохранённых страниц (0 - ничего не обходить).")
    expansion_ceiling: int = Field(
        2, ge=0, description="Ссылки раскрываются, пока глубина строго меньше этого значения."
    )
    request_delay: float = Field(2.0, ge=0, description="Пауза между запросами к одному хосту (секунд).")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(1, ge=1, description="Число одновременно обрабатываемых страниц.")
    retry_times: int = Field(0, ge=0, description="Повторы только для сетевых сбоев.")
    retry_backoff: float = Field(1.0, ge=0, description="Базовая пауза экспоненциального backoff.")
    database_url: str = Field("sqlite:///urlcrawler.sqlite", min_length=1, description="SQLAlchemy URL.")

    @field_validator("seed_url", mode="before")
    def _coerce_seed(cls, v: Any) -> Any:
        if isinstance(v, str):
            return coerce_seed_url(v)
        return v

    @field_validator("seed_url")
    def _check_seed_scheme(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"seed_url must be an absolute http(s) URL, got {v!r}")
        return v

    def with_overrides(self, **overrides: Any) -> CrawlerConfig:
        """Return a re-validated copy; ``None`` values are ignored."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlerConfig(**data)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути берётся configs/default.yaml, а если его нет - значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "DEFAULT_USER_AGENT", "ValidationError", "load_config"]
