# File: sitewalker/utils.py
"""sitewalker.utils: Утилитарные функции для проверки URL, нормализации ссылок и имён файлов."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union
from urllib.parse import urlparse

from sitewalker.errors import OutputError
from sitewalker.logger import logger

__all__: Sequence[str] = (
    "ensure_directory",
    "is_valid_url",
    "normalize_link",
    "origin",
    "sanitize_filename",
    "trim_root_url",
)


def is_valid_url(url: str) -> bool:
    """Проверяет, что у URL есть схема и хост."""
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        logger.debug("URL validation error", extra={"url": url, "error": exc})
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def normalize_link(link: str) -> str:
    """Убирает пробелы по краям и один завершающий слеш."""
    return link.strip().removesuffix("/")


def trim_root_url(url: str) -> str:
    """Приводит корневой URL из командной строки к каноническому виду."""
    return url.strip().removesuffix("/")


def origin(url: str) -> str:
    """Возвращает ``scheme://host[:port]`` для URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def sanitize_filename(url: str, extension: str, directory: Union[str, Path, None] = None) -> Path:
    """Имя файла из URL: ``/`` → ``-``, ``:`` удаляется, добавляется расширение."""
    name = url.replace("/", "-").replace(":", "")
    filename = f"{name}.{extension.lstrip('.')}"
    return Path(directory) / filename if directory is not None else Path(filename)


def ensure_directory(path: Union[str, Path]) -> Path:
    """Создаёт каталог (со всеми родителями), если его нет."""
    p = Path(path).expanduser()
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("directory not found", extra={"directory": p, "error": exc})
        raise OutputError(f"cannot create directory {p}: {exc}") from exc
    return p
