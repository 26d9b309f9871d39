# === FILE: sitewalker/config.py ===
"""
Модуль для загрузки и валидации параметров запуска SiteWalker.
Используется Pydantic для описания схемы и проверки данных; файл конфигурации
(YAML или JSON) задаёт значения по умолчанию, флаги CLI их переопределяют.
"""
from __future__ import annotations

import errno
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "OutputFormat",
    "TestTarget",
    "CrawlOptions",
    "load_config",
    "build_options",
]


class OutputFormat(str, Enum):
    """Where the result of a run goes."""

    CONSOLE = "console"
    XML = "xml"
    JSON = "json"


class TestTarget(str, Enum):
    """Sub-mode of the ``test`` command."""

    __test__ = False  # not a pytest class

    LINKS = "links"
    IMAGES = "images"


class CrawlOptions(BaseModel):
    """Параметры одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    delay_ms: int = Field(0, ge=0, description="Пауза перед каждым HTTP-запросом (мс).")
    debug: bool = Field(False, description="Подробные логи, без анимации.")
    directory: Optional[Path] = Field(None, description="Каталог для XML/JSON/скриншотов.")
    output: OutputFormat = Field(OutputFormat.CONSOLE, description="Формат вывода результата.")
    test_target: TestTarget = Field(TestTarget.LINKS, description="Что проверяет команда test.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteWalker/0.1", min_length=1, description="Заголовок User-Agent.")
    descend_external: bool = Field(
        True, description="Проверять ли внешние ссылки в режиме test."
    )

    @field_validator("directory", mode="before")
    def _expand_directory(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v.strip() else None
        return v

    @model_validator(mode="after")
    def _check_directory_for_files(self) -> CrawlOptions:
        if self.output in (OutputFormat.XML, OutputFormat.JSON) and self.directory is None:
            raise ValueError(f"output format {self.output.value!r} requires a directory")
        return self

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


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


def load_config(path: Union[str, Path]) -> dict[str, Any]:
    """
    Читает YAML или JSON и возвращает словарь значений для CrawlOptions.
    При отсутствии файла бросает FileNotFoundError.
    """
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def build_options(defaults: Optional[dict[str, Any]] = None, **overrides: Any) -> CrawlOptions:
    """
    Собирает CrawlOptions: значения ``defaults`` (из файла конфигурации), поверх
    них непустые ``overrides`` из командной строки.
    """
    data: dict[str, Any] = dict(defaults or {})
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlOptions(**data)
