# sitewalker/report/json_report.py

"""
Генерация JSON-отчёта проверки ссылок для проекта SiteWalker.

Отчёт: один JSON-объект ``{"root": ..., "results": [...]}``, дописываемый в
файл ``<каталог>/<корневой-URL>.json``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Union

from sitewalker.crawler.models import LinkRecord
from sitewalker.errors import OutputError
from sitewalker.logger import logger
from sitewalker.utils import ensure_directory, sanitize_filename


def report_path(root: str, directory: Union[str, Path]) -> Path:
    """Путь к файлу отчёта для корневого URL ``root``."""
    return sanitize_filename(root, "json", directory)


def write_test_report(
    root: str, records: Iterable[LinkRecord], directory: Union[str, Path]
) -> Path:
    """
    Дописывает отчёт по ``records`` в файл каталога ``directory``.

    :param root: корневой URL обхода
    :param records: результаты проверки ссылок
    :param directory: каталог для отчёта (создаётся при необходимости)
    :return: Path сохранённого файла

    Пример:
    ```python
    from sitewalker.report import write_test_report
    path = write_test_report("https://example.com", strategy.records, "reports")
    print(f"JSON report saved to: {path}")
    ```
    """
    output = report_path(root, ensure_directory(directory))
    data = {"root": root, "results": list(records)}

    try:
        with output.open("a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
    except OSError as exc:
        logger.error("error creating JSON file", extra={"path": output, "error": exc})
        raise OutputError(f"cannot write {output}: {exc}") from exc

    logger.info("test results saved", extra={"path": output, "results": len(data["results"])})
    return output
