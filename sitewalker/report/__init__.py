# File: sitewalker/report/__init__.py
"""sitewalker.report: Запись отчёта проверки ссылок, используемая CLI и тестами."""

from __future__ import annotations

from .json_report import report_path, write_test_report

__all__ = ["report_path", "write_test_report"]
