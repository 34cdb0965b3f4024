"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: deps.py
@DateTime: 2026-10-17
@Docs: Lazy imports of the spreadsheet libraries.
表格库的延迟导入。
"""

from typing import Any

from sensitive_info_extractor.exceptions import ExtractorError


def _missing(name: str, exc: Exception) -> ExtractorError:
    return ExtractorError(
        message=f"Required dependency not installed: {name} / 缺少必需依赖: {name}",
        details={"error": str(exc)},
        error_code="missing_dependency",
    )


def require_openpyxl() -> Any:
    """
    Import openpyxl.
    导入 openpyxl。

    Raises:
        ExtractorError: When openpyxl cannot be imported.
        ExtractorError: 无法导入 openpyxl 时抛出。
    """
    try:
        import openpyxl

        return openpyxl
    except ImportError as exc:
        raise _missing("openpyxl", exc) from exc


def require_polars() -> Any:
    """
    Import polars.
    导入 polars。

    Raises:
        ExtractorError: When polars cannot be imported.
        ExtractorError: 无法导入 polars 时抛出。
    """
    try:
        import polars as pl

        return pl
    except ImportError as exc:
        raise _missing("polars", exc) from exc
