"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: formats.py
@DateTime: 2026-10-17
@Docs: Report format and upload type constants.
报告格式与上传类型常量。
"""

from enum import StrEnum

UPLOAD_MIME_TYPES: tuple[str, ...] = (
    "text/csv",
    "application/csv",
    "text/plain",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
    "application/vnd.ms-excel.sheet.macroEnabled.12",
)


class ReportFormat(StrEnum):
    """Supported report formats.
    支持的报告格式。
    """

    CSV = "csv"
    XLSX = "xlsx"


_EXTENSIONS: dict[ReportFormat, str] = {
    ReportFormat.CSV: ".csv",
    ReportFormat.XLSX: ".xlsx",
}


def extension_for(fmt: ReportFormat | str) -> str:
    """Return default file extension for a format.
    返回格式的默认文件扩展名。
    """
    return _EXTENSIONS[ReportFormat(fmt)]
