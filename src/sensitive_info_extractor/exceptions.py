"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: exceptions.py
@DateTime: 2026-10-17
@Docs: Extractor error hierarchy.
敏感信息提取异常体系。
"""

from typing import Any


class ExtractorError(Exception):
    """
    Extractor errors.
    提取异常。

    Errors raised while loading, scanning or reporting.
    加载、扫描或生成报告过程中发生的异常。

    Attributes:
        message: Error message.
        message: 错误消息。
        status_code: HTTP status code (used by the upload service).
        status_code: HTTP 状态码（上传服务使用）。
        details: Error details.
        details: 错误详情。
        error_code: Stable error code.
        error_code: 稳定错误码。
    """

    def __init__(
        self,
        *,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
        error_code: str = "extractor_error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.error_code = error_code


class ConfigError(ExtractorError):
    """
    Invalid run or workspace configuration.
    运行或工作区配置无效。
    """

    def __init__(self, *, message: str, details: Any | None = None) -> None:
        super().__init__(message=message, details=details, error_code="invalid_config")


class FileLoadError(ExtractorError):
    """
    A spreadsheet could not be read.
    表格文件无法读取。
    """

    def __init__(self, *, message: str, details: Any | None = None, error_code: str = "file_load_error") -> None:
        super().__init__(message=message, status_code=422, details=details, error_code=error_code)


class ColumnNotFoundError(ExtractorError):
    """
    Target column absent after alias resolution.
    按别名解析后仍未找到目标列。
    """

    def __init__(self, *, message: str, details: Any | None = None) -> None:
        super().__init__(message=message, status_code=422, details=details, error_code="column_not_found")


class RunCancelled(ExtractorError):
    """
    Cooperative cancellation observed inside a file pipeline.
    文件流水线内检测到协作式取消。
    """

    def __init__(self, *, message: str = "Run cancelled / 运行已取消", details: Any | None = None) -> None:
        super().__init__(message=message, status_code=499, details=details, error_code="run_cancelled")


class ReportError(ExtractorError):
    """
    Report error.
    报告生成错误。
    """


class UploadError(ExtractorError):
    """
    Upload rejected.
    上传被拒绝。
    """
