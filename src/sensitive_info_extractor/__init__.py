"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: __init__.py
@DateTime: 2026-10-17
@Docs: Package exports for sensitive_info_extractor.
sensitive_info_extractor 包导出定义。
"""

from sensitive_info_extractor.aggregator import run
from sensitive_info_extractor.categories import Category, FailureReason, parse_categories
from sensitive_info_extractor.config import RunConfig, WorkspaceConfig, resolve_run_config, resolve_workspace_config
from sensitive_info_extractor.context import extract_context
from sensitive_info_extractor.easy import extract_to_report
from sensitive_info_extractor.exceptions import (
    ColumnNotFoundError,
    ConfigError,
    ExtractorError,
    FileLoadError,
    ReportError,
    RunCancelled,
    UploadError,
)
from sensitive_info_extractor.formats import ReportFormat
from sensitive_info_extractor.locator import locate_column
from sensitive_info_extractor.models import (
    CandidateMatch,
    ContextRow,
    FileError,
    Finding,
    InputFile,
    LoadedWorkbook,
    ProcessingStatistics,
    RunResult,
    SheetGrid,
    ValidationResult,
    Verdict,
)
from sensitive_info_extractor.patterns import find_candidates
from sensitive_info_extractor.pipeline import FilePipeline, process_workbook, scan_text
from sensitive_info_extractor.reader import collect_input_files, load_workbook
from sensitive_info_extractor.report import build_report_filename, write_csv_report, write_report, write_xlsx_report
from sensitive_info_extractor.schemas import ExtractResponse, FileErrorItem, FindingItem, StatisticsItem
from sensitive_info_extractor.service import ExtractionService
from sensitive_info_extractor.storage import (
    RunPaths,
    cleanup_expired_runs,
    create_report_path,
    get_run_paths,
    new_run_id,
    read_meta,
)
from sensitive_info_extractor.validators import (
    luhn_check,
    validate,
    validate_bank_card,
    validate_id_card,
    validate_phone,
)

__all__ = [
    "Category",
    "FailureReason",
    "parse_categories",
    "RunConfig",
    "WorkspaceConfig",
    "resolve_run_config",
    "resolve_workspace_config",
    "ExtractorError",
    "ConfigError",
    "FileLoadError",
    "ColumnNotFoundError",
    "RunCancelled",
    "ReportError",
    "UploadError",
    "CandidateMatch",
    "ValidationResult",
    "Verdict",
    "ContextRow",
    "Finding",
    "FileError",
    "InputFile",
    "SheetGrid",
    "LoadedWorkbook",
    "ProcessingStatistics",
    "RunResult",
    "find_candidates",
    "validate",
    "validate_phone",
    "validate_id_card",
    "validate_bank_card",
    "luhn_check",
    "locate_column",
    "extract_context",
    "scan_text",
    "FilePipeline",
    "process_workbook",
    "run",
    "load_workbook",
    "collect_input_files",
    "ReportFormat",
    "write_report",
    "write_xlsx_report",
    "write_csv_report",
    "build_report_filename",
    "ExtractResponse",
    "FindingItem",
    "FileErrorItem",
    "StatisticsItem",
    "ExtractionService",
    "RunPaths",
    "get_run_paths",
    "new_run_id",
    "read_meta",
    "create_report_path",
    "cleanup_expired_runs",
    "extract_to_report",
]
