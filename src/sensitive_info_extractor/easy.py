"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: easy.py
@DateTime: 2026-10-17
@Docs: Easy-layer API for local files.
易用层 API：本地文件一步提取。
"""

import os
import threading
from collections.abc import Iterable
from pathlib import Path

from sensitive_info_extractor.aggregator import ProgressFn, run
from sensitive_info_extractor.config import DEFAULT_ALLOWED_EXTENSIONS, RunConfig, resolve_run_config
from sensitive_info_extractor.formats import ReportFormat
from sensitive_info_extractor.models import RunResult
from sensitive_info_extractor.reader import collect_input_files
from sensitive_info_extractor.report import build_report_filename, write_report


def extract_to_report(
    paths: Iterable[str | os.PathLike[str]],
    output_dir: str | os.PathLike[str],
    config: RunConfig | None = None,
    fmt: ReportFormat | str = ReportFormat.XLSX,
    *,
    cancel_event: threading.Event | None = None,
    on_progress: ProgressFn | None = None,
) -> tuple[RunResult, Path | None]:
    """Scan local files and directories and write one report.
    扫描本地文件与目录并写出一份报告。

    Args:
        paths: Files and/or directories.
            文件和/或目录。
        output_dir: Report directory.
            报告目录。
        config: Optional run config (resolved from env when omitted).
            可选的运行配置（缺省时从环境变量解析）。
        fmt: Report format.
            报告格式。
        cancel_event: Optional cancellation signal.
            可选的取消信号。
        on_progress: Optional ``(file_id, percent)`` callback.
            可选的 ``(file_id, percent)`` 进度回调。
    Returns:
        tuple[RunResult, Path | None]: Result and report path (None when there
            was nothing to report).
            运行结果与报告路径（没有可报告内容时为 None）。

    Examples:
        >>> result, report = extract_to_report(["./data"], "./out")  # doctest: +SKIP
    """
    cfg = config or resolve_run_config()
    files = collect_input_files(paths, allowed_extensions=DEFAULT_ALLOWED_EXTENSIONS)
    result = run(files, cfg, cancel_event=cancel_event, on_progress=on_progress)
    if not result.findings and not result.errors:
        return result, None
    report = write_report(result, Path(output_dir) / build_report_filename(fmt=fmt), fmt=fmt)
    return result, report
