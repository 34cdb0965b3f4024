"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: aggregator.py
@DateTime: 2026-10-17
@Docs: Parallel run over many files with deterministic ordering.
多文件并行运行，输出顺序确定。

Each file is processed on a bounded thread pool. Outputs are stored by the
file's input position and merged in that order once every worker finished,
so the result never depends on completion order.
每个文件在有界线程池中处理；输出按文件的输入位置保存，
全部完成后按该顺序合并，结果与完成顺序无关。
"""

import logging
import os
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TypeAlias

from sensitive_info_extractor.config import RunConfig
from sensitive_info_extractor.exceptions import ConfigError, FileLoadError, RunCancelled
from sensitive_info_extractor.models import FileError, Finding, InputFile, LoadedWorkbook, RunResult
from sensitive_info_extractor.pipeline import FileOutcome, process_workbook
from sensitive_info_extractor.reader import load_workbook

logger = logging.getLogger(__name__)

Loader: TypeAlias = Callable[[InputFile], LoadedWorkbook]
ProgressFn: TypeAlias = Callable[[str, int], None]


def _as_input(item: InputFile | str | os.PathLike[str]) -> InputFile:
    if isinstance(item, InputFile):
        return item
    return InputFile.from_path(item)


def _process_one(
    input_file: InputFile, config: RunConfig, loader: Loader, cancel_event: threading.Event
) -> FileOutcome | None:
    """Load and scan one file; None means it was cancelled.
    加载并扫描单个文件；返回 None 表示已取消。
    """
    if cancel_event.is_set():
        return None
    try:
        workbook = loader(input_file)
    except FileLoadError as exc:
        logger.warning("Failed to load %s: %s", input_file.file_id, exc.message)
        return FileOutcome(
            file_id=input_file.file_id,
            error=FileError(file_id=input_file.file_id, error_code=exc.error_code, message=exc.message),
        )
    except Exception as exc:
        logger.warning("Failed to load %s: %s", input_file.file_id, exc, exc_info=True)
        return FileOutcome(
            file_id=input_file.file_id,
            error=FileError(file_id=input_file.file_id, error_code="file_load_error", message=str(exc)),
        )
    try:
        return process_workbook(workbook, config, cancel_event=cancel_event)
    except RunCancelled:
        logger.info("Discarded partially scanned file %s", input_file.file_id)
        return None


def run(
    files: Sequence[InputFile | str | os.PathLike[str]],
    config: RunConfig,
    *,
    loader: Loader | None = None,
    cancel_event: threading.Event | None = None,
    on_progress: ProgressFn | None = None,
    max_workers: int | None = None,
) -> RunResult:
    """Run file pipelines over all inputs and merge their outputs.
    对所有输入运行文件流水线并合并输出。

    Findings are ordered by file (as supplied), sheet (as read), row, column
    and offset. File errors are collected separately and never affect the
    other files. When ``cancel_event`` is set, files not yet started are
    skipped and a file being scanned is discarded; completed files are kept.
    结果按文件（输入顺序）、工作表（读取顺序）、行、列、偏移排序；文件错误单独收集，
    不影响其他文件。``cancel_event`` 被设置后，未开始的文件被跳过，
    正在扫描的文件被丢弃，已完成的文件保留。

    Args:
        files: Input files or paths.
            输入文件或路径。
        config: Run configuration.
            运行配置。
        loader: Loads one input into grids (default: ``reader.load_workbook``).
            将单个输入加载为网格的函数（默认 ``reader.load_workbook``）。
        cancel_event: Run-level cancellation signal.
            运行级取消信号。
        on_progress: Called with ``(file_id, percent)`` after each file.
            每个文件完成后以 ``(file_id, percent)`` 调用。
        max_workers: Pool size; overrides ``config.max_workers``.
            线程池大小；覆盖 ``config.max_workers``。

    Returns:
        RunResult: Merged result.
            合并后的结果。

    Raises:
        ConfigError: When no category is enabled.
            没有启用任何类别时抛出。
    """
    if not config.has_any_category_enabled():
        raise ConfigError(message="No extraction category enabled / 未启用任何提取类别")
    inputs = [_as_input(f) for f in files]
    if not inputs:
        return RunResult()

    load = loader or load_workbook
    cancel = cancel_event or threading.Event()
    outcomes: list[FileOutcome | None] = [None] * len(inputs)
    finished = 0
    with ThreadPoolExecutor(max_workers=max_workers or config.max_workers) as executor:
        futures = {executor.submit(_process_one, f, config, load, cancel): i for i, f in enumerate(inputs)}
        for future in as_completed(futures):
            index = futures[future]
            outcomes[index] = future.result()
            finished += 1
            if on_progress is not None:
                on_progress(inputs[index].file_id, finished * 100 // len(inputs))

    findings: list[Finding] = []
    errors: list[FileError] = []
    completed: list[str] = []
    for outcome in outcomes:
        if outcome is None:
            continue
        completed.append(outcome.file_id)
        findings.extend(outcome.findings)
        if outcome.error is not None:
            errors.append(outcome.error)

    cancelled = cancel.is_set() or len(completed) < len(inputs)
    logger.info(
        "Run finished: %d file(s), %d finding(s), %d error(s)%s",
        len(completed),
        len(findings),
        len(errors),
        " (cancelled)" if cancelled else "",
    )
    return RunResult(
        findings=tuple(findings),
        errors=tuple(errors),
        cancelled=cancelled,
        completed_files=tuple(completed),
    )
