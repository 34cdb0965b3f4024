"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: pipeline.py
@DateTime: 2026-10-17
@Docs: Per-file pipeline: locate column, scan rows, validate, attach context.
单文件流水线：定位列、扫描行、校验并附加上下文。
"""

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum

from sensitive_info_extractor.categories import Category
from sensitive_info_extractor.config import RunConfig
from sensitive_info_extractor.context import extract_context
from sensitive_info_extractor.exceptions import ColumnNotFoundError, RunCancelled
from sensitive_info_extractor.locator import resolve_target_column
from sensitive_info_extractor.models import FileError, Finding, LoadedWorkbook, SheetGrid, Verdict
from sensitive_info_extractor.patterns import find_candidates
from sensitive_info_extractor.validators import validate

logger = logging.getLogger(__name__)

# Rows scanned between two cancellation checks.
ROW_BATCH_SIZE = 256


class FileState(StrEnum):
    """
    File pipeline states.
    文件流水线状态。

    ``LOADED -> COLUMN_RESOLVED -> SCANNING -> DONE`` or
    ``LOADED -> COLUMN_MISSING -> DONE``.
    """

    LOADED = "loaded"
    COLUMN_RESOLVED = "column_resolved"
    COLUMN_MISSING = "column_missing"
    SCANNING = "scanning"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """
    Output of one file pipeline.
    单个文件流水线的输出。

    Attributes:
        file_id: Source file identifier.
        file_id: 源文件标识。
        findings: Findings in sheet, row, offset order.
        findings: 按工作表、行、偏移排序的结果。
        error: File-level error, if any.
        error: 文件级错误（可选）。
    """

    file_id: str
    findings: tuple[Finding, ...] = ()
    error: FileError | None = None


def scan_text(
    text: str,
    config: RunConfig,
    *,
    row_index: int = 0,
    column_index: int = 0,
    file_id: str = "",
    sheet: str = "",
) -> list[Verdict]:
    """Find and validate every candidate in one cell text.
    查找并校验单元格文本中的全部候选值。

    A bank card candidate overlapping a valid ID card is dropped: an 18-digit
    ID number is also a lexically valid card run.
    与有效身份证号重叠的银行卡候选会被丢弃：18 位身份证号在词法上也是合法卡号。

    Args:
        text: Cell text.
            单元格文本。
        config: Run configuration.
            运行配置。
        row_index: Source row index.
            源行索引。
        column_index: Source column index.
            源列索引。
        file_id: Source file identifier.
            源文件标识。
        sheet: Source sheet name.
            源工作表名称。
    Returns:
        list[Verdict]: Verdicts in candidate order.
            按候选顺序排列的校验结论。
    """
    candidates = find_candidates(
        text,
        config.enabled_categories,
        row_index=row_index,
        column_index=column_index,
        file_id=file_id,
        sheet=sheet,
    )
    verdicts = [Verdict.from_result(c, validate(c.category, c.text)) for c in candidates]
    valid_ids = [v.candidate for v in verdicts if v.is_valid and v.candidate.category is Category.ID_CARD]
    if not valid_ids:
        return verdicts
    return [
        v
        for v in verdicts
        if not (v.candidate.category is Category.BANK_CARD and any(v.candidate.overlaps(i) for i in valid_ids))
    ]


class FilePipeline:
    """
    Scan one loaded workbook.
    扫描单个已加载的工作簿。

    Rows carry no state between each other; the only shared input is the
    read-only ``RunConfig``.
    行与行之间没有状态共享，唯一共享的输入是只读的 ``RunConfig``。
    """

    def __init__(self, config: RunConfig, *, cancel_event: threading.Event | None = None) -> None:
        """
        Initialize the pipeline.
        初始化流水线。

        Args:
            config: Run configuration.
            config: 运行配置。
            cancel_event: Run-level cancellation signal.
            cancel_event: 运行级取消信号。
        """
        self.config = config
        self._cancel_event = cancel_event
        self.state = FileState.LOADED

    def run(self, workbook: LoadedWorkbook) -> FileOutcome:
        """
        Process every sheet of a workbook.
        处理工作簿的每个工作表。

        Sheets lacking the target column are skipped. When no sheet has it,
        the file yields one ``column_not_found`` error and no findings.
        缺少目标列的工作表会被跳过；所有工作表都缺少时，文件产生一个
        ``column_not_found`` 错误且没有结果。

        Args:
            workbook: Loaded workbook.
            workbook: 已加载的工作簿。

        Returns:
            FileOutcome: Findings or a file-level error.
            FileOutcome: 结果或文件级错误。

        Raises:
            RunCancelled: When the cancellation event is set mid-file.
            RunCancelled: 处理过程中取消信号被设置时抛出。
        """
        self.state = FileState.LOADED
        findings: list[Finding] = []
        missing: ColumnNotFoundError | None = None
        resolved = 0
        for sheet in workbook.sheets:
            self._check_cancelled(workbook.file_id)
            if not sheet.rows:
                continue
            try:
                column = resolve_target_column(sheet.header, self.config.target_column, self.config.column_aliases)
            except ColumnNotFoundError as exc:
                logger.debug("Skip sheet %s/%s: %s", workbook.file_id, sheet.name, exc.message)
                missing = exc
                continue
            resolved += 1
            self.state = FileState.COLUMN_RESOLVED
            findings.extend(self.scan_sheet(sheet, column, file_id=workbook.file_id))

        if not resolved:
            self.state = FileState.COLUMN_MISSING
            message = missing.message if missing is not None else "Workbook has no rows / 工作簿没有数据"
            error = FileError(file_id=workbook.file_id, error_code="column_not_found", message=message)
            self.state = FileState.DONE
            return FileOutcome(file_id=workbook.file_id, error=error)

        self.state = FileState.DONE
        return FileOutcome(file_id=workbook.file_id, findings=tuple(findings))

    def scan_sheet(self, sheet: SheetGrid, column: int, *, file_id: str) -> list[Finding]:
        """
        Scan the target column of one sheet, header row excluded.
        扫描单个工作表的目标列（不含表头行）。

        Args:
            sheet: Sheet grid.
            sheet: 工作表网格。
            column: Target column index.
            column: 目标列索引。
            file_id: Source file identifier.
            file_id: 源文件标识。

        Returns:
            list[Finding]: Findings ordered by row, column, offset.
            list[Finding]: 按行、列、偏移排序的结果。
        """
        self.state = FileState.SCANNING
        grid = sheet.rows
        findings: list[Finding] = []
        for row_index in range(1, len(grid)):
            if row_index % ROW_BATCH_SIZE == 0:
                self._check_cancelled(file_id)
            row = grid[row_index]
            text = row[column] if column < len(row) else ""
            if not text.strip():
                continue
            verdicts = scan_text(
                text,
                self.config,
                row_index=row_index,
                column_index=column,
                file_id=file_id,
                sheet=sheet.name,
            )
            if not verdicts:
                continue
            context, position = extract_context(grid, row_index, self.config.context_lines)
            for verdict in verdicts:
                findings.append(
                    Finding(
                        verdict=verdict,
                        context=context,
                        target_position=position,
                        file_id=file_id,
                        sheet=sheet.name,
                        source_text=text,
                    )
                )
        findings.sort(key=Finding.sort_key)
        return findings

    def _check_cancelled(self, file_id: str) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            self.state = FileState.CANCELLED
            raise RunCancelled(details={"file_id": file_id})


def process_workbook(
    workbook: LoadedWorkbook, config: RunConfig, *, cancel_event: threading.Event | None = None
) -> FileOutcome:
    """Run a fresh ``FilePipeline`` over one workbook.
    使用新的 ``FilePipeline`` 处理单个工作簿。
    """
    return FilePipeline(config, cancel_event=cancel_event).run(workbook)
