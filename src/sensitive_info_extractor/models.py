"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: models.py
@DateTime: 2026-10-17
@Docs: Immutable data model shared by matchers, validators and the pipeline.
匹配器、校验器与流水线共享的不可变数据模型。

Cell grids are plain tuples of string rows: row 0 is the header row, sparse
cells are empty strings. Every record below is frozen once created.
单元格网格为字符串行组成的元组：第 0 行为表头，空单元格为空字符串。
以下记录一经创建即不可变。
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, TypeAlias

from sensitive_info_extractor.categories import CATEGORY_ORDER, Category, FailureReason

CellRow: TypeAlias = tuple[str, ...]
CellGrid: TypeAlias = tuple[CellRow, ...]


def cell_to_str(value: Any) -> str:
    """Convert a raw cell value to its display string.
    将原始单元格值转换为显示字符串。

    Integral floats lose their fractional part so that long numbers stored as
    numeric cells (phone numbers, card numbers) keep their digits.
    整数值的浮点数去掉小数部分，保证以数值存储的长号码保留原始数字。

    Args:
        value: Raw cell value.
            原始单元格值。
    Returns:
        str: Display string (empty for None).
            显示字符串（None 时为空）。
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


@dataclass(frozen=True, slots=True)
class SheetGrid:
    """
    One sheet's cell grid.
    单个工作表的单元格网格。

    Attributes:
        name: Sheet name.
        name: 工作表名称。
        rows: Rows including the header row at index 0.
        rows: 包含表头（索引 0）的所有行。
    """

    name: str
    rows: CellGrid

    @classmethod
    def from_rows(cls, name: str, rows: Iterable[Iterable[Any]]) -> "SheetGrid":
        """Build a rectangular grid from raw rows.
        由原始行构建矩形网格。

        Args:
            name: Sheet name.
                工作表名称。
            rows: Raw rows of arbitrary cell values.
                任意单元格值组成的原始行。
        Returns:
            SheetGrid: Grid with every row padded to the widest row.
                每行补齐到最宽行的网格。
        """
        converted = [tuple(cell_to_str(v) for v in row) for row in rows]
        width = max((len(r) for r in converted), default=0)
        padded = tuple(r + ("",) * (width - len(r)) for r in converted)
        return cls(name=name, rows=padded)

    @property
    def header(self) -> CellRow:
        """Header row (empty tuple for an empty sheet).
        表头行（空表时为空元组）。
        """
        return self.rows[0] if self.rows else ()

    @property
    def last_row_index(self) -> int:
        return len(self.rows) - 1


@dataclass(frozen=True, slots=True)
class LoadedWorkbook:
    """
    All sheets of one input file, in workbook order.
    单个输入文件的全部工作表（按工作簿顺序）。
    """

    file_id: str
    sheets: tuple[SheetGrid, ...]


@dataclass(frozen=True, slots=True)
class InputFile:
    """
    An input file handed to the aggregator.
    提交给聚合器的输入文件。

    Attributes:
        file_id: Identifier shown in reports (usually the file name).
        file_id: 报告中显示的标识（通常为文件名）。
        path: Location on disk, if any.
        path: 磁盘路径（可选）。
    """

    file_id: str
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "InputFile":
        p = Path(path)
        return cls(file_id=p.name, path=p)


@dataclass(frozen=True, slots=True)
class CandidateMatch:
    """
    A lexically plausible, not yet validated substring.
    词法上可疑但尚未校验的子串。

    Attributes:
        category: Matcher category.
        category: 匹配类别。
        text: Raw matched text.
        text: 原始匹配文本。
        start: Start offset in the cell text.
        start: 在单元格文本中的起始偏移。
        end: End offset (exclusive).
        end: 结束偏移（不含）。
        row_index: Source row index in the grid.
        row_index: 源行在网格中的索引。
        column_index: Source column index.
        column_index: 源列索引。
        file_id: Source file identifier.
        file_id: 源文件标识。
        sheet: Source sheet name.
        sheet: 源工作表名称。
    """

    category: Category
    text: str
    start: int
    end: int
    row_index: int = 0
    column_index: int = 0
    file_id: str = ""
    sheet: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid match span: ({self.start}, {self.end})")
        if self.end - self.start != len(self.text):
            raise ValueError("Match text length does not equal its span")

    def overlaps(self, other: "CandidateMatch") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of a category validator.
    类别校验器的结果。
    """

    is_valid: bool
    normalized: str | None = None
    reason: FailureReason | None = None
    birth_date: date | None = None


@dataclass(frozen=True, slots=True)
class Verdict:
    """
    Validity outcome plus normalized form for a candidate.
    候选值的有效性结论与规范化形式。

    Invalid verdicts are reported, never dropped.
    无效结论同样会被报告，不会被丢弃。
    """

    candidate: CandidateMatch
    is_valid: bool
    normalized: str | None = None
    reason: FailureReason | None = None
    birth_date: date | None = None

    @classmethod
    def from_result(cls, candidate: CandidateMatch, result: ValidationResult) -> "Verdict":
        return cls(
            candidate=candidate,
            is_valid=result.is_valid,
            normalized=result.normalized,
            reason=result.reason,
            birth_date=result.birth_date,
        )


@dataclass(frozen=True, slots=True)
class ContextRow:
    """A row inside a context window / 上下文窗口中的一行。"""

    row_index: int
    cells: CellRow

    def joined(self, sep: str = " | ") -> str:
        return sep.join(self.cells)


@dataclass(frozen=True, slots=True)
class Finding:
    """
    A validated match bundled with its row context; the unit of report output.
    附带行上下文的校验结果，是报告输出的基本单位。

    Attributes:
        verdict: Validation verdict.
        verdict: 校验结论。
        context: Context rows in ascending row order.
        context: 按行号升序的上下文行。
        target_position: Index of the source row within ``context``.
        target_position: 源行在 ``context`` 中的位置。
        file_id: Source file identifier.
        file_id: 源文件标识。
        sheet: Source sheet name.
        sheet: 源工作表名称。
        source_text: Full text of the scanned cell.
        source_text: 被扫描单元格的完整文本。
    """

    verdict: Verdict
    context: tuple[ContextRow, ...]
    target_position: int
    file_id: str
    sheet: str
    source_text: str = ""

    @property
    def candidate(self) -> CandidateMatch:
        return self.verdict.candidate

    @property
    def category(self) -> Category:
        return self.verdict.candidate.category

    @property
    def is_valid(self) -> bool:
        return self.verdict.is_valid

    @property
    def row_index(self) -> int:
        return self.verdict.candidate.row_index

    @property
    def row_number(self) -> int:
        """1-based spreadsheet row number / 从 1 开始的表格行号。"""
        return self.verdict.candidate.row_index + 1

    @property
    def context_before(self) -> tuple[ContextRow, ...]:
        return self.context[: self.target_position]

    @property
    def context_after(self) -> tuple[ContextRow, ...]:
        return self.context[self.target_position + 1 :]

    def sort_key(self) -> tuple[int, int, int, int, int]:
        """Ordering key inside one sheet: row, column, offset, category.
        工作表内排序键：行、列、偏移、类别。
        """
        c = self.verdict.candidate
        return (c.row_index, c.column_index, c.start, c.end, CATEGORY_ORDER.index(c.category))


@dataclass(frozen=True, slots=True)
class FileError:
    """
    A file-level failure. It never aborts the run.
    文件级失败，不会中断整个运行。
    """

    file_id: str
    error_code: str
    message: str
    sheet: str | None = None


@dataclass(frozen=True, slots=True)
class ProcessingStatistics:
    """
    Counts over a result set.
    结果集统计。
    """

    total_findings: int = 0
    rows_with_findings: int = 0
    totals: dict[Category, int] = field(default_factory=dict)
    valid: dict[Category, int] = field(default_factory=dict)

    @classmethod
    def from_findings(cls, findings: Sequence[Finding]) -> "ProcessingStatistics":
        """Compute statistics from findings.
        根据结果计算统计。

        Args:
            findings: Findings to count.
                待统计的结果。
        Returns:
            ProcessingStatistics: Statistics.
                统计结果。
        """
        totals: Counter[Category] = Counter(f.category for f in findings)
        valid: Counter[Category] = Counter(f.category for f in findings if f.is_valid)
        rows = {(f.file_id, f.sheet, f.row_index) for f in findings}
        return cls(
            total_findings=len(findings),
            rows_with_findings=len(rows),
            totals={c: totals.get(c, 0) for c in CATEGORY_ORDER},
            valid={c: valid.get(c, 0) for c in CATEGORY_ORDER},
        )

    def total_of(self, category: Category) -> int:
        return self.totals.get(category, 0)

    def valid_of(self, category: Category) -> int:
        return self.valid.get(category, 0)

    @property
    def total_valid(self) -> int:
        return sum(self.valid.values())

    @property
    def total_invalid(self) -> int:
        return self.total_findings - self.total_valid


@dataclass(frozen=True, slots=True)
class RunResult:
    """
    Merged, ordered output of a run.
    一次运行合并后的有序输出。

    Attributes:
        findings: Findings ordered by file, sheet, row, column, offset.
        findings: 按文件、工作表、行、列、偏移排序的结果。
        errors: File-level errors in input order.
        errors: 按输入顺序排列的文件级错误。
        cancelled: Whether the run stopped early.
        cancelled: 是否提前取消。
        completed_files: Files whose output is included.
        completed_files: 输出已被纳入的文件。
    """

    findings: tuple[Finding, ...] = ()
    errors: tuple[FileError, ...] = ()
    cancelled: bool = False
    completed_files: tuple[str, ...] = ()

    @property
    def statistics(self) -> ProcessingStatistics:
        return ProcessingStatistics.from_findings(self.findings)
