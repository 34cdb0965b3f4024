"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: schemas.py
@DateTime: 2026-10-17
@Docs: Pydantic response schemas for extraction runs.
提取运行的 Pydantic 响应模型。
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from sensitive_info_extractor.categories import CATEGORY_ORDER, Category
from sensitive_info_extractor.models import FileError, Finding, ProcessingStatistics


class FindingItem(BaseModel):
    """
    One finding.
    单条提取结果。
    """

    file: str
    sheet: str
    row_number: int
    category: Category
    value: str
    normalized: str | None = None
    is_valid: bool
    reason: str | None = None
    birth_date: date | None = None
    source_text: str = ""
    context_before: list[str] = Field(default_factory=list)
    context_after: list[str] = Field(default_factory=list)

    @classmethod
    def from_finding(cls, finding: Finding) -> "FindingItem":
        verdict = finding.verdict
        return cls(
            file=finding.file_id,
            sheet=finding.sheet,
            row_number=finding.row_number,
            category=finding.category,
            value=verdict.candidate.text,
            normalized=verdict.normalized,
            is_valid=verdict.is_valid,
            reason=str(verdict.reason) if verdict.reason is not None else None,
            birth_date=verdict.birth_date,
            source_text=finding.source_text,
            context_before=[r.joined() for r in finding.context_before],
            context_after=[r.joined() for r in finding.context_after],
        )


class FileErrorItem(BaseModel):
    """
    A file-level error.
    文件级错误。
    """

    file: str
    error_code: str
    message: str
    sheet: str | None = None

    @classmethod
    def from_error(cls, error: FileError) -> "FileErrorItem":
        return cls(file=error.file_id, error_code=error.error_code, message=error.message, sheet=error.sheet)


class CategoryCount(BaseModel):
    """Per-category counts / 分类别统计。"""

    category: Category
    total: int
    valid: int


class StatisticsItem(BaseModel):
    """
    Run statistics.
    运行统计。
    """

    total_findings: int
    valid_findings: int
    invalid_findings: int
    rows_with_findings: int
    categories: list[CategoryCount]

    @classmethod
    def from_statistics(cls, stats: ProcessingStatistics) -> "StatisticsItem":
        return cls(
            total_findings=stats.total_findings,
            valid_findings=stats.total_valid,
            invalid_findings=stats.total_invalid,
            rows_with_findings=stats.rows_with_findings,
            categories=[
                CategoryCount(category=c, total=stats.total_of(c), valid=stats.valid_of(c)) for c in CATEGORY_ORDER
            ],
        )


class ExtractResponse(BaseModel):
    """
    Extraction run response.
    提取运行响应。

    Attributes:
        run_id: Run identifier.
        run_id: 运行 ID。
        cancelled: Whether the run was cancelled.
        cancelled: 是否已取消。
        statistics: Run statistics.
        statistics: 运行统计。
        findings: Findings in report order.
        findings: 按报告顺序排列的结果。
        file_errors: File-level errors.
        file_errors: 文件级错误。
        report_filename: Generated report filename, if any.
        report_filename: 生成的报告文件名（可选）。
    """

    run_id: UUID
    cancelled: bool = False
    statistics: StatisticsItem
    findings: list[FindingItem] = Field(default_factory=list)
    file_errors: list[FileErrorItem] = Field(default_factory=list)
    report_filename: str | None = None
