"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: report.py
@DateTime: 2026-10-17
@Docs: Report rows and XLSX/CSV report writers.
报告行构建与 XLSX/CSV 报告写出。

One report row is written per finding. Valid matches are rendered green and
invalid ones red, so a reviewer can check the matcher's rejects.
每个结果写出一行报告；有效匹配显示为绿色、无效匹配显示为红色，方便人工复核。
"""

import logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from sensitive_info_extractor.categories import label_for, reason_label
from sensitive_info_extractor.deps import require_openpyxl, require_polars
from sensitive_info_extractor.exceptions import ReportError
from sensitive_info_extractor.formats import ReportFormat, extension_for
from sensitive_info_extractor.models import FileError, Finding, RunResult

logger = logging.getLogger(__name__)

HEADERS: tuple[str, ...] = (
    "源文件名",
    "工作表",
    "行号",
    "类别",
    "匹配内容",
    "规范值",
    "有效性",
    "失败原因",
    "源文本",
    "上文",
    "下文",
)
COLUMN_WIDTHS: tuple[float, ...] = (20, 15, 8, 10, 22, 22, 10, 14, 50, 30, 30)
ERROR_HEADERS: tuple[str, ...] = ("源文件名", "工作表", "错误码", "错误信息")
ERROR_SHEET_TITLE = "文件错误"
RESULT_SHEET_TITLE = "提取结果"

VALID_TEXT = "有效"
INVALID_TEXT = "无效"
VALIDITY_COLUMN = HEADERS.index("有效性") + 1

HEADER_FILL = "4472C4"
VALID_COLOR = "008000"
INVALID_COLOR = "FF0000"

DEFAULT_REPORT_NAME = "敏感信息提取结果"

# Leading characters spreadsheet applications evaluate as a formula.
FORMULA_PREFIXES: tuple[str, ...] = ("=", "+", "-", "@")


def finding_to_row(finding: Finding) -> dict[str, Any]:
    """Convert a finding into a report row keyed by header.
    将结果转换为以表头为键的报告行。

    Context rows are joined cell-wise with `` | `` and row-wise with newlines.
    上下文行内单元格以 `` | `` 连接，行与行之间以换行连接。
    """
    verdict = finding.verdict
    return {
        "源文件名": finding.file_id,
        "工作表": finding.sheet,
        "行号": finding.row_number,
        "类别": label_for(finding.category),
        "匹配内容": verdict.candidate.text,
        "规范值": verdict.normalized or "",
        "有效性": VALID_TEXT if verdict.is_valid else INVALID_TEXT,
        "失败原因": reason_label(verdict.reason),
        "源文本": finding.source_text,
        "上文": "\n".join(r.joined() for r in finding.context_before),
        "下文": "\n".join(r.joined() for r in finding.context_after),
    }


def build_report_rows(findings: Sequence[Finding]) -> list[dict[str, Any]]:
    """Build report rows in finding order.
    按结果顺序构建报告行。
    """
    return [finding_to_row(f) for f in findings]


def escape_formula(text: str) -> str:
    """Prefix a quote to text a spreadsheet would evaluate as a formula.
    为会被表格软件当作公式执行的文本加上单引号前缀。
    """
    return f"'{text}" if text.startswith(FORMULA_PREFIXES) else text


def findings_to_dataframe(findings: Sequence[Finding], *, escape_formulas: bool = False) -> Any:
    """Build a Polars DataFrame of report rows.
    构建报告行的 Polars DataFrame。

    Args:
        findings: Findings in report order.
            按报告顺序排列的结果。
        escape_formulas: Quote text cells starting with a formula prefix.
            对以公式前缀开头的文本单元格加引号。
    Returns:
        pl.DataFrame: One row per finding with the report headers as columns.
            每个结果一行、以报告表头为列的 DataFrame。
    """
    pl = require_polars()
    rows = build_report_rows(findings)
    if escape_formulas:
        rows = [{k: escape_formula(v) if isinstance(v, str) else v for k, v in row.items()} for row in rows]
    schema = {h: (pl.Int64 if h == "行号" else pl.Utf8) for h in HEADERS}
    return pl.DataFrame({h: [row[h] for row in rows] for h in HEADERS}, schema=schema)


def _ensure_reportable(result: RunResult) -> None:
    if not result.findings and not result.errors:
        raise ReportError(message="Nothing to export / 没有可导出的结果", error_code="empty_report")


def _error_row(error: FileError) -> list[str]:
    return [error.file_id, error.sheet or "", error.error_code, error.message]


def _append_text_row(ws: Any, values: Sequence[Any]) -> None:
    """Append a row with control characters removed and strings kept as text.
    追加一行：去除控制字符，且字符串不作为公式写入。
    """
    from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

    ws.append([ILLEGAL_CHARACTERS_RE.sub("", v) if isinstance(v, str) else v for v in values])
    for cell in ws[ws.max_row]:
        if cell.data_type == "f":
            cell.data_type = "s"


def write_xlsx_report(result: RunResult, path: str | os.PathLike[str]) -> Path:
    """Write the styled XLSX report.
    写出带样式的 XLSX 报告。

    Layout: bold white header on blue with thin borders, green/red validity
    cells, fixed column widths, frozen header row and an auto-filter. File
    errors go to a second sheet.
    版式：蓝底白字加粗并带细边框的表头、绿/红有效性单元格、固定列宽、
    冻结表头与自动筛选；文件错误写入第二个工作表。

    Args:
        result: Run result.
            运行结果。
        path: Output path.
            输出路径。
    Returns:
        Path: Written path.
            写出的路径。
    Raises:
        ReportError: When there are neither findings nor errors.
            既没有结果也没有错误时抛出。
    """
    _ensure_reportable(result)
    openpyxl = require_openpyxl()
    from openpyxl.styles import Border, Font, PatternFill, Side
    from openpyxl.utils import get_column_letter

    thin = Side(style="thin")
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(fill_type="solid", fgColor=HEADER_FILL)
    header_border = Border(left=thin, right=thin, top=thin, bottom=thin)
    valid_font = Font(color=VALID_COLOR)
    invalid_font = Font(color=INVALID_COLOR)

    wb = openpyxl.Workbook()
    ws = wb.active
    if ws is None:
        raise RuntimeError("Workbook.active is None / Workbook.active 为空")
    ws.title = RESULT_SHEET_TITLE
    ws.append(list(HEADERS))
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = header_border

    for row in build_report_rows(result.findings):
        _append_text_row(ws, [row[h] for h in HEADERS])
        validity = ws.cell(row=ws.max_row, column=VALIDITY_COLUMN)
        validity.font = valid_font if validity.value == VALID_TEXT else invalid_font

    for i, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width
    ws.freeze_panes = "A2"
    ws.auto_filter.ref = f"A1:{get_column_letter(len(HEADERS))}{ws.max_row}"

    if result.errors:
        es = wb.create_sheet(ERROR_SHEET_TITLE)
        es.append(list(ERROR_HEADERS))
        for cell in es[1]:
            cell.font = header_font
            cell.fill = header_fill
            cell.border = header_border
        for error in result.errors:
            _append_text_row(es, _error_row(error))
        es.freeze_panes = "A2"

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    wb.save(out)
    logger.info("Report written to %s", out)
    return out


def write_csv_report(result: RunResult, path: str | os.PathLike[str], *, include_bom: bool = True) -> Path:
    """Write findings as CSV through Polars (file errors are not included).
    通过 Polars 以 CSV 写出结果（不含文件错误）。

    Args:
        result: Run result.
            运行结果。
        path: Output path.
            输出路径。
        include_bom: Prefix a UTF-8 BOM so Excel detects the encoding.
            写入 UTF-8 BOM 以便 Excel 识别编码。
    Returns:
        Path: Written path.
            写出的路径。
    """
    _ensure_reportable(result)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    findings_to_dataframe(result.findings, escape_formulas=True).write_csv(out, include_bom=include_bom)
    logger.info("Report written to %s", out)
    return out


def write_report(result: RunResult, path: str | os.PathLike[str], *, fmt: ReportFormat | str = ReportFormat.XLSX) -> Path:
    """Write a report in the requested format.
    以指定格式写出报告。
    """
    try:
        key = ReportFormat(fmt)
    except ValueError as exc:
        raise ReportError(
            message=f"Unsupported report format: {fmt} / 不支持的报告格式: {fmt}",
            error_code="unsupported_format",
        ) from exc
    if key is ReportFormat.CSV:
        return write_csv_report(result, path)
    return write_xlsx_report(result, path)


def build_report_filename(
    source_name: str = DEFAULT_REPORT_NAME,
    *,
    fmt: ReportFormat | str = ReportFormat.XLSX,
    now: datetime | None = None,
) -> str:
    """Build a timestamped report filename: ``<source>_<YYYYmmdd_HHMMSS><ext>``.
    构建带时间戳的报告文件名：``<source>_<YYYYmmdd_HHMMSS><ext>``。
    """
    ts = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{source_name}_{ts}{extension_for(fmt)}"
