"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: reader.py
@DateTime: 2026-10-17
@Docs: Load spreadsheet files into cell grids and collect input paths.
将表格文件加载为单元格网格并收集输入路径。

Excel workbooks are read with openpyxl (read-only, cached values), CSV files
with Polars. Both produce ``LoadedWorkbook`` values of string cells.
Excel 工作簿使用 openpyxl 读取（只读、取缓存值），CSV 使用 Polars 读取；
两者都产出由字符串单元格组成的 ``LoadedWorkbook``。
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from sensitive_info_extractor.config import DEFAULT_ALLOWED_EXTENSIONS
from sensitive_info_extractor.deps import require_openpyxl, require_polars
from sensitive_info_extractor.exceptions import FileLoadError
from sensitive_info_extractor.models import InputFile, LoadedWorkbook, SheetGrid

logger = logging.getLogger(__name__)

XLSX_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xlsm")
CSV_EXTENSIONS: tuple[str, ...] = (".csv",)
CSV_ENCODINGS: tuple[str, ...] = ("utf-8-sig", "gb18030")


def read_xlsx(path: Path, *, file_id: str) -> LoadedWorkbook:
    """
    Read every worksheet of an Excel workbook.
    读取 Excel 工作簿的全部工作表。

    Args:
        path: Workbook path.
        path: 工作簿路径。
        file_id: Identifier recorded on findings.
        file_id: 记录到结果中的文件标识。

    Returns:
        LoadedWorkbook: Sheets in workbook order.
        LoadedWorkbook: 按工作簿顺序排列的工作表。

    Raises:
        FileLoadError: When the workbook cannot be opened or read.
        FileLoadError: 工作簿无法打开或读取时抛出。
    """
    openpyxl = require_openpyxl()
    try:
        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except Exception as exc:
        raise FileLoadError(
            message=f"Cannot open workbook {file_id} / 无法打开 Excel 文件: {file_id}",
            details={"error": str(exc)},
        ) from exc
    try:
        sheets = tuple(SheetGrid.from_rows(ws.title, ws.iter_rows(values_only=True)) for ws in wb.worksheets)
    except Exception as exc:
        raise FileLoadError(
            message=f"Cannot read workbook {file_id} / 无法读取工作表: {file_id}",
            details={"error": str(exc)},
        ) from exc
    finally:
        wb.close()
    return LoadedWorkbook(file_id=file_id, sheets=sheets)


def _decode_csv(data: bytes, *, file_id: str) -> str:
    """Decode CSV bytes as UTF-8 (BOM allowed), falling back to GB18030.
    以 UTF-8（允许 BOM）解码 CSV 字节，失败时回退到 GB18030。
    """
    for encoding in CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FileLoadError(
        message=f"Cannot decode CSV {file_id} / 无法解码 CSV 文件: {file_id}",
        details={"tried": list(CSV_ENCODINGS)},
        error_code="decode_error",
    )


def read_csv(path: Path, *, file_id: str) -> LoadedWorkbook:
    """
    Read a CSV file as a single sheet named after the file stem.
    将 CSV 文件读取为以文件名（不含扩展名）命名的单个工作表。

    UTF-8 is tried first, then GB18030 (common for Chinese SMS exports).
    先尝试 UTF-8，再尝试 GB18030（中文短信导出常用编码）。

    Args:
        path: CSV path.
        path: CSV 路径。
        file_id: Identifier recorded on findings.
        file_id: 记录到结果中的文件标识。

    Returns:
        LoadedWorkbook: Workbook with one sheet.
        LoadedWorkbook: 只含一个工作表的工作簿。

    Raises:
        FileLoadError: When the file cannot be read or decoded.
        FileLoadError: 文件无法读取或解码时抛出。
    """
    pl = require_polars()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileLoadError(
            message=f"Cannot read CSV {file_id} / 无法读取 CSV 文件: {file_id}",
            details={"error": str(exc)},
        ) from exc
    text = _decode_csv(data, file_id=file_id)
    try:
        df = pl.read_csv(
            text.encode("utf-8"),
            has_header=False,
            infer_schema=False,
            truncate_ragged_lines=True,
        )
    except pl.exceptions.NoDataError:
        return LoadedWorkbook(file_id=file_id, sheets=(SheetGrid(name=path.stem, rows=()),))
    except Exception as exc:
        raise FileLoadError(
            message=f"Cannot read CSV {file_id} / 无法读取 CSV 文件: {file_id}",
            details={"error": str(exc)},
        ) from exc
    return LoadedWorkbook(file_id=file_id, sheets=(SheetGrid.from_rows(path.stem, df.rows()),))


def load_workbook(input_file: InputFile) -> LoadedWorkbook:
    """
    Load an input file by extension.
    根据扩展名加载输入文件。

    Args:
        input_file: Input file with a path.
        input_file: 带路径的输入文件。

    Returns:
        LoadedWorkbook: Loaded grids.
        LoadedWorkbook: 加载后的网格。

    Raises:
        FileLoadError: When the file is missing, unsupported or unreadable.
        FileLoadError: 文件不存在、不受支持或无法读取时抛出。
    """
    path = input_file.path
    if path is None or not path.is_file():
        raise FileLoadError(message=f"File not found: {input_file.file_id} / 文件不存在: {input_file.file_id}")
    ext = path.suffix.lower()
    if ext in XLSX_EXTENSIONS:
        workbook = read_xlsx(path, file_id=input_file.file_id)
    elif ext in CSV_EXTENSIONS:
        workbook = read_csv(path, file_id=input_file.file_id)
    else:
        raise FileLoadError(
            message=f"Unsupported file type: {ext} / 不支持的文件类型: {ext}",
            error_code="unsupported_file_type",
        )
    logger.debug("Loaded %s with %d sheet(s)", input_file.file_id, len(workbook.sheets))
    return workbook


def _scan_dir(directory: Path, exts: set[str]) -> list[Path]:
    found: list[Path] = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith(".")]
        for name in files:
            if Path(name).suffix.lower() in exts and not name.startswith("~$"):
                found.append(Path(root) / name)
    found.sort(key=lambda p: (p.name, str(p)))
    return found


def collect_input_files(
    paths: Iterable[str | os.PathLike[str]],
    *,
    allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
) -> list[Path]:
    """
    Expand files and directories into an ordered list of input files.
    将文件与目录展开为有序的输入文件列表。

    Files keep the order given; directories are scanned recursively (hidden
    directories and Office lock files skipped) and sorted by file name.
    Duplicates keep their first position.
    文件保持给定顺序；目录递归扫描（跳过隐藏目录与 Office 锁文件）并按文件名排序；
    重复项保留首次出现的位置。

    Args:
        paths: Files and/or directories.
        paths: 文件和/或目录。
        allowed_extensions: Accepted extensions.
        allowed_extensions: 允许的扩展名。

    Returns:
        list[Path]: Input files.
        list[Path]: 输入文件列表。
    """
    exts = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in allowed_extensions}
    collected: list[Path] = []
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = _scan_dir(path, exts)
        elif path.suffix.lower() in exts:
            candidates = [path]
        else:
            continue
        for candidate in candidates:
            key = candidate.resolve()
            if key not in seen:
                seen.add(key)
                collected.append(candidate)
    return collected
