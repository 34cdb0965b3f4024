"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: conftest.py
@DateTime: 2026-10-17
@Docs: Shared test fixtures for the sensitive-info-extractor test suite.
测试套件的公共 fixtures。
"""

import io
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi import UploadFile

from sensitive_info_extractor.config import RunConfig, WorkspaceConfig
from sensitive_info_extractor.models import LoadedWorkbook, SheetGrid

VALID_ID = "110105199003072039"
VALID_ID_2 = "440308199901010012"
BAD_CHECKSUM_ID = "11010519900307888X"
VALID_CARD = "4111111111111111"
VALID_CARD_2 = "5500000000000004"
BAD_CARD = "4111111111111112"
VALID_PHONE = "13800138000"

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def run_config() -> RunConfig:
    """Default RunConfig with a single worker.
    单线程的默认 RunConfig。
    """
    return RunConfig(max_workers=1)


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> WorkspaceConfig:
    """Return a WorkspaceConfig rooted at tmp_path.
    返回以 tmp_path 为根的 WorkspaceConfig。
    """
    return WorkspaceConfig(base_dir=tmp_path / "workspace")


def make_sheet(messages: Sequence[str], *, name: str = "Sheet1", header: str = "消息内容") -> SheetGrid:
    """Build a two-column sheet: an id column and the message column.
    构建两列工作表：序号列与消息列。
    """
    rows: list[list[Any]] = [["序号", header]]
    rows.extend([str(i), m] for i, m in enumerate(messages, start=1))
    return SheetGrid.from_rows(name, rows)


def make_workbook(file_id: str, messages: Sequence[str], **kwargs: Any) -> LoadedWorkbook:
    return LoadedWorkbook(file_id=file_id, sheets=(make_sheet(messages, **kwargs),))


def write_xlsx(path: Path, sheets: dict[str, Iterable[Iterable[Any]]]) -> Path:
    """Write an xlsx file with openpyxl.
    使用 openpyxl 写出 xlsx 文件。

    Args:
        path: Output path / 输出路径。
        sheets: Sheet name to rows / 工作表名到行的映射。

    Returns:
        Path: Written path / 写出的路径。
    """
    import openpyxl

    wb = openpyxl.Workbook()
    first = True
    for title, rows in sheets.items():
        if first:
            ws = wb.active
            ws.title = title
            first = False
        else:
            ws = wb.create_sheet(title)
        for row in rows:
            ws.append(list(row))
    wb.save(path)
    return path


def make_upload_file(filename: str, content: bytes, content_type: str = "text/csv") -> UploadFile:
    """Create a mock UploadFile from bytes.
    从字节内容创建模拟 UploadFile。

    Args:
        filename: File name / 文件名。
        content: File content bytes / 文件内容字节。
        content_type: MIME type / MIME 类型。

    Returns:
        UploadFile: Mock upload file / 模拟上传文件。
    """
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        size=len(content),
        headers=MagicMock(get=lambda k, d=None: content_type if k == "content-type" else d),
    )
