"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: test_reader.py
@DateTime: 2026-10-17
@Docs: Tests for reader.py and cell conversion.
reader.py 与单元格转换测试。
"""

from pathlib import Path

import pytest

from sensitive_info_extractor.aggregator import run
from sensitive_info_extractor.config import RunConfig
from sensitive_info_extractor.exceptions import FileLoadError
from sensitive_info_extractor.models import InputFile, SheetGrid, cell_to_str
from sensitive_info_extractor.reader import collect_input_files, load_workbook, read_csv, read_xlsx
from tests.conftest import write_xlsx


class TestCellToStr:
    """Tests for cell_to_str.
    cell_to_str 测试。
    """

    def test_values(self) -> None:
        assert cell_to_str(None) == ""
        assert cell_to_str(13800138000) == "13800138000"
        assert cell_to_str(13800138000.0) == "13800138000"
        assert cell_to_str(1.5) == "1.5"
        assert cell_to_str(True) == "true"
        assert cell_to_str("abc") == "abc"

    def test_grid_is_padded(self) -> None:
        grid = SheetGrid.from_rows("S", [["a", "b", "c"], ["x"]])
        assert grid.rows == (("a", "b", "c"), ("x", "", ""))
        assert grid.header == ("a", "b", "c")
        assert grid.last_row_index == 1


class TestReadXlsx:
    """Tests for read_xlsx.
    read_xlsx 测试。
    """

    def test_all_sheets_in_order(self, tmp_path: Path) -> None:
        path = write_xlsx(
            tmp_path / "a.xlsx",
            {
                "first": [["消息内容"], ["电话13800138000"]],
                "second": [["消息内容", "备注"], [13900139000, None]],
            },
        )
        workbook = read_xlsx(path, file_id="a.xlsx")
        assert [s.name for s in workbook.sheets] == ["first", "second"]
        assert workbook.sheets[1].rows[1] == ("13900139000", "")

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.xlsx"
        path.write_bytes(b"not a zip")
        with pytest.raises(FileLoadError):
            read_xlsx(path, file_id="bad.xlsx")


class TestReadCsv:
    """Tests for read_csv.
    read_csv 测试。
    """

    def test_basic(self, tmp_path: Path) -> None:
        path = tmp_path / "msgs.csv"
        path.write_text("序号,消息内容\n1,电话13800138000\n2,\n", encoding="utf-8")
        workbook = read_csv(path, file_id="msgs.csv")
        sheet = workbook.sheets[0]
        assert sheet.name == "msgs"
        assert sheet.header == ("序号", "消息内容")
        assert sheet.rows[1] == ("1", "电话13800138000")
        assert sheet.rows[2] == ("2", "")

    def test_leading_zeros_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "ids.csv"
        path.write_text("消息内容\n0123\n", encoding="utf-8")
        assert read_csv(path, file_id="ids.csv").sheets[0].rows[1] == ("0123",)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        workbook = read_csv(path, file_id="empty.csv")
        assert workbook.sheets[0].rows == ()

    def test_gb18030_file(self, tmp_path: Path) -> None:
        """GBK/GB18030 exports keep their Chinese header / GBK/GB18030 导出文件保留中文表头。"""
        path = tmp_path / "gbk.csv"
        path.write_bytes("消息内容\n电话13800138000\n".encode("gb18030"))
        sheet = read_csv(path, file_id="gbk.csv").sheets[0]
        assert sheet.header == ("消息内容",)
        assert sheet.rows[1] == ("电话13800138000",)

    def test_utf8_bom_stripped(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.csv"
        path.write_text("消息内容\n13800138000\n", encoding="utf-8-sig")
        assert read_csv(path, file_id="bom.csv").sheets[0].header == ("消息内容",)

    def test_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.csv"
        path.write_bytes(b"\xff\xfe\xff")
        with pytest.raises(FileLoadError) as exc_info:
            read_csv(path, file_id="bad.csv")
        assert exc_info.value.error_code == "decode_error"


class TestLoadWorkbook:
    """Tests for load_workbook dispatch.
    load_workbook 分派测试。
    """

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileLoadError):
            load_workbook(InputFile.from_path(tmp_path / "nope.xlsx"))

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(FileLoadError) as exc_info:
            load_workbook(InputFile.from_path(path))
        assert exc_info.value.error_code == "unsupported_file_type"

    def test_end_to_end_from_disk(self, tmp_path: Path) -> None:
        xlsx = write_xlsx(tmp_path / "a.xlsx", {"S": [["消息内容"], ["13800138000"]]})
        csv = tmp_path / "b.csv"
        csv.write_text("消息内容\n卡4111111111111111\n", encoding="utf-8")
        broken = tmp_path / "c.xlsx"
        broken.write_bytes(b"oops")
        result = run([xlsx, csv, broken], RunConfig(max_workers=2))
        assert [f.file_id for f in result.findings] == ["a.xlsx", "b.csv"]
        assert [e.file_id for e in result.errors] == ["c.xlsx"]


class TestCollectInputFiles:
    """Tests for collect_input_files.
    collect_input_files 测试。
    """

    def test_directory_scan(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / ".hidden").mkdir()
        for rel in ("b.csv", "a.xlsx", "sub/c.csv", ".hidden/d.csv", "~$a.xlsx", "notes.txt"):
            (tmp_path / rel).write_bytes(b"")
        found = collect_input_files([tmp_path])
        assert [p.name for p in found] == ["a.xlsx", "b.csv", "c.csv"]

    def test_files_keep_order_and_dedupe(self, tmp_path: Path) -> None:
        for name in ("x.csv", "y.csv"):
            (tmp_path / name).write_bytes(b"")
        found = collect_input_files([tmp_path / "y.csv", tmp_path / "x.csv", tmp_path / "y.csv", tmp_path / "z.md"])
        assert [p.name for p in found] == ["y.csv", "x.csv"]
