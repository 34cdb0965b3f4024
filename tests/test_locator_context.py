"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: test_locator_context.py
@DateTime: 2026-10-17
@Docs: Tests for locator.py and context.py.
locator.py 与 context.py 测试。
"""

import pytest

from sensitive_info_extractor.context import context_bounds, extract_context
from sensitive_info_extractor.exceptions import ColumnNotFoundError
from sensitive_info_extractor.locator import locate_column, resolve_target_column


class TestLocateColumn:
    """Tests for locate_column.
    locate_column 测试。
    """

    def test_exact_name(self) -> None:
        assert locate_column(["序号", "消息内容", "内容"], "消息内容", ["内容"]) == 1

    def test_name_wins_over_alias(self) -> None:
        """Configured name has priority / 配置列名优先。"""
        assert locate_column(["内容", "消息内容"], "消息内容", ["内容"]) == 1

    def test_first_alias_in_order(self) -> None:
        assert locate_column(["短信", "内容"], "消息内容", ["内容", "短信"]) == 1

    def test_case_sensitive(self) -> None:
        with pytest.raises(ColumnNotFoundError):
            locate_column(["message"], "Message")

    def test_not_found_details(self) -> None:
        with pytest.raises(ColumnNotFoundError) as exc_info:
            locate_column(["a", "b"], "消息内容", ["内容"])
        assert exc_info.value.error_code == "column_not_found"
        assert exc_info.value.details == {"expected": ["消息内容", "内容"], "header": ["a", "b"]}


class TestResolveTargetColumn:
    """Tests for resolve_target_column.
    resolve_target_column 测试。
    """

    def test_configured_name(self) -> None:
        assert resolve_target_column(["a", "消息内容"], "消息内容") == 1

    def test_guess_by_default_name(self) -> None:
        """Empty name picks a header containing the default / 空列名时选择包含默认列名的表头。"""
        assert resolve_target_column(["序号", "短信消息内容"], "") == 1

    def test_guess_first_non_empty(self) -> None:
        assert resolve_target_column(["", "备注"], "  ") == 1

    def test_guess_nothing(self) -> None:
        with pytest.raises(ColumnNotFoundError):
            resolve_target_column(["", ""], "")


class TestContext:
    """Tests for context window extraction.
    上下文窗口提取测试。
    """

    grid = [("h",), ("r1",), ("r2",), ("r3",), ("r4",), ("r5",)]

    def test_middle(self) -> None:
        rows, position = extract_context(self.grid, 3, 1)
        assert [r.row_index for r in rows] == [2, 3, 4]
        assert position == 1

    def test_clipped_at_top_includes_header(self) -> None:
        rows, position = extract_context(self.grid, 1, 2)
        assert [r.row_index for r in rows] == [0, 1, 2, 3]
        assert position == 1

    def test_clipped_at_bottom(self) -> None:
        rows, position = extract_context(self.grid, 5, 3)
        assert [r.row_index for r in rows] == [2, 3, 4, 5]
        assert rows[position].cells == ("r5",)

    def test_zero_context(self) -> None:
        rows, position = extract_context(self.grid, 2, 0)
        assert [r.row_index for r in rows] == [2]
        assert position == 0

    @pytest.mark.parametrize("context_lines", range(8))
    @pytest.mark.parametrize("row_index", range(6))
    def test_window_size_and_position(self, row_index: int, context_lines: int) -> None:
        last = len(self.grid) - 1
        rows, position = extract_context(self.grid, row_index, context_lines)
        expected = min(row_index, context_lines) + min(last - row_index, context_lines) + 1
        assert len(rows) == expected
        assert rows[position].row_index == row_index
        assert [r.row_index for r in rows] == list(range(rows[0].row_index, rows[-1].row_index + 1))

    def test_bounds_errors(self) -> None:
        with pytest.raises(ValueError):
            context_bounds(1, -1, 5)
        with pytest.raises(ValueError):
            context_bounds(6, 1, 5)
