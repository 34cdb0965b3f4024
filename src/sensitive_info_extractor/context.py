"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: context.py
@DateTime: 2026-10-17
@Docs: Context window extraction around a matched row.
匹配行周围的上下文窗口提取。
"""

from collections.abc import Sequence

from sensitive_info_extractor.models import ContextRow


def context_bounds(target_row_index: int, context_count: int, last_row_index: int) -> tuple[int, int]:
    """Return the inclusive window ``(first, last)`` clipped to the sheet.
    返回裁剪到工作表范围内的闭区间窗口 ``(first, last)``。

    Raises:
        ValueError: On a negative count or an out-of-range target row.
            上下文行数为负或目标行越界时抛出。
    """
    if context_count < 0:
        raise ValueError(f"context_count must be >= 0, got {context_count}")
    if not 0 <= target_row_index <= last_row_index:
        raise ValueError(f"Row {target_row_index} outside [0, {last_row_index}]")
    return max(0, target_row_index - context_count), min(last_row_index, target_row_index + context_count)


def extract_context(
    grid: Sequence[Sequence[str]], target_row_index: int, context_count: int
) -> tuple[tuple[ContextRow, ...], int]:
    """Build the context window for a matched row.
    为匹配行构建上下文窗口。

    The window ``[r - c, r + c]`` is clipped to ``[0, last_row_index]``; the
    target row appears exactly once.
    窗口 ``[r - c, r + c]`` 裁剪到 ``[0, last_row_index]``，目标行恰好出现一次。

    Args:
        grid: Sheet rows.
            工作表行。
        target_row_index: Matched row index.
            匹配行索引。
        context_count: Rows to include on each side.
            每侧包含的行数。
    Returns:
        tuple[tuple[ContextRow, ...], int]: Context rows and the target's position in them.
            上下文行以及目标行在其中的位置。
    """
    first, last = context_bounds(target_row_index, context_count, len(grid) - 1)
    rows = tuple(ContextRow(row_index=i, cells=tuple(grid[i])) for i in range(first, last + 1))
    return rows, target_row_index - first
