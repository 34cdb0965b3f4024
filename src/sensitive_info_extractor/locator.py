"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: locator.py
@DateTime: 2026-10-17
@Docs: Locate the target text column in a header row.
在表头行中定位目标文本列。
"""

from collections.abc import Sequence

from sensitive_info_extractor.exceptions import ColumnNotFoundError

DEFAULT_TARGET_COLUMN = "消息内容"


def locate_column(header_row: Sequence[str], configured_name: str, aliases: Sequence[str] = ()) -> int:
    """
    Find the column index of the configured name or its first matching alias.
    查找配置列名或首个匹配别名所在的列索引。

    Matching is exact and case-sensitive. The configured name is tried first,
    then each alias in order; the first hit wins.
    精确且区分大小写匹配；先匹配配置列名，再按顺序匹配别名，首个命中即返回。

    Args:
        header_row: Header cells.
        header_row: 表头单元格。
        configured_name: Configured target column name.
        configured_name: 配置的目标列名。
        aliases: Accepted aliases in priority order.
        aliases: 按优先级排列的可接受别名。

    Returns:
        int: Column index.
        int: 列索引。

    Raises:
        ColumnNotFoundError: When neither the name nor any alias is present.
        ColumnNotFoundError: 列名与别名均不存在时抛出。
    """
    header = list(header_row)
    for name in (configured_name, *aliases):
        if not name:
            continue
        try:
            return header.index(name)
        except ValueError:
            continue
    names = [n for n in (configured_name, *aliases) if n]
    raise ColumnNotFoundError(
        message=f"Target column not found: {', '.join(names)} / 未找到目标列: {', '.join(names)}",
        details={"expected": names, "header": header},
    )


def resolve_target_column(header_row: Sequence[str], configured_name: str, aliases: Sequence[str] = ()) -> int:
    """
    Locate the target column, guessing one when no name is configured.
    定位目标列；未配置列名时自动推断。

    With an empty configured name the first header containing the default
    name is used, otherwise the first non-empty header.
    配置列名为空时，优先选择包含默认列名的表头，否则选择第一个非空表头。

    Args:
        header_row: Header cells.
        header_row: 表头单元格。
        configured_name: Configured target column name (may be empty).
        configured_name: 配置的目标列名（可为空）。
        aliases: Accepted aliases.
        aliases: 可接受的别名。

    Returns:
        int: Column index.
        int: 列索引。
    """
    if configured_name.strip():
        return locate_column(header_row, configured_name, aliases)
    for i, cell in enumerate(header_row):
        if DEFAULT_TARGET_COLUMN in cell:
            return i
    for i, cell in enumerate(header_row):
        if cell.strip():
            return i
    raise ColumnNotFoundError(message="Sheet has no usable column / 工作表没有可用的列")
