"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: config.py
@DateTime: 2026-10-17
@Docs: Run and workspace configuration helpers.
运行与工作区配置助手。

Configuration is resolved once and passed explicitly into every pipeline
invocation; nothing reads ambient state while a run executes.
配置只解析一次并显式传入每次流水线调用；运行过程中不读取任何全局状态。

Environment variables / 环境变量 (prefix ``SENSITIVE_EXTRACTOR`` by default):
        - ``{prefix}_TARGET_COLUMN``:
            Target column name (default: 消息内容).
            目标列名（默认 消息内容）。
        - ``{prefix}_COLUMN_ALIASES``:
            Comma-separated accepted aliases.
            可接受的列名别名（逗号分隔）。
        - ``{prefix}_CONTEXT_LINES``:
            Context rows before/after a match (default: 2).
            匹配行前后的上下文行数（默认 2）。
        - ``{prefix}_ENABLED_CATEGORIES``:
            Comma-separated categories (phone, id_card, bank_card).
            启用的类别（逗号分隔）。
        - ``{prefix}_MAX_WORKERS``:
            Worker pool size.
            工作线程数。
        - ``{prefix}_BASE_DIR``:
            Workspace directory for uploads and reports.
            上传与报告的工作目录。
        - ``{prefix}_ALLOWED_EXTENSIONS``:
            Comma-separated accepted input extensions.
            允许的输入扩展名（逗号分隔）。

Examples:
        >>> from sensitive_info_extractor.config import resolve_run_config
        >>> cfg = resolve_run_config(context_lines=1)
        >>> cfg.context_lines
        1
"""

import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from sensitive_info_extractor.categories import ALL_CATEGORIES, Category, parse_categories
from sensitive_info_extractor.exceptions import ConfigError
from sensitive_info_extractor.locator import DEFAULT_TARGET_COLUMN

DEFAULT_ENV_PREFIX = "SENSITIVE_EXTRACTOR"
DEFAULT_COLUMN_ALIASES: tuple[str, ...] = ("内容", "短信")
DEFAULT_CONTEXT_LINES = 2
DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (".csv", ".xlsm", ".xlsx")


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Immutable configuration of one extraction run.

    单次提取运行的不可变配置。

    Attributes:
        target_column: Target column name.
            目标列名。
        column_aliases: Accepted aliases, tried in order after the name.
            可接受的别名，在列名之后按顺序尝试。
        context_lines: Context rows on each side of a match.
            匹配行两侧的上下文行数。
        enabled_categories: Categories to scan for.
            需要扫描的类别。
        max_workers: Worker pool size (None for the executor default).
            工作线程数（None 表示使用执行器默认值）。
    """

    target_column: str = DEFAULT_TARGET_COLUMN
    column_aliases: tuple[str, ...] = DEFAULT_COLUMN_ALIASES
    context_lines: int = DEFAULT_CONTEXT_LINES
    enabled_categories: frozenset[Category] = field(default_factory=lambda: ALL_CATEGORIES)
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.context_lines < 0:
            raise ConfigError(message=f"context_lines must be >= 0 / 上下文行数不能为负: {self.context_lines}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(message=f"max_workers must be >= 1 / 工作线程数必须 >= 1: {self.max_workers}")

    def is_enabled(self, category: Category) -> bool:
        return category in self.enabled_categories

    def has_any_category_enabled(self) -> bool:
        return bool(self.enabled_categories)


@dataclass(frozen=True, slots=True)
class WorkspaceConfig:
    """Workspace layout for uploaded runs and generated reports.

    上传运行与生成报告的工作区布局。

    Attributes:
        base_dir: Workspace root.
            工作区根目录。
        uploads_dirname: Uploads subdirectory name.
            uploads 子目录名称。
        reports_dirname: Reports subdirectory name.
            reports 子目录名称。
        allowed_extensions: Accepted input extensions.
            允许的输入扩展名。
    """

    base_dir: Path
    uploads_dirname: str = "uploads"
    reports_dirname: str = "reports"
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS

    @property
    def uploads_dir(self) -> Path:
        return self.base_dir / self.uploads_dirname

    @property
    def reports_dir(self) -> Path:
        return self.base_dir / self.reports_dirname


def _env_get(*names: str) -> str | None:
    """Get the first non-empty environment variable value.

    获取第一个非空环境变量值。
    """
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip():
            return v.strip()
    return None


def _split_csv(value: str | None) -> list[str]:
    if value is None:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _normalize_extensions(values: Iterable[str]) -> tuple[str, ...]:
    """
    Normalize file extensions.
    规范化文件扩展名。
    """
    normalized = []
    for v in values:
        item = str(v).strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = f".{item}"
        normalized.append(item)
    return tuple(sorted(set(normalized)))


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(message=f"{name} must be an integer / {name} 必须为整数: {raw}") from exc


def resolve_run_config(
    *,
    target_column: str | None = None,
    column_aliases: Iterable[str] | None = None,
    context_lines: int | None = None,
    enabled_categories: Iterable[Category | str] | None = None,
    max_workers: int | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> RunConfig:
    """Resolve a run configuration from parameters and environment variables.

    从参数和环境变量解析运行配置。

    Resolution order / 解析优先级:
        1) function parameters / 函数参数
        2) env: ``{env_prefix}_*`` / 环境变量
        3) defaults / 默认值

    Args:
        target_column: Target column name.
            目标列名。
        column_aliases: Accepted aliases.
            可接受的别名。
        context_lines: Context rows on each side.
            每侧上下文行数。
        enabled_categories: Categories to scan for.
            需要扫描的类别。
        max_workers: Worker pool size.
            工作线程数。
        env_prefix: Prefix for environment variables.
            环境变量前缀。

    Returns:
        RunConfig: Resolved configuration.
            解析后的配置。

    Raises:
        ConfigError: When a value cannot be parsed.
            取值无法解析时抛出。
    """
    env_target = _env_get(f"{env_prefix}_TARGET_COLUMN")
    env_aliases = _env_get(f"{env_prefix}_COLUMN_ALIASES")
    env_context = _env_get(f"{env_prefix}_CONTEXT_LINES")
    env_categories = _env_get(f"{env_prefix}_ENABLED_CATEGORIES")
    env_workers = _env_get(f"{env_prefix}_MAX_WORKERS")

    resolved_target = target_column if target_column is not None else (env_target or DEFAULT_TARGET_COLUMN)
    resolved_aliases = tuple(
        column_aliases if column_aliases is not None else (_split_csv(env_aliases) or DEFAULT_COLUMN_ALIASES)
    )
    if context_lines is None:
        context_lines = _parse_int("CONTEXT_LINES", env_context) if env_context else DEFAULT_CONTEXT_LINES
    if max_workers is None and env_workers:
        max_workers = _parse_int("MAX_WORKERS", env_workers)

    if enabled_categories is not None:
        raw_categories = [str(c) for c in enabled_categories]
        resolved_categories = _categories_or_error(raw_categories)
    elif env_categories:
        resolved_categories = _categories_or_error(_split_csv(env_categories))
    else:
        resolved_categories = ALL_CATEGORIES

    return RunConfig(
        target_column=resolved_target,
        column_aliases=resolved_aliases,
        context_lines=context_lines,
        enabled_categories=resolved_categories,
        max_workers=max_workers,
    )


def _categories_or_error(values: list[str]) -> frozenset[Category]:
    try:
        return parse_categories(values)
    except ValueError as exc:
        raise ConfigError(message=f"{exc} / 未知类别", details={"values": values}) from exc


def resolve_workspace_config(
    *,
    base_dir: str | os.PathLike[str] | None = None,
    uploads_dirname: str = "uploads",
    reports_dirname: str = "reports",
    allowed_extensions: Iterable[str] | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> WorkspaceConfig:
    """Resolve the workspace configuration.

    解析工作区配置。

     Resolution order / 解析优先级:
        1) ``base_dir`` parameter / 函数参数 base_dir
        2) env: ``{env_prefix}_BASE_DIR``
           环境变量：``{env_prefix}_BASE_DIR``
        3) system temp directory: ``<temp>/sensitive_extractor``
           系统临时目录：``<temp>/sensitive_extractor``

    Args:
        base_dir: Workspace root.
            工作区根目录。
        uploads_dirname: Uploads subdirectory name.
            uploads 子目录名称。
        reports_dirname: Reports subdirectory name.
            reports 子目录名称。
        allowed_extensions: Accepted input extensions.
            允许的输入扩展名。
        env_prefix: Prefix for environment variables.
            环境变量前缀。

    Returns:
        WorkspaceConfig: Resolved workspace configuration.
            解析后的工作区配置。
    """
    env_base_dir = _env_get(f"{env_prefix}_BASE_DIR")
    resolved_base = Path(base_dir) if base_dir is not None else (Path(env_base_dir) if env_base_dir else None)
    if resolved_base is None:
        resolved_base = Path(tempfile.gettempdir()) / "sensitive_extractor"

    env_exts = _env_get(f"{env_prefix}_ALLOWED_EXTENSIONS")
    resolved_exts = _normalize_extensions(
        allowed_extensions if allowed_extensions is not None else (_split_csv(env_exts) or DEFAULT_ALLOWED_EXTENSIONS)
    )
    return WorkspaceConfig(
        base_dir=resolved_base,
        uploads_dirname=uploads_dirname,
        reports_dirname=reports_dirname,
        allowed_extensions=resolved_exts,
    )
