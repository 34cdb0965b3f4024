"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: storage.py
@DateTime: 2026-10-17
@Docs: Filesystem workspace for uploaded runs and reports.
上传运行与报告的文件系统工作区。
"""

import hashlib
import json
import re
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import UUID

import uuid6

from sensitive_info_extractor.config import WorkspaceConfig

_UNSAFE_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


@dataclass(frozen=True, slots=True)
class RunPaths:
    """
    Resolved paths for a single uploaded run.
    单次上传运行的文件系统路径。

    Attributes:
        root: Root directory for this run.
        root: 本次运行的根目录。
        inputs: Directory holding uploaded files.
        inputs: 存放上传文件的目录。
        meta: Path to meta.json.
        meta: meta.json 路径。
    """

    root: Path
    inputs: Path
    meta: Path


def new_run_id() -> UUID:
    """
    Create a new run id.
    创建新的运行 ID。

    Returns:
        UUID: Generated UUIDv7.
        UUID: 生成的 UUIDv7。
    """
    return uuid6.uuid7()


def now_ts() -> int:
    return int(time.time())


def ensure_dirs(*, config: WorkspaceConfig) -> None:
    """
    Ensure uploads/reports directories exist.
    确保 uploads/reports 目录存在。
    """
    config.uploads_dir.mkdir(parents=True, exist_ok=True)
    config.reports_dir.mkdir(parents=True, exist_ok=True)


def get_run_paths(run_id: UUID, *, config: WorkspaceConfig) -> RunPaths:
    """
    Resolve all filesystem paths for a run.
    为运行解析所有文件系统路径。
    """
    root = config.uploads_dir / str(run_id)
    return RunPaths(root=root, inputs=root / "inputs", meta=root / "meta.json")


def safe_filename(name: str, *, default: str = "upload") -> str:
    """
    Strip directory parts and characters not allowed in file names.
    去除目录部分与文件名中不允许的字符。
    """
    base = Path(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip(" .")
    return cleaned or default


def write_meta(paths: RunPaths, meta: dict[str, Any]) -> None:
    paths.root.mkdir(parents=True, exist_ok=True)
    paths.meta.write_text(json.dumps(meta, ensure_ascii=False, indent=2), encoding="utf-8")


def read_meta(paths: RunPaths) -> dict[str, Any]:
    """
    Read meta.json for a run.
    读取运行的 meta.json。
    """
    return json.loads(paths.meta.read_text(encoding="utf-8"))


def sha256_file(file_path: Path) -> str:
    """
    Compute the sha256 digest of a file.
    计算文件的 sha256 摘要。
    """
    h = hashlib.sha256()
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def safe_rmtree(path: Path) -> None:
    shutil.rmtree(path, ignore_errors=True)


def create_report_path(*, config: WorkspaceConfig, filename: str) -> Path:
    """
    Create a report path under the reports directory.
    在 reports 目录下创建报告路径。
    """
    config.reports_dir.mkdir(parents=True, exist_ok=True)
    return config.reports_dir / safe_filename(filename, default="report.xlsx")


def cleanup_expired_runs(*, config: WorkspaceConfig, ttl_hours: int = 24) -> int:
    """
    Remove uploaded runs older than ``ttl_hours``.
    删除早于 ``ttl_hours`` 的上传运行。

    Args:
        config: Workspace configuration.
        config: 工作区配置。
        ttl_hours: Retention in hours.
        ttl_hours: 保留时长（小时）。

    Returns:
        int: Number of removed runs.
        int: 删除的运行数量。
    """
    if not config.uploads_dir.exists():
        return 0
    cutoff = now_ts() - int(ttl_hours) * 3600
    removed = 0
    for d in config.uploads_dir.iterdir():
        if not d.is_dir():
            continue
        meta_path = d / "meta.json"
        try:
            created_at = int(json.loads(meta_path.read_text(encoding="utf-8")).get("created_at") or 0)
        except (OSError, ValueError):
            created_at = int(d.stat().st_mtime)
        if created_at < cutoff:
            safe_rmtree(d)
            removed += 1
    return removed
