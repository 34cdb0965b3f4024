"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: test_storage.py
@DateTime: 2026-10-17
@Docs: Tests for storage.py module.
storage.py 模块测试。
"""

import hashlib
from pathlib import Path
from unittest.mock import patch

from sensitive_info_extractor.config import WorkspaceConfig
from sensitive_info_extractor.storage import (
    cleanup_expired_runs,
    create_report_path,
    ensure_dirs,
    get_run_paths,
    new_run_id,
    now_ts,
    read_meta,
    safe_filename,
    sha256_file,
    write_meta,
)


class TestRunPaths:
    """Tests for run ids and paths.
    运行 ID 与路径测试。
    """

    def test_new_run_id_is_v7(self) -> None:
        assert new_run_id().version == 7

    def test_ids_unique(self) -> None:
        assert new_run_id() != new_run_id()

    def test_paths(self, tmp_workspace: WorkspaceConfig) -> None:
        run_id = new_run_id()
        paths = get_run_paths(run_id, config=tmp_workspace)
        assert paths.root == tmp_workspace.uploads_dir / str(run_id)
        assert paths.inputs.parent == paths.root
        assert paths.meta.name == "meta.json"

    def test_ensure_dirs(self, tmp_workspace: WorkspaceConfig) -> None:
        ensure_dirs(config=tmp_workspace)
        assert tmp_workspace.uploads_dir.is_dir()
        assert tmp_workspace.reports_dir.is_dir()


class TestFiles:
    """Tests for file helpers.
    文件辅助函数测试。
    """

    def test_meta_roundtrip(self, tmp_workspace: WorkspaceConfig) -> None:
        paths = get_run_paths(new_run_id(), config=tmp_workspace)
        write_meta(paths, {"status": "uploaded", "name": "短信.xlsx"})
        assert read_meta(paths) == {"status": "uploaded", "name": "短信.xlsx"}

    def test_sha256(self, tmp_path: Path) -> None:
        path = tmp_path / "f.bin"
        path.write_bytes(b"hello")
        assert sha256_file(path) == hashlib.sha256(b"hello").hexdigest()

    def test_safe_filename(self) -> None:
        assert safe_filename("../../etc/passwd") == "passwd"
        assert safe_filename("C:\\data\\短信.xlsx") == "短信.xlsx"
        assert safe_filename('a:b*?.csv') == "a_b__.csv"
        assert safe_filename("..") == "upload"

    def test_create_report_path(self, tmp_workspace: WorkspaceConfig) -> None:
        path = create_report_path(config=tmp_workspace, filename="../r.xlsx")
        assert path == tmp_workspace.reports_dir / "r.xlsx"
        assert path.parent.is_dir()


class TestCleanup:
    """Tests for cleanup_expired_runs.
    cleanup_expired_runs 测试。
    """

    def test_no_uploads_dir(self, tmp_workspace: WorkspaceConfig) -> None:
        assert cleanup_expired_runs(config=tmp_workspace) == 0

    def test_removes_only_expired(self, tmp_workspace: WorkspaceConfig) -> None:
        old = get_run_paths(new_run_id(), config=tmp_workspace)
        fresh = get_run_paths(new_run_id(), config=tmp_workspace)
        write_meta(old, {"created_at": now_ts() - 48 * 3600})
        write_meta(fresh, {"created_at": now_ts()})
        assert cleanup_expired_runs(config=tmp_workspace, ttl_hours=24) == 1
        assert not old.root.exists()
        assert fresh.root.exists()

    def test_falls_back_to_mtime(self, tmp_workspace: WorkspaceConfig) -> None:
        paths = get_run_paths(new_run_id(), config=tmp_workspace)
        paths.root.mkdir(parents=True)
        with patch("sensitive_info_extractor.storage.now_ts", return_value=now_ts() + 100 * 3600):
            assert cleanup_expired_runs(config=tmp_workspace, ttl_hours=24) == 1
        assert not paths.root.exists()

    def test_corrupt_meta_uses_mtime(self, tmp_workspace: WorkspaceConfig) -> None:
        paths = get_run_paths(new_run_id(), config=tmp_workspace)
        paths.root.mkdir(parents=True)
        paths.meta.write_text("{not json", encoding="utf-8")
        assert cleanup_expired_runs(config=tmp_workspace) == 0
