"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: test_aggregator.py
@DateTime: 2026-10-17
@Docs: Tests for aggregator.py module.
aggregator.py 模块测试。
"""

import threading
import time

import pytest

from sensitive_info_extractor.aggregator import run
from sensitive_info_extractor.config import RunConfig
from sensitive_info_extractor.exceptions import ConfigError, FileLoadError
from sensitive_info_extractor.models import InputFile, LoadedWorkbook
from tests.conftest import VALID_CARD, VALID_ID, make_workbook

WORKBOOKS: dict[str, LoadedWorkbook] = {
    "a.xlsx": make_workbook("a.xlsx", ["电话13800138000", f"卡{VALID_CARD}"]),
    "b.xlsx": make_workbook("b.xlsx", [f"身份证{VALID_ID}"]),
    "c.xlsx": make_workbook("c.xlsx", ["无", "13900139000"]),
    "missing.xlsx": make_workbook("missing.xlsx", ["13700137000"], header="其他"),
}

INPUTS = [InputFile(file_id=name) for name in ("a.xlsx", "b.xlsx", "c.xlsx")]


def dict_loader(input_file: InputFile) -> LoadedWorkbook:
    return WORKBOOKS[input_file.file_id]


def slow_first_loader(input_file: InputFile) -> LoadedWorkbook:
    """Earlier files finish later / 越靠前的文件越晚完成。"""
    delay = {"a.xlsx": 0.15, "b.xlsx": 0.05}.get(input_file.file_id, 0.0)
    time.sleep(delay)
    return WORKBOOKS[input_file.file_id]


def _keys(result) -> list[tuple[str, str, int, str]]:
    return [(f.file_id, f.sheet, f.row_number, f.candidate.text) for f in result.findings]


class TestRun:
    """Tests for run().
    run() 测试。
    """

    def test_merges_in_input_order(self, run_config: RunConfig) -> None:
        result = run(INPUTS, run_config, loader=dict_loader)
        assert [f.file_id for f in result.findings] == ["a.xlsx", "a.xlsx", "b.xlsx", "c.xlsx"]
        assert result.completed_files == ("a.xlsx", "b.xlsx", "c.xlsx")
        assert not result.cancelled
        assert result.errors == ()

    def test_order_independent_of_completion(self, run_config: RunConfig) -> None:
        """Parallel output equals sequential output / 并行输出与串行输出一致。"""
        sequential = run(INPUTS, run_config, loader=slow_first_loader, max_workers=1)
        parallel = run(INPUTS, run_config, loader=slow_first_loader, max_workers=3)
        assert _keys(parallel) == _keys(sequential)

    def test_idempotent(self, run_config: RunConfig) -> None:
        first = run(INPUTS, run_config, loader=dict_loader, max_workers=2)
        second = run(INPUTS, run_config, loader=dict_loader, max_workers=2)
        assert _keys(first) == _keys(second)

    def test_missing_column_isolated(self, run_config: RunConfig) -> None:
        inputs = [InputFile(file_id="missing.xlsx"), InputFile(file_id="b.xlsx")]
        result = run(inputs, run_config, loader=dict_loader)
        assert [f.file_id for f in result.findings] == ["b.xlsx"]
        assert len(result.errors) == 1
        assert result.errors[0].file_id == "missing.xlsx"
        assert result.errors[0].error_code == "column_not_found"

    def test_load_errors_collected(self, run_config: RunConfig) -> None:
        def loader(input_file: InputFile) -> LoadedWorkbook:
            if input_file.file_id == "a.xlsx":
                raise FileLoadError(message="broken", error_code="unsupported_file_type")
            if input_file.file_id == "b.xlsx":
                raise RuntimeError("boom")
            return WORKBOOKS[input_file.file_id]

        result = run(INPUTS, run_config, loader=loader)
        assert [(e.file_id, e.error_code) for e in result.errors] == [
            ("a.xlsx", "unsupported_file_type"),
            ("b.xlsx", "file_load_error"),
        ]
        assert [f.file_id for f in result.findings] == ["c.xlsx"]

    def test_empty_input(self, run_config: RunConfig) -> None:
        result = run([], run_config)
        assert result.findings == ()
        assert not result.cancelled

    def test_no_category_enabled(self) -> None:
        with pytest.raises(ConfigError):
            run(INPUTS, RunConfig(enabled_categories=frozenset()), loader=dict_loader)

    def test_progress(self, run_config: RunConfig) -> None:
        calls: list[tuple[str, int]] = []
        run(INPUTS, run_config, loader=dict_loader, on_progress=lambda f, p: calls.append((f, p)))
        assert [p for _, p in calls] == [33, 66, 100]
        assert sorted(f for f, _ in calls) == ["a.xlsx", "b.xlsx", "c.xlsx"]

    def test_statistics(self, run_config: RunConfig) -> None:
        stats = run(INPUTS, run_config, loader=dict_loader).statistics
        assert stats.total_findings == 4
        assert stats.rows_with_findings == 4
        assert stats.total_valid == 4
        assert stats.total_invalid == 0


class TestCancellation:
    """Tests for run-level cancellation.
    运行级取消测试。
    """

    def test_cancel_before_start(self, run_config: RunConfig) -> None:
        event = threading.Event()
        event.set()
        result = run(INPUTS, run_config, loader=dict_loader, cancel_event=event)
        assert result.cancelled
        assert result.findings == ()
        assert result.completed_files == ()

    def test_cancel_mid_run_keeps_completed(self, run_config: RunConfig) -> None:
        """Completed files are kept, the rest dropped / 已完成文件保留，其余丢弃。"""
        event = threading.Event()

        def loader(input_file: InputFile) -> LoadedWorkbook:
            if input_file.file_id == "b.xlsx":
                event.set()
            return WORKBOOKS[input_file.file_id]

        result = run(INPUTS, run_config, loader=loader, cancel_event=event, max_workers=1)
        assert result.cancelled
        assert result.completed_files == ("a.xlsx",)
        assert {f.file_id for f in result.findings} == {"a.xlsx"}
