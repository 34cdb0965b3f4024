"""
@Author: li
@Email: lijianqiao2906@live.com
@FileName: service.py
@DateTime: 2026-10-17
@Docs: Extraction service for FastAPI uploads.
面向 FastAPI 上传文件的提取服务。

Uploaded files are stored under a fresh run directory, scanned in a worker
thread and summarized into an xlsx report under the reports directory.
上传文件保存到新的运行目录，在工作线程中扫描，并在 reports 目录生成 xlsx 报告。
"""

import logging
import threading
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from sensitive_info_extractor.aggregator import ProgressFn, run
from sensitive_info_extractor.config import RunConfig, WorkspaceConfig, resolve_run_config, resolve_workspace_config
from sensitive_info_extractor.exceptions import UploadError
from sensitive_info_extractor.formats import UPLOAD_MIME_TYPES, ReportFormat
from sensitive_info_extractor.models import InputFile, RunResult
from sensitive_info_extractor.report import DEFAULT_REPORT_NAME, build_report_filename, write_report
from sensitive_info_extractor.schemas import ExtractResponse, FileErrorItem, FindingItem, StatisticsItem
from sensitive_info_extractor.storage import (
    RunPaths,
    create_report_path,
    ensure_dirs,
    get_run_paths,
    new_run_id,
    now_ts,
    safe_filename,
    safe_rmtree,
    sha256_file,
    write_meta,
)

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class ExtractionService:
    """
    Extraction service for uploaded spreadsheets.
    上传表格的提取服务。

    Examples:
        >>> from sensitive_info_extractor import ExtractionService
        >>> svc = ExtractionService()

        With custom base_dir / 指定 base_dir:

        >>> svc = ExtractionService(base_dir="D:/tmp/sensitive-extractor")
    """

    def __init__(
        self,
        *,
        run_config: RunConfig | None = None,
        workspace: WorkspaceConfig | None = None,
        base_dir: str | None = None,
        max_upload_mb: int = 20,
        allowed_mime_types: Iterable[str] = UPLOAD_MIME_TYPES,
    ):
        """
        Initialize the extraction service.
        初始化提取服务。

        Args:
            run_config: Optional run config (resolved from env when omitted).
                运行配置（可选，缺省时从环境变量解析）。
            workspace: Optional workspace config.
                工作区配置（可选）。
            base_dir: Optional base dir override for the workspace.
                工作目录根路径（可选，仅在未传 workspace 时生效）。
            max_upload_mb: Max upload size in MB per file.
                单个文件最大上传大小（MB，默认 20）。
            allowed_mime_types: Accepted upload content types.
                允许的上传内容类型。
        """
        self.run_config = run_config or resolve_run_config()
        self.workspace = workspace or resolve_workspace_config(base_dir=base_dir)
        self.max_upload_mb = max_upload_mb
        self.allowed_mime_types = {m.strip().lower() for m in allowed_mime_types if m.strip()}

    async def _save_upload(self, file: UploadFile, paths: RunPaths, index: int) -> dict[str, Any]:
        filename = file.filename or "upload"
        ext = Path(filename).suffix.lower()
        if ext not in self.workspace.allowed_extensions:
            raise UploadError(
                message=f"Unsupported file extension: {ext} / 不支持的文件扩展名: {ext}",
                status_code=415,
                error_code="unsupported_media_type",
                details={"filename": filename},
            )
        content_type = str(file.content_type or "").strip().lower()
        if self.allowed_mime_types and content_type and content_type not in self.allowed_mime_types:
            raise UploadError(
                message=f"Unsupported content type: {content_type} / 不支持的内容类型: {content_type}",
                status_code=415,
                error_code="unsupported_media_type",
                details={"filename": filename},
            )

        # Index prefix keeps same-named uploads apart.
        stored = paths.inputs / f"{index:03d}_{safe_filename(filename)}"
        size = 0
        limit = int(self.max_upload_mb) * 1024 * 1024
        with stored.open("wb") as out:
            while True:
                chunk = await file.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    raise UploadError(
                        message="File too large / 上传文件过大",
                        status_code=413,
                        error_code="file_too_large",
                        details={"filename": filename, "max_upload_mb": self.max_upload_mb},
                    )
                out.write(chunk)

        return {
            "filename": filename,
            "stored_as": stored.name,
            "content_type": file.content_type,
            "checksum": sha256_file(stored),
            "size_bytes": size,
        }

    async def extract_uploads(
        self,
        files: Sequence[UploadFile],
        *,
        fmt: ReportFormat | str = ReportFormat.XLSX,
        cancel_event: threading.Event | None = None,
        on_progress: ProgressFn | None = None,
    ) -> ExtractResponse:
        """
        Store uploads, scan them and write a report.
        保存上传文件、扫描并写出报告。

        Args:
            files: FastAPI UploadFile list, in report order.
                FastAPI UploadFile 列表（按报告顺序）。
            fmt: Report format.
                报告格式。
            cancel_event: Optional cancellation signal.
                可选的取消信号。
            on_progress: Optional ``(file_id, percent)`` callback.
                可选的 ``(file_id, percent)`` 进度回调。

        Returns:
            ExtractResponse: Findings, file errors, statistics and report name.
                结果、文件错误、统计与报告文件名。

        Raises:
            UploadError: If a file extension, content type or size is rejected.
                文件扩展名、内容类型或大小被拒绝时抛出。
        """
        ensure_dirs(config=self.workspace)
        run_id = new_run_id()
        paths = get_run_paths(run_id, config=self.workspace)
        paths.inputs.mkdir(parents=True, exist_ok=True)

        uploads: list[dict[str, Any]] = []
        try:
            for index, file in enumerate(files):
                uploads.append(await self._save_upload(file, paths, index))
        except UploadError:
            safe_rmtree(paths.root)
            raise

        meta: dict[str, Any] = {
            "run_id": str(run_id),
            "created_at": now_ts(),
            "status": "uploaded",
            "files": uploads,
        }
        write_meta(paths, meta)
        logger.info("Run %s: stored %d upload(s)", run_id, len(uploads))

        inputs = [InputFile(file_id=u["filename"], path=paths.inputs / u["stored_as"]) for u in uploads]
        result: RunResult = await run_in_threadpool(
            run, inputs, self.run_config, cancel_event=cancel_event, on_progress=on_progress
        )

        report_filename: str | None = None
        if result.findings or result.errors:
            name = build_report_filename(f"{DEFAULT_REPORT_NAME}_{run_id}", fmt=fmt)
            report_path = create_report_path(config=self.workspace, filename=name)
            write_report(result, report_path, fmt=fmt)
            report_filename = report_path.name

        meta.update(
            {
                "status": "cancelled" if result.cancelled else "done",
                "finished_at": now_ts(),
                "report_filename": report_filename,
                "findings": len(result.findings),
                "errors": len(result.errors),
            }
        )
        write_meta(paths, meta)

        return ExtractResponse(
            run_id=run_id,
            cancelled=result.cancelled,
            statistics=StatisticsItem.from_statistics(result.statistics),
            findings=[FindingItem.from_finding(f) for f in result.findings],
            file_errors=[FileErrorItem.from_error(e) for e in result.errors],
            report_filename=report_filename,
        )
