"""
Engine executor — the safe re-encode loop.

Flow:
    check root + encoder → discover assets → per asset:
        encode into scratch → replace original atomically (or keep it) → receipt
    → remove scratch

Each asset is isolated: a failing encode leaves the original untouched,
produces a failed receipt, and the loop moves on. The scratch directory
is created once per run and removed on every exit path, including
exceptions, Ctrl-C and SIGTERM.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import signal
import tempfile
import threading
import time
import uuid
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from asset_recode.adapters.base import Adapter
from asset_recode.adapters.ffmpeg import DEFAULT_TOOL, FfmpegAdapter
from asset_recode.core.config.loader import require_assets_dir
from asset_recode.core.models.action import Receipt
from asset_recode.core.models.asset import Asset
from asset_recode.core.services.discovery import discover_assets

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "asset_recode_"

ResultCallback = Callable[[Receipt], None]


@dataclass
class ProcessingReport:
    """Summary of one run over an assets directory."""

    run_id: str = ""
    root: str = ""
    dry_run: bool = False
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def processed(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def failed_paths(self) -> list[str]:
        return [r.path for r in self.receipts if r.failed]

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.processed > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "root": self.root,
            "dry_run": self.dry_run,
            "status": self.status,
            "total": self.total,
            "processed": self.processed,
            "failed": self.failed,
            "skipped": self.skipped,
            "failed_paths": self.failed_paths,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def process(
    root_dir: Path | str,
    tool: str = DEFAULT_TOOL,
    *,
    timeout: float | None = None,
    workers: int = 1,
    dry_run: bool = False,
    adapter: Adapter | None = None,
    on_result: ResultCallback | None = None,
) -> ProcessingReport:
    """Re-encode every asset under ``root_dir`` in place.

    Args:
        root_dir: Directory to walk recursively.
        tool: Encoder executable (ignored when ``adapter`` is given).
        timeout: Per-file encoder timeout in seconds.
        workers: Parallel encodes. 1 processes assets one at a time.
        dry_run: Discover and report only; nothing is encoded or written.
        adapter: Encoder adapter (default: FfmpegAdapter for ``tool``).
        on_result: Called with each receipt as soon as its asset is done.

    Returns:
        ProcessingReport with one receipt per discovered asset.

    Raises:
        ConfigError: ``root_dir`` is not an existing directory.
        DependencyError: the encoder cannot be found.
    """
    root = require_assets_dir(Path(root_dir))
    if adapter is None:
        adapter = FfmpegAdapter(tool, timeout=timeout)
    if not dry_run:
        adapter.require()

    report = ProcessingReport(
        run_id=generate_run_id(),
        root=str(root),
        dry_run=dry_run,
    )
    assets = discover_assets(root)

    if dry_run:
        for asset in assets:
            receipt = Receipt.skip(
                adapter=adapter.name,
                path=str(asset.path),
                reason="dry run",
                category=asset.category,
            )
            _record(report, receipt, on_result)
        return report

    start = time.monotonic()
    with _terminate_as_exit(), tempfile.TemporaryDirectory(prefix=SCRATCH_PREFIX) as tmp:
        scratch = Path(tmp)
        logger.debug("Scratch directory: %s", scratch)

        if workers <= 1:
            for asset in assets:
                _record(report, transform_asset(asset, adapter, scratch), on_result)
        else:
            _run_pool(assets, adapter, scratch, workers, report, on_result)

    logger.info(
        "Run %s finished in %.1fs: %d processed, %d failed",
        report.run_id,
        time.monotonic() - start,
        report.processed,
        report.failed,
    )
    return report


def transform_asset(asset: Asset, adapter: Adapter, scratch: Path) -> Receipt:
    """Encode one asset and swap it into place, or leave it untouched.

    The output is staged in a private sub-directory of ``scratch`` under
    the original basename, so the encoder picks the right container from
    the extension and equal basenames from different folders never clash.
    """
    work = Path(tempfile.mkdtemp(dir=scratch))
    staged = work / asset.path.name

    try:
        try:
            receipt = adapter.execute(asset, staged)
        except Exception as e:
            receipt = Receipt.failure(
                adapter=adapter.name,
                path=str(asset.path),
                category=asset.category,
                error=f"Encoder error: {e}",
            )

        if receipt.ok:
            try:
                replace_atomic(staged, asset.path)
            except OSError as e:
                receipt = Receipt.failure(
                    adapter=adapter.name,
                    path=str(asset.path),
                    category=asset.category,
                    error=f"Could not replace original: {e}",
                    duration_ms=receipt.duration_ms,
                    size_before=receipt.size_before,
                )
    finally:
        shutil.rmtree(work, ignore_errors=True)

    if receipt.ok:
        logger.info(
            "✓ %s [%s] %s → %s bytes (%dms)",
            asset.path,
            asset.category,
            _fmt_size(receipt.size_before),
            _fmt_size(receipt.size_after),
            receipt.duration_ms,
        )
    elif receipt.failed:
        logger.warning("[warn] %s failed for %s: %s", adapter.name, asset.path, receipt.error)

    return receipt


def replace_atomic(src: Path, dst: Path) -> None:
    """Move ``src`` over ``dst`` so readers see either old or new, never partial.

    Same filesystem: a single rename. Across filesystems: copy into a
    hidden temp file next to ``dst``, then rename that. ``dst`` keeps
    its permission bits.
    """
    try:
        shutil.copymode(dst, src)
    except OSError as e:
        logger.debug("Could not carry over mode of %s: %s", dst, e)

    try:
        os.replace(src, dst)
        return
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    fd, tmp_name = tempfile.mkstemp(dir=dst.parent, prefix=".recode_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        shutil.copy2(src, tmp)
        os.replace(tmp, dst)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    src.unlink(missing_ok=True)


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"


# ── Internal helpers ─────────────────────────────────────────────


def _record(
    report: ProcessingReport,
    receipt: Receipt,
    on_result: ResultCallback | None,
) -> None:
    report.receipts.append(receipt)
    if on_result is not None:
        on_result(receipt)


def _run_pool(
    assets: Iterator[Asset],
    adapter: Adapter,
    scratch: Path,
    workers: int,
    report: ProcessingReport,
    on_result: ResultCallback | None,
) -> None:
    """Encode assets on a bounded thread pool.

    Discovery yields each original path once, so no two workers ever
    target the same file.
    """
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="recode")
    try:
        futures = [pool.submit(transform_asset, a, adapter, scratch) for a in assets]
        for future in as_completed(futures):
            _record(report, future.result(), on_result)
    except BaseException:
        pool.shutdown(wait=True, cancel_futures=True)
        raise
    pool.shutdown(wait=True)


@contextmanager
def _terminate_as_exit():
    """Turn SIGTERM into SystemExit so cleanup runs (main thread only)."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame):  # type: ignore[no-untyped-def]
        raise SystemExit(128 + signum)

    previous = signal.signal(signal.SIGTERM, _handler)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)


def _fmt_size(size: int | None) -> str:
    return f"{size:,}" if size is not None else "?"
