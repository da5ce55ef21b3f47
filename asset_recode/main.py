"""
asset-recode — CLI entrypoint.

Usage:
    asset-recode                      # same as `asset-recode compress`
    asset-recode compress --assets-dir public/media --workers 4
    asset-recode scan --json
    asset-recode check
    python -m asset_recode.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from asset_recode import __version__
from asset_recode.core.models.action import Receipt
from asset_recode.core.observability.logging_config import resolve_level, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="asset-recode")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to recode.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """asset-recode — shrink images and videos in place, safely."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug, verbose, quiet, os.environ.get("RECODE_LOG_LEVEL")),
        log_file=os.environ.get("RECODE_LOG_FILE"),
        log_file_level=os.environ.get("RECODE_LOG_FILE_LEVEL"),
    )

    # Bare `asset-recode` behaves like the original single-purpose script
    if ctx.invoked_subcommand is None:
        ctx.invoke(compress)


@cli.command()
@click.option(
    "--assets-dir",
    "-d",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to re-encode (default: ./assets or recode.yml).",
)
@click.option("--ffmpeg", "tool", default=None, help="ffmpeg executable name or path.")
@click.option("--timeout", type=float, default=None, help="Per-file encoder timeout (seconds).")
@click.option("--workers", "-j", type=int, default=None, help="Parallel encodes (default: 1).")
@click.option("--dry-run", is_flag=True, help="List what would be re-encoded, change nothing.")
@click.option("--mock", is_flag=True, help="Use mock encoder (copies files, no ffmpeg).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def compress(
    ctx: click.Context,
    assets_dir: str | None,
    tool: str | None,
    timeout: float | None,
    workers: int | None,
    dry_run: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Re-encode every image and video under the assets directory.

    Each file is encoded into a scratch directory first and only
    replaces the original when ffmpeg succeeds. Files that fail are left
    untouched and reported; they do not stop the run.

    Exit codes: 0 done (even with per-file failures), 1 assets directory
    missing or bad config, 2 ffmpeg not found.
    """
    from asset_recode.core.use_cases.compress import run_compress

    quiet = ctx.obj.get("quiet", False)
    show_progress = not as_json and not quiet

    def _on_start(config) -> None:  # type: ignore[no-untyped-def]
        if show_progress:
            label = "[dry-run] " if dry_run else "[mock] " if mock else ""
            click.secho(f"{label}Compressing media in: {config.assets_dir}", fg="cyan", bold=True)

    def _on_result(receipt: Receipt) -> None:
        if show_progress:
            _echo_receipt(receipt, verbose=ctx.obj.get("verbose", False))

    result = run_compress(
        config_path=ctx.obj.get("config_path"),
        assets_dir=assets_dir,
        tool=tool,
        timeout=timeout,
        workers=workers,
        dry_run=dry_run,
        mock_mode=mock,
        on_start=_on_start,
        on_result=_on_result,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(result.exit_code)

    report = result.report
    assert report is not None  # guaranteed after error check above

    click.echo()
    if dry_run:
        click.secho(f"   Would re-encode: {report.skipped} file(s)", bold=True)
    else:
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
            report.status, "white"
        )
        click.secho(
            f"   Done: {report.processed} re-encoded, {report.failed} failed",
            fg=status_color,
            bold=True,
        )
        for path in report.failed_paths:
            click.echo(f"     • {path} (left unchanged)")
    if not quiet:
        click.echo("   Temporary files cleaned up.")
    click.echo()


@cli.command()
@click.option(
    "--assets-dir",
    "-d",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to scan (default: ./assets or recode.yml).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def scan(ctx: click.Context, assets_dir: str | None, as_json: bool) -> None:
    """List the media files compress would pick up, by category."""
    from asset_recode.core.config.loader import ConfigError, load_config, require_assets_dir
    from asset_recode.core.services.discovery import count_by_category, discover_assets

    try:
        config = load_config(ctx.obj.get("config_path"), assets_dir=assets_dir)
        root = require_assets_dir(config.assets_dir)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    assets = list(discover_assets(root))
    counts = count_by_category(assets)

    if as_json:
        click.echo(json.dumps({
            "root": str(root),
            "total": len(assets),
            "categories": counts,
            "assets": [
                {"path": str(a.path), "category": a.category} for a in assets
            ],
        }, indent=2))
        return

    click.secho(f"\n🔍 {root}", fg="cyan", bold=True)
    for asset in assets:
        click.echo(f"   {asset.category:<10}  {_relative(asset.path, root)}")
    click.echo()
    summary = ", ".join(f"{name}: {n}" for name, n in counts.items())
    click.secho(f"   {len(assets)} file(s) — {summary}", bold=True)
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Show resolved settings and whether a run could start."""
    from asset_recode.adapters.ffmpeg import FfmpegAdapter
    from asset_recode.core.config.loader import ConfigError, load_config
    from asset_recode.core.use_cases.compress import (
        EXIT_CONFIG_ERROR,
        EXIT_DEPENDENCY_ERROR,
        EXIT_OK,
    )

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(EXIT_CONFIG_ERROR)

    adapter = FfmpegAdapter(config.ffmpeg, timeout=config.timeout)
    assets_ok = config.assets_dir.is_dir()
    tool_path = adapter.resolve()
    tool_version = adapter.version() if tool_path else None

    if not assets_ok:
        exit_code = EXIT_CONFIG_ERROR
    elif tool_path is None:
        exit_code = EXIT_DEPENDENCY_ERROR
    else:
        exit_code = EXIT_OK

    if as_json:
        click.echo(json.dumps({
            "config": config.to_dict(),
            "assets_dir_exists": assets_ok,
            "ffmpeg_path": tool_path,
            "ffmpeg_version": tool_version,
            "ready": exit_code == EXIT_OK,
        }, indent=2))
        sys.exit(exit_code)

    click.echo()
    click.secho("⚙️  asset-recode", bold=True)
    click.echo(f"   Config:  {config.config_path or '(none, using defaults)'}")
    click.echo(f"   Workers: {config.workers}")
    click.echo(f"   Timeout: {f'{config.timeout:g}s' if config.timeout else 'none'}")
    click.echo()

    if assets_ok:
        click.secho(f"   ✓ Assets: {config.assets_dir}", fg="green")
    else:
        click.secho(f"   ✗ Assets: {config.assets_dir} (not found)", fg="red")

    if tool_path:
        click.secho(f"   ✓ ffmpeg: {tool_path}", fg="green")
        if tool_version:
            click.echo(f"     {tool_version}")
    else:
        click.secho(f"   ✗ ffmpeg: {config.ffmpeg} (not in PATH)", fg="red")

    click.echo()
    sys.exit(exit_code)


# ── Output helpers ──────────────────────────────────────────────


def _echo_receipt(receipt: Receipt, verbose: bool = False) -> None:
    """One progress line per asset."""
    if receipt.ok:
        click.secho(f" -> {receipt.path}", fg="green", nl=False)
        timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
        sizes = ""
        if verbose and receipt.size_before and receipt.size_after:
            sizes = f" {receipt.size_before:,} → {receipt.size_after:,} bytes"
        click.echo(f"{timing}{sizes}")
    elif receipt.failed:
        click.secho(f" -> {receipt.path}", fg="red", nl=False)
        click.echo(" (failed, left unchanged)")
        if verbose and receipt.error:
            for line in receipt.error.split("\n")[:5]:
                click.echo(f"     │ {line}")
    else:
        click.secho(f" -> {receipt.path} ", fg="yellow", nl=False)
        click.echo(f"[{receipt.category}]")


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    cli()
