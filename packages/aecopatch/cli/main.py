"""Command-line interface for aecopatch."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aecopatch.cli.preview import build_source_tree
from aecopatch.core.config.loader import configure_logging, load_app_config
from aecopatch.core.config.models import AppConfig
from aecopatch.core.errors import PatchConfigError
from aecopatch.core.generator import generate_config
from aecopatch.core.manifest import verify_target
from aecopatch.core.utils import write_json

console = Console()
logger = logging.getLogger(__name__)


def load_cli_config(args: argparse.Namespace) -> AppConfig:
    """Load app config and apply command-line overrides.

    Raises:
        FileNotFoundError: If an explicit --config path does not exist
        ValueError: If the config file or an override is invalid
    """
    config = load_app_config(args.config)
    data = config.model_dump()

    if getattr(args, "workers", None) is not None:
        data["processing"]["max_workers"] = args.workers
    if getattr(args, "archive_backend", None):
        data["processing"]["archive_backend"] = args.archive_backend
    if getattr(args, "log_level", None):
        data["logging"]["level"] = args.log_level.upper()
    if getattr(args, "structured_logs", False):
        data["logging"]["structured"] = True

    return AppConfig.model_validate(data)


def _load_config_or_report(args: argparse.Namespace) -> AppConfig | None:
    try:
        return load_cli_config(args)
    except (OSError, ValueError) as e:
        console.print(f"[red]ERROR: Could not load config: {escape(str(e))}[/red]")
        return None


def run_generate(args: argparse.Namespace) -> int:
    """Generate patch configuration from a client folder."""
    config = _load_config_or_report(args)
    if config is None:
        return 1
    configure_logging(config)

    source = Path(args.source)
    target = Path(args.target)

    console.print(f"[bold]Generating patch config[/bold] {source} -> {target}")
    try:
        result = generate_config(source, target, args.maintenance_mode, config=config)
    except PatchConfigError as e:
        logger.debug("Generation failed", exc_info=True)
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    table = Table(title="Manifest")
    table.add_column("Entry")
    table.add_column("Count", justify="right")
    table.add_row("Directories", str(result.summary.directories))
    table.add_row("Files", str(result.summary.files))
    table.add_row("Archives", str(result.summary.archives))
    table.add_row("Archive members", str(result.summary.archive_files))
    console.print(table)

    console.print(f"[green]✅ Status:[/green] {result.status.value}")
    console.print(f"[green]📁 Patch files:[/green] {result.patch_dir}")
    console.print(f"[green]📝 Manifest:[/green] {result.metadata.manifest_path}")
    return 0


def run_tree(args: argparse.Namespace) -> int:
    """Preview a client folder as a tree."""
    try:
        tree = build_source_tree(Path(args.source))
    except PatchConfigError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    console.print(tree)
    return 0


def run_verify(args: argparse.Namespace) -> int:
    """Check a generated patch folder against its manifest."""
    config = _load_config_or_report(args)
    if config is None:
        return 1
    configure_logging(config)

    try:
        report = verify_target(Path(args.target), config)
    except PatchConfigError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    if args.report:
        write_json(Path(args.report), report.model_dump())
        console.print(f"Report written to {args.report}")

    for mismatch in report.mismatches:
        if mismatch.actual is None:
            console.print(f"[red]missing[/red]  {mismatch.path}")
        else:
            console.print(f"[red]mismatch[/red] {mismatch.path}")

    if report.ok:
        console.print(f"[green]✅ {report.checked} files match the manifest[/green]")
        return 0

    console.print(
        f"[red]{len(report.mismatches)} of {report.checked} files do not match the manifest[/red]"
    )
    return 1


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="aecopatch",
        description="Generate patch server configuration for an Eco client folder",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Build patch files and manifest")
    gen.add_argument("source", help="Client folder to mirror")
    gen.add_argument("target", help="Output folder (must not exist)")
    gen.add_argument(
        "-m",
        "--maintenance-mode",
        action="store_true",
        help="Publish the Maintenance server status",
    )
    gen.add_argument("--config", default=None, help="Path to app config (YAML or JSON)")
    gen.add_argument("--workers", type=int, default=None, help="Worker thread count")
    gen.add_argument(
        "--archive-backend",
        default=None,
        help="Archive backend as 'module:attribute'",
    )
    gen.add_argument("--log-level", default=None, help="Logging level (default: from config)")
    gen.add_argument(
        "--structured-logs",
        action="store_true",
        help="Emit JSON-lines log records",
    )

    tree = sub.add_parser("tree", help="Preview a client folder")
    tree.add_argument("source", help="Folder to preview")

    verify = sub.add_parser("verify", help="Check patch files against the manifest")
    verify.add_argument("target", help="Folder produced by 'generate'")
    verify.add_argument("--config", default=None, help="Path to app config (YAML or JSON)")
    verify.add_argument("--report", default=None, help="Write a JSON report to this path")

    return p


_COMMANDS = {
    "generate": run_generate,
    "tree": run_tree,
    "verify": run_verify,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)
    sys.exit(_COMMANDS[args.cmd](args))


if __name__ == "__main__":
    main()
