"""Main entry point for ksd."""

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .builder import Builder
from .config import resolve_config
from .errors import ConfigError
from .models import BuildResult

console = Console()


def setup_logging(debug: bool) -> None:
    """Route library logging through rich; DEBUG only when asked for."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def print_result(result: BuildResult) -> None:
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}", highlight=False)

    for rel_name in result.built:
        console.print(f"  [green]✓[/green] {escape(rel_name)}")

    for error in result.errors:
        console.print(f"  [red]X[/red] {escape(str(error))}", highlight=False)

    console.print(
        f"\n[bold]Built {len(result.built)} file(s)[/bold] into {escape(result.out_root)}"
        + (f", [red]{len(result.errors)} failed[/red]" if result.errors else "")
    )


def run_build(args: argparse.Namespace) -> int:
    """Build Kusto declarations under a directory into command files."""
    root = Path(args.directory).expanduser() if args.directory else Path.cwd()
    if not root.is_dir():
        console.print(f"[red]Error:[/red] directory {escape(str(args.directory or root))} does not exist")
        return 1

    try:
        config = resolve_config(root, Path(args.config) if args.config else None)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    if args.out:
        config.out_dir = args.out

    builder = Builder(config)
    console.print("Building files...")
    result = builder.build_tree(root)
    print_result(result)

    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ksd",
        description="ksd - build Kusto function and table declarations into management commands",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser(
        "build",
        help="Build declaration files into command files",
        description=(
            "Parses every Kusto declaration file under <directory> and writes the "
            "matching management command to the same relative path under the "
            "output directory ('kout' by default)."
        ),
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        help="Source directory (default: current directory)",
    )
    build_parser.add_argument(
        "--out", "-o",
        help="Output directory, relative to the source directory unless absolute",
    )
    build_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file (default: <directory>/ksd.yaml if present)",
    )
    build_parser.set_defaults(func=run_build)

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
