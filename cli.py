from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

import uvicorn
from rich.console import Console
from rich.markup import escape

from repomap.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, MapConfig
from repomap.errors import ManifestError, RepoMapError
from repomap.logging_config import setup_logging
from repomap.manifest import MANIFEST_FILENAME, read_manifest, validate_manifest
from repomap.pipeline import build_map
from repomap.report import write_report
from repomap.runner import export_project
from repomap.summarize import CATEGORIES, collect_stats


console = Console()
err_console = Console(stderr=True)


def cmd_map(args: argparse.Namespace) -> int:
	config = MapConfig(
		root=args.root,
		include=args.include or list(DEFAULT_INCLUDE),
		exclude=args.exclude or list(DEFAULT_EXCLUDE),
		output=args.output,
		force=args.force,
	)
	result = build_map(config)
	written = write_report(config.resolved_output(), result.report, config.force)
	if written.already_exists:
		console.print(f"[yellow]{escape(written.path)} already exists. Use --force to overwrite.[/yellow]")
		return 0

	stats = collect_stats(result.files)
	console.print("[green]Repository map generated[/green]")
	console.print(f"  File: {escape(written.path)}")
	console.print(f"  Size: {written.size_bytes / 1024:.1f} KB")
	console.print(f"  Lines: {written.line_count}")
	console.print(f"  Files analyzed: {stats.files}")
	for field, _ in CATEGORIES:
		console.print(f"  {field.capitalize()}: {stats.totals[field]} (exported: {stats.exported[field]})")
	return 0


def cmd_validate(args: argparse.Namespace) -> int:
	directory = os.path.abspath(args.dir)
	manifest = read_manifest(directory)
	if manifest is None:
		raise ManifestError(f"{MANIFEST_FILENAME} not found", {"dir": directory})
	errors, warnings = validate_manifest(manifest, directory)
	for error in errors:
		console.print(f"[red]  • {escape(error)}[/red]")
	for warning in warnings:
		console.print(f"[yellow]  • {escape(warning)}[/yellow]")
	if errors:
		raise RepoMapError(f"Found {len(errors)} errors in the manifest")
	console.print("[green]Manifest is valid[/green]")
	return 0


def cmd_export(args: argparse.Namespace) -> int:
	result = export_project(os.getcwd(), args.output, args.force)
	if result.already_exists:
		console.print(f"[yellow]{escape(result.path)} already exists. Use --force to overwrite.[/yellow]")
	else:
		console.print(f"[green]Exported to {escape(result.path)}[/green] ({result.size_bytes / 1024:.1f} KB)")
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return 0


def build_parser() -> argparse.ArgumentParser:
	common = argparse.ArgumentParser(add_help=False)
	verbosity = common.add_mutually_exclusive_group()
	verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
	verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show errors")

	parser = argparse.ArgumentParser(prog="repomap")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pm = sub.add_parser("map", parents=[common], help="Generate a repository map")
	pm.add_argument("root", nargs="?", default=".", help="Project root (default: current directory)")
	pm.add_argument("-o", "--output", help="Output file (default: ./REPOSITORY_MAP.txt)")
	pm.add_argument("-f", "--force", action="store_true", help="Overwrite an existing output file")
	pm.add_argument("--include", nargs="+", metavar="PATTERN", help="Glob patterns of files to analyze")
	pm.add_argument("--exclude", nargs="+", metavar="PATTERN", help="Glob patterns of files to skip")
	pm.set_defaults(func=cmd_map)

	pv = sub.add_parser("validate", parents=[common], help=f"Validate {MANIFEST_FILENAME}")
	pv.add_argument("dir", nargs="?", default=".", help="Directory holding the manifest")
	pv.set_defaults(func=cmd_validate)

	pe = sub.add_parser("export", parents=[common], help="Export the project with code2prompt")
	pe.add_argument("-o", "--output", help="Output file name")
	pe.add_argument("-f", "--force", action="store_true", help="Overwrite an existing export")
	pe.set_defaults(func=cmd_export)

	ps = sub.add_parser("serve", parents=[common], help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	setup_logging(verbose=args.verbose, quiet=args.quiet)
	try:
		return args.func(args)
	except RepoMapError as exc:
		err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
		return 1


if __name__ == "__main__":
	sys.exit(main())
