"""Blocking calls to the external ``code2prompt`` summarization tool."""

from __future__ import annotations

import os
import subprocess
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import BaseModel

from .errors import RepoMapError, ToolNotFoundError
from .logging_config import get_logger
from .model import WriteResult


logger = get_logger(__name__)

DEFAULT_TOOL = "code2prompt"
EXPORT_IGNORE_FILENAME = ".exportignore"
EXPORT_DIR = os.path.join(".neira", "export_code")

BASIC_EXCLUDES: List[str] = [
	"node_modules",
	"dist",
	".git",
	"*.log",
	"*.map",
	"*.lock",
	"*.DS_Store",
	".idea",
	".vscode",
	"coverage",
	".next",
	"build",
	"out",
	".turbo",
	"tmp",
	"temp",
	".cache",
	"*.tsbuildinfo",
	"*.tgz",
	"*.tar.gz",
]


class ToolResult(BaseModel):
	ok: bool
	returncode: int
	stdout: str = ""
	stderr: str = ""


def run_tool(args: Sequence[str], tool: str = DEFAULT_TOOL, cwd: Optional[str] = None) -> ToolResult:
	"""Run ``tool`` once with captured output. Failures are returned, not raised."""
	logger.debug("Running %s %s", tool, " ".join(args))
	try:
		proc = subprocess.run([tool, *args], cwd=cwd, capture_output=True, text=True)
	except FileNotFoundError as exc:
		return ToolResult(ok=False, returncode=127, stderr=str(exc))
	if proc.returncode != 0:
		logger.warning("%s exited with code %d", tool, proc.returncode)
	return ToolResult(ok=proc.returncode == 0, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def tool_available(tool: str = DEFAULT_TOOL) -> bool:
	result = run_tool(["--version"], tool=tool)
	if result.ok:
		logger.info("Found %s %s", tool, result.stdout.strip())
	return result.ok


def read_export_ignore(root: str) -> List[str]:
	path = os.path.join(root, EXPORT_IGNORE_FILENAME)
	if not os.path.isfile(path):
		return []
	with open(path, "r", encoding="utf-8") as fh:
		lines = [line.strip() for line in fh]
	return [line for line in lines if line and not line.startswith("#")]


def build_export_args(root: str, output_file: str, extra_excludes: Sequence[str] = ()) -> List[str]:
	args = [root, "--no-clipboard", "-O", output_file]
	for pattern in [*BASIC_EXCLUDES, *extra_excludes]:
		args.extend(["-e", pattern])
	return args


def export_project(root: str, output: Optional[str] = None, force: bool = False, now: Optional[datetime] = None) -> WriteResult:
	"""Dump the project at ``root`` with code2prompt.

	The file goes to ``.neira/export_code/<date>/v<HHMM>/`` under the root.
	An existing file is left alone unless ``force`` is set.
	"""
	if not tool_available():
		raise ToolNotFoundError(f"{DEFAULT_TOOL} is not installed", {"hint": "pip install code2prompt or cargo install code2prompt"})

	root = os.path.abspath(root)
	now = now or datetime.now()
	date_part, time_part = now.strftime("%Y-%m-%d"), now.strftime("%H%M")
	version_dir = os.path.join(root, EXPORT_DIR, date_part, f"v{time_part}")
	project_name = os.path.basename(root)
	output_file = os.path.join(version_dir, output or f"v{time_part}-{date_part}-{project_name}.md")

	if os.path.exists(output_file) and not force:
		logger.warning("%s already exists; use --force to overwrite", output_file)
		return WriteResult(path=output_file, written=False, already_exists=True)

	os.makedirs(version_dir, exist_ok=True)
	extra = read_export_ignore(root)
	if extra:
		logger.info("Using %d extra exclude patterns from %s", len(extra), EXPORT_IGNORE_FILENAME)
	result = run_tool(build_export_args(".", output_file, extra), cwd=root)
	if not result.ok:
		raise RepoMapError(f"{DEFAULT_TOOL} failed", {"returncode": str(result.returncode), "stderr": result.stderr.strip()})

	size = os.path.getsize(output_file) if os.path.exists(output_file) else 0
	return WriteResult(path=output_file, written=True, size_bytes=size)
