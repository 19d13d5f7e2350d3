from __future__ import annotations

import os
import re
from fnmatch import fnmatchcase
from typing import Callable, Dict, Iterable, List, Optional

from .brace_parse import parse_brace_file
from .config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE
from .indent_parse import parse_indent_file
from .logging_config import get_logger
from .model import FileStructure


logger = get_logger(__name__)

EXTENSION_LANGUAGE: Dict[str, str] = {
	".py": "python",
	".ts": "typescript",
	".tsx": "typescript",
	".mts": "typescript",
	".cts": "typescript",
	".js": "javascript",
	".jsx": "javascript",
	".mjs": "javascript",
	".cjs": "javascript",
}

LANGUAGE_FAMILY: Dict[str, str] = {
	"python": "indent",
	"typescript": "brace",
	"javascript": "brace",
}

BUILDERS: Dict[str, Callable[[str, str, str], FileStructure]] = {
	"brace": parse_brace_file,
	"indent": parse_indent_file,
}


def detect_language(filename: str) -> str:
	_, ext = os.path.splitext(filename)
	return EXTENSION_LANGUAGE.get(ext.lower(), "unknown")


_BRACE_SET = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
	"""``src/*.{ts,tsx}`` -> ``["src/*.ts", "src/*.tsx"]``."""
	m = _BRACE_SET.search(pattern)
	if m is None or "," not in m.group(1):
		return [pattern]
	expanded: List[str] = []
	for option in m.group(1).split(","):
		expanded.extend(expand_braces(pattern[:m.start()] + option + pattern[m.end():]))
	return expanded


def _match_parts(parts: List[str], pattern: List[str], dot: bool) -> bool:
	if not pattern:
		return not parts
	head, rest = pattern[0], pattern[1:]
	if head == "**":
		for k in range(len(parts) + 1):
			if _match_parts(parts[k:], rest, dot):
				return True
			if k < len(parts) and parts[k].startswith(".") and not dot:
				return False
		return False
	if not parts:
		return False
	if parts[0].startswith(".") and not head.startswith(".") and not dot:
		return False
	return fnmatchcase(parts[0], head) and _match_parts(parts[1:], rest, dot)


def glob_match(rel_path: str, pattern: str, dot: bool = False) -> bool:
	"""Match a POSIX relative path against a glob one segment at a time.

	``*`` and ``?`` stay inside a segment, ``**`` spans any number of them.
	Unless ``dot`` is set, names starting with ``.`` only match a segment
	that starts with ``.`` too.
	"""
	parts = rel_path.split("/")
	return any(_match_parts(parts, p.split("/"), dot) for p in expand_braces(pattern))


def matches_any(rel_path: str, patterns: Iterable[str], dot: bool = False) -> bool:
	return any(glob_match(rel_path, pattern, dot) for pattern in patterns)


def _names_dot_paths(patterns: Iterable[str]) -> bool:
	return any(part.startswith(".") for pattern in patterns for part in pattern.split("/"))


def _walk(root: str, include: List[str], exclude: List[str]) -> List[str]:
	keep_dot_dirs = _names_dot_paths(include)
	found: List[str] = []
	for dirpath, dirnames, filenames in os.walk(root):
		rel_dir = os.path.relpath(dirpath, root)
		rel_dir = "" if rel_dir == "." else rel_dir.replace(os.sep, "/") + "/"
		dirnames[:] = [
			d for d in dirnames
			if (keep_dot_dirs or not d.startswith(".")) and not matches_any(rel_dir + d + "/", exclude, dot=True)
		]
		for filename in filenames:
			rel_path = rel_dir + filename
			if not matches_any(rel_path, exclude, dot=True):
				found.append(rel_path)
	return sorted(found)


def resolve_files(root: str, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None) -> List[str]:
	"""Relative paths matching the include patterns, in pattern order.

	Within one pattern the paths are sorted. A path matched by several
	patterns is listed once, at its first match.
	"""
	include = DEFAULT_INCLUDE if include is None else include
	exclude = DEFAULT_EXCLUDE if exclude is None else exclude
	if not os.path.isdir(root):
		logger.warning("Root %s is not a directory", root)
		return []
	candidates = _walk(root, include, exclude)
	ordered: Dict[str, None] = {}
	for pattern in include:
		for rel_path in candidates:
			if rel_path not in ordered and matches_any(rel_path, [pattern]):
				ordered[rel_path] = None
	return list(ordered)


def analyze_file(root: str, rel_path: str) -> Optional[FileStructure]:
	"""Build one file's structure, or None when it has to be skipped."""
	language = detect_language(rel_path)
	family = LANGUAGE_FAMILY.get(language)
	if family is None:
		logger.warning("Skipping %s: unsupported file type", rel_path)
		return None
	path = os.path.join(root, *rel_path.split("/"))
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except (OSError, UnicodeDecodeError) as exc:
		logger.warning("Could not read %s: %s", rel_path, exc)
		return None
	try:
		return BUILDERS[family](rel_path, text, language)
	except Exception as exc:
		logger.warning("Could not analyze %s: %s", rel_path, exc)
		return None


def scan_repository(root: str, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None) -> List[FileStructure]:
	files: List[FileStructure] = []
	for rel_path in resolve_files(root, include, exclude):
		structure = analyze_file(root, rel_path)
		if structure is not None:
			logger.debug("Analyzed %s", rel_path)
			files.append(structure)
	logger.info("Analyzed %d files under %s", len(files), root)
	return files
