from __future__ import annotations

import re
from typing import List, Optional, Tuple


_DOCSTRING_OPEN = re.compile(r'^[rRuUbB]?("""|\'\'\')')


def clean_block_line(line: str) -> str:
	"""Strip JSDoc markers (``/**``, ``*/``, leading ``*``) from one line."""
	text = line.strip()
	if text.startswith("/**"):
		text = text[3:]
	elif text.startswith("/*"):
		text = text[2:]
	if text.endswith("*/"):
		text = text[:-2]
	text = text.strip()
	if text.startswith("*"):
		text = text[1:]
	return text.strip()


def clean_line_comment(line: str) -> str:
	text = line.strip()
	for marker in ("///", "//", "#"):
		if text.startswith(marker):
			return text[len(marker):].strip()
	return text


def summarize_doc(lines: List[str]) -> Optional[str]:
	"""First paragraph of a doc comment, joined into one line.

	Stops at the first blank line after some text, or at a JSDoc tag line.
	"""
	parts: List[str] = []
	for line in lines:
		text = line.strip()
		if text.startswith("@"):
			break
		if not text:
			if parts:
				break
			continue
		parts.append(text)
	summary = " ".join(parts).strip()
	return summary or None


def full_doc(lines: List[str]) -> Optional[str]:
	text = "\n".join(line.rstrip() for line in lines).strip()
	return text or None


def read_python_docstring(lines: List[str], start: int) -> Optional[Tuple[List[str], int]]:
	"""Read a docstring beginning at or after ``lines[start]``.

	Only blank lines may precede it. Returns the docstring's text lines and
	the 0-based index of its closing line, or None when the body does not
	start with a docstring.
	"""
	i = start
	while i < len(lines) and not lines[i].strip():
		i += 1
	if i >= len(lines):
		return None
	first = lines[i].strip()
	m = _DOCSTRING_OPEN.match(first)
	if not m:
		return None
	quote = m.group(1)
	rest = first[m.end():]
	if quote in rest:
		return [rest[:rest.index(quote)].strip()], i
	collected: List[str] = [rest.strip()] if rest.strip() else []
	for j in range(i + 1, len(lines)):
		text = lines[j].strip()
		if quote in text:
			tail = text[:text.index(quote)].strip()
			if tail:
				collected.append(tail)
			return collected, j
		collected.append(text)
	# Unterminated docstring: treat what we saw as the docstring.
	return collected, len(lines) - 1
