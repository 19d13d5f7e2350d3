"""Line matchers for the two supported source families.

Each production is a named function taking one stripped line (or a joined
multi-line signature) and returning a small match record, or None when the
line is not that construct. Matchers never raise. The builders in
``brace_parse`` and ``indent_parse`` decide which matchers apply in which
state; adding a production means adding a function here and one call there.
"""

from __future__ import annotations

import keyword
import re
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .model import ParameterInfo
from .vocabulary import CONTROL_KEYWORDS, NODE_BUILTINS


IDENT = r"[A-Za-z_$][\w$]*"
MAX_SIGNATURE_LINES = 30


@dataclass
class ImportMatch:
	module: str
	names: List[str] = field(default_factory=list)
	is_default: bool = False
	is_namespace: bool = False


@dataclass
class ExportMatch:
	name: str
	kind: Optional[str]
	is_default: bool = False


@dataclass
class FunctionMatch:
	name: str
	params: str
	return_type: Optional[str] = None
	is_async: bool = False
	is_generator: bool = False
	is_arrow: bool = False
	is_exported: bool = False
	is_default: bool = False


@dataclass
class MethodMatch:
	name: str
	params: str
	return_type: Optional[str] = None
	is_async: bool = False
	is_generator: bool = False
	is_static: bool = False
	visibility: Optional[str] = None
	accessor: Optional[str] = None


@dataclass
class PropertyMatch:
	name: str
	type: Optional[str] = None
	value: Optional[str] = None
	is_readonly: bool = False
	is_optional: bool = False
	is_static: bool = False
	visibility: Optional[str] = None


@dataclass
class ClassMatch:
	name: str
	extends: Optional[str] = None
	implements: List[str] = field(default_factory=list)
	is_exported: bool = False
	is_default: bool = False
	is_abstract: bool = False


@dataclass
class InterfaceMatch:
	name: str
	extends: List[str] = field(default_factory=list)
	generic_params: List[str] = field(default_factory=list)
	is_exported: bool = False


@dataclass
class TypeMatch:
	name: str
	kind: str = "type"
	value: Optional[str] = None
	is_exported: bool = False


@dataclass
class ConstantMatch:
	name: str
	value: Optional[str] = None
	type: Optional[str] = None
	is_exported: bool = False
	is_default: bool = False


# ---------------------------------------------------------------------------
# Shared text helpers
# ---------------------------------------------------------------------------

_STRING_LITERAL = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|`(?:\\.|[^`\\])*`")
_GENERIC = re.compile(r"<[^<>]*>")
_REGEX_PRECEDERS = frozenset("=(,:[!&|?{};+-*%<>~^")
_REGEX_KEYWORD_BEFORE = re.compile(r"(?:^|[^\w$])(?:return|typeof|case|in|of|yield|await|delete|void)$")


def _skip_literal(line: str, start: int, quote: str) -> int:
	"""Index just past the closing ``quote``, or -1 when the line ends first."""
	i = start
	while i < len(line):
		if line[i] == "\\":
			i += 2
			continue
		if line[i] == quote:
			return i + 1
		i += 1
	return -1


def _skip_regex(line: str, start: int) -> int:
	"""Index just past a regex literal body and its flags, or -1."""
	i, in_class = start, False
	while i < len(line):
		ch = line[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "[":
			in_class = True
		elif ch == "]":
			in_class = False
		elif ch == "/" and not in_class:
			i += 1
			while i < len(line) and line[i].isalpha():
				i += 1
			return i
		i += 1
	return -1


def _regex_allowed(code: List[str]) -> bool:
	text = "".join(code).rstrip()
	if not text:
		return True
	return text[-1] in _REGEX_PRECEDERS or bool(_REGEX_KEYWORD_BEFORE.search(text))


def scan_code(line: str, in_template: bool = False) -> Tuple[str, bool]:
	"""Blank out string, template and regex literals and comments in one line.

	``in_template`` says the line starts inside a backtick literal opened on
	an earlier line. Returns the remaining code and whether a backtick literal
	is still open when the line ends.
	"""
	out: List[str] = []
	i = 0
	if in_template:
		i = _skip_literal(line, 0, "`")
		if i < 0:
			return "", True
		out.append('""')
	while i < len(line):
		ch = line[i]
		if ch in "'\"`":
			end = _skip_literal(line, i + 1, ch)
			if end >= 0:
				out.append('""')
				i = end
				continue
			if ch == "`":
				out.append('""')
				return "".join(out), True
		elif ch == "/":
			nxt = line[i + 1:i + 2]
			if nxt == "/":
				break
			if nxt == "*":
				close = line.find("*/", i + 2)
				if close < 0:
					break
				i = close + 2
				continue
			if _regex_allowed(out):
				end = _skip_regex(line, i + 1)
				if end >= 0:
					out.append('""')
					i = end
					continue
		out.append(ch)
		i += 1
	return "".join(out), False


def strip_code(line: str) -> str:
	"""Blank out literals and comments so braces can be counted."""
	return scan_code(line)[0]


def strip_trailing_comment(line: str, marker: str = "//") -> str:
	"""Drop a trailing comment that starts outside any string literal."""
	quote: Optional[str] = None
	for i, ch in enumerate(line):
		if quote:
			if ch == quote and line[i - 1:i] != "\\":
				quote = None
			continue
		if ch in "'\"`":
			quote = ch
		elif line.startswith(marker, i):
			return line[:i].rstrip()
	return line


def indentation(line: str) -> int:
	return len(line) - len(line.lstrip())


def paren_balance(text: str) -> int:
	code = _STRING_LITERAL.sub('""', text)
	return code.count("(") - code.count(")")


def split_top_level(text: str, sep: str = ",") -> List[str]:
	"""Split on ``sep`` outside brackets, generics and string literals."""
	parts: List[str] = []
	depth = 0
	quote: Optional[str] = None
	current: List[str] = []
	prev = ""
	for ch in text:
		if quote:
			current.append(ch)
			if ch == quote and prev != "\\":
				quote = None
		elif ch in "'\"`":
			quote = ch
			current.append(ch)
		elif ch in "([{<":
			depth += 1
			current.append(ch)
		elif ch in ")]}":
			depth -= 1
			current.append(ch)
		elif ch == ">" and prev != "=":
			depth -= 1
			current.append(ch)
		elif ch == sep and depth <= 0:
			parts.append("".join(current))
			current = []
		else:
			current.append(ch)
		prev = ch
	parts.append("".join(current))
	return [p.strip() for p in parts if p.strip()]


def _find_top_level(text: str, targets: str) -> int:
	"""Index of the first char of ``targets`` outside brackets, or -1.

	An ``=`` that belongs to ``=>``, ``==``, ``<=`` or ``>=`` is skipped.
	"""
	depth = 0
	quote: Optional[str] = None
	for i, ch in enumerate(text):
		if quote:
			if ch == quote and text[i - 1:i] != "\\":
				quote = None
			continue
		if ch in "'\"`":
			quote = ch
		elif ch in "([{<":
			depth += 1
		elif ch in ")]}":
			depth -= 1
		elif ch == ">" and text[i - 1:i] != "=":
			depth -= 1
		elif ch in targets and depth <= 0:
			if ch == "=" and (text[i + 1:i + 2] in ("=", ">") or text[i - 1:i] in ("=", "!", "<", ">")):
				continue
			return i
	return -1


def matching_paren(text: str, open_index: int) -> int:
	"""Index of the ``)`` closing the ``(`` at ``open_index``, or -1."""
	depth = 0
	quote: Optional[str] = None
	for i in range(open_index, len(text)):
		ch = text[i]
		if quote:
			if ch == quote and text[i - 1] != "\\":
				quote = None
			continue
		if ch in "'\"`":
			quote = ch
		elif ch == "(":
			depth += 1
		elif ch == ")":
			depth -= 1
			if depth == 0:
				return i
	return -1


def _params_and_rest(text: str, open_index: int) -> Optional[Tuple[str, str]]:
	close = matching_paren(text, open_index)
	if close < 0:
		return None
	return text[open_index + 1:close], text[close + 1:]


def collect_signature(lines: List[str], start: int) -> Tuple[str, int]:
	"""Join ``lines[start:]`` until the parentheses opened on ``start`` close.

	Returns the joined (stripped) text and the 0-based index of the last
	line consumed. Gives up after MAX_SIGNATURE_LINES lines and returns just
	the first line.
	"""
	text = lines[start].strip()
	if paren_balance(text) <= 0:
		return text, start
	parts = [text]
	for j in range(start + 1, min(len(lines), start + MAX_SIGNATURE_LINES)):
		parts.append(lines[j].strip())
		joined = " ".join(parts)
		if paren_balance(joined) <= 0:
			return joined, j
	return text, start


def _clean(text: Optional[str]) -> Optional[str]:
	if text is None:
		return None
	text = text.strip().rstrip(";").strip()
	return text or None


def _strip_generics(text: str) -> str:
	previous = None
	while previous != text:
		previous = text
		text = _GENERIC.sub("", text)
	return text


def _name_list(text: Optional[str]) -> List[str]:
	if not text:
		return []
	return [part.strip() for part in _strip_generics(text).strip().rstrip("{").split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Line extents
# ---------------------------------------------------------------------------

_CONTINUATION_PREFIXES = ("{", ".", ")", "]", "}", "?", ":", "&&", "||", "+", "-", "*", "/")


def brace_extent(lines: List[str], start: int) -> int:
	"""Last 0-based line of a brace-delimited construct starting at ``start``.

	Counting starts on the declaration line. A construct that never opens a
	brace ends at its first ``;`` or where indentation falls back to the
	declaration's level.
	"""
	depth = 0
	opened = False
	in_template = False
	base_indent = indentation(lines[start])
	last = start
	for j in range(start, len(lines)):
		line = lines[j]
		if not opened and not in_template and j > start and line.strip():
			if indentation(line) <= base_indent and not line.strip().startswith(_CONTINUATION_PREFIXES):
				return last
		code, in_template = scan_code(line, in_template)
		if "{" in code:
			opened = True
		depth += code.count("{") - code.count("}")
		if line.strip():
			last = j
		if opened and depth <= 0:
			return j
		if not opened and code.rstrip().endswith(";"):
			return j
	return last


def indent_extent(lines: List[str], start: int, body_start: int) -> int:
	"""Last 0-based line of an indentation-delimited construct.

	``start`` is the declaration line, ``body_start`` the first line after the
	signature (and docstring). Trailing blank lines are not included.
	"""
	base_indent = indentation(lines[start])
	last = max(start, body_start - 1)
	for j in range(body_start, len(lines)):
		line = lines[j]
		if not line.strip():
			continue
		if indentation(line) <= base_indent:
			break
		last = j
	return last


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

_TS_PARAM_MODIFIERS = re.compile(r"^(?:(?:public|private|protected|readonly|override)\s+)+")
_DECORATOR_PREFIX = re.compile(r"^@[\w$.]+(?:\([^)]*\))?\s*")


def parse_parameters(text: str, family: str = "brace") -> List[ParameterInfo]:
	"""Parse a raw parameter list into ParameterInfo records.

	Handles optional markers, type annotations, defaults and rest parameters
	for both families. Bare ``*`` and ``/`` markers are dropped.
	"""
	params: List[ParameterInfo] = []
	for raw in split_top_level(text or ""):
		part = raw.strip()
		if family == "brace":
			part = _DECORATOR_PREFIX.sub("", part)
			part = _TS_PARAM_MODIFIERS.sub("", part)
		if part in ("*", "/", ""):
			continue

		is_rest = False
		if family == "brace" and part.startswith("..."):
			is_rest = True
			part = part[3:].strip()
		elif family == "indent" and part.startswith("*"):
			is_rest = True
			part = part.lstrip("*").strip()

		default: Optional[str] = None
		eq = _find_top_level(part, "=")
		if eq >= 0:
			default = part[eq + 1:].strip() or None
			part = part[:eq].strip()

		type_text: Optional[str] = None
		colon = _find_top_level(part, ":")
		if colon >= 0:
			type_text = part[colon + 1:].strip() or None
			part = part[:colon].strip()

		optional = default is not None
		if part.endswith("?"):
			optional = True
			part = part[:-1].strip()

		params.append(
			ParameterInfo(
				name=part,
				type=type_text,
				is_optional=optional,
				default_value=default,
				is_rest=is_rest,
			)
		)
	return params


def _return_type(rest: str, family: str) -> Optional[str]:
	rest = rest.strip()
	if family == "indent":
		m = re.match(r"^->\s*(.+?)\s*:\s*(?:#.*)?$", rest) or re.match(r"^->\s*(.+?)\s*:", rest)
		return _clean(m.group(1)) if m else None
	if not rest.startswith(":"):
		return None
	rest = rest[1:]
	end = len(rest)
	for token in ("=>", "{", ";"):
		idx = rest.find(token)
		if 0 <= idx < end:
			end = idx
	return _clean(rest[:end])


# ---------------------------------------------------------------------------
# Brace family
# ---------------------------------------------------------------------------

_TS_SIDE_EFFECT_IMPORT = re.compile(r"""^import\s+['"]([^'"]+)['"]""")
_TS_IMPORT_FROM = re.compile(r"""^import\s+(?:type\s+)?(.+?)\s+from\s+['"]([^'"]+)['"]""")
_TS_IMPORT_REQUIRE = re.compile(r"""^import\s+(""" + IDENT + r""")\s*=\s*require\(\s*['"]([^'"]+)['"]""")


def match_ts_import(line: str) -> Optional[ImportMatch]:
	m = _TS_SIDE_EFFECT_IMPORT.match(line)
	if m:
		return ImportMatch(module=m.group(1))
	m = _TS_IMPORT_REQUIRE.match(line)
	if m:
		return ImportMatch(module=m.group(2), names=[m.group(1)], is_default=True)
	m = _TS_IMPORT_FROM.match(line)
	if not m:
		return None
	clause, module = m.group(1).strip(), m.group(2)
	result = ImportMatch(module=module)
	brace_start = clause.find("{")
	if brace_start >= 0:
		inner = clause[brace_start + 1:clause.rfind("}")] if "}" in clause else clause[brace_start + 1:]
		for item in inner.split(","):
			item = re.sub(r"^type\s+", "", item.strip())
			if item:
				result.names.append(item.split(" as ")[0].strip())
		clause = clause[:brace_start]
	for item in clause.split(","):
		item = item.strip()
		if not item:
			continue
		ns = re.match(r"^\*\s+as\s+(" + IDENT + r")$", item)
		if ns:
			result.is_namespace = True
			result.names.insert(0, ns.group(1))
		elif re.match("^" + IDENT + "$", item):
			result.is_default = True
			result.names.insert(0, item)
	return result


def ts_import_needs_more(line: str) -> bool:
	"""True for the first line of a named import split across lines."""
	return line.startswith("import") and "{" in line and "}" not in line


_TS_EXPORT_DECL = re.compile(
	r"^export\s+(default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?"
	r"(?:(function)\s*\*?\s*|(const\s+enum|enum|class|interface|type|const|let|var|namespace)\s+)"
	r"(?:(?!(?:extends|implements)\b)(" + IDENT + r"))?"
)
_TS_EXPORT_LIST = re.compile(r"^export\s+(?:type\s+)?\{([^}]*)\}")
_TS_EXPORT_DEFAULT_IDENT = re.compile(r"^export\s+default\s+(" + IDENT + r")\s*;?$")

_EXPORT_KIND = {
	"function": "function",
	"class": "class",
	"interface": "interface",
	"type": "type",
	"enum": "type",
	"const enum": "type",
	"namespace": "type",
	"const": "constant",
	"let": "constant",
	"var": "constant",
}


def match_ts_export(line: str) -> List[ExportMatch]:
	"""Exports declared on this line.

	Names from ``export { a, b as c }`` come back with kind None; the builder
	resolves them against the file's declarations.
	"""
	m = _TS_EXPORT_DECL.match(line)
	if m and (m.group(4) or m.group(1)):
		is_default = bool(m.group(1))
		keyword_text = re.sub(r"\s+", " ", m.group(2) or m.group(3))
		name = m.group(4) or "default"
		return [ExportMatch(name=name, kind=_EXPORT_KIND[keyword_text], is_default=is_default)]
	m = _TS_EXPORT_LIST.match(line)
	if m:
		exports = []
		for item in m.group(1).split(","):
			item = item.strip()
			if not item:
				continue
			pieces = [p.strip() for p in item.split(" as ")]
			exported_name = pieces[-1]
			exports.append(ExportMatch(name=exported_name, kind=None, is_default=exported_name == "default"))
		return exports
	m = _TS_EXPORT_DEFAULT_IDENT.match(line)
	if m and m.group(1) not in CONTROL_KEYWORDS:
		return [ExportMatch(name=m.group(1), kind="default", is_default=True)]
	return []


_TS_FUNCTION_HEAD = re.compile(
	r"^(export\s+)?(default\s+)?(?:declare\s+)?(async\s+)?function\b\s*(\*)?\s*(" + IDENT + r")?\s*(?:<[^(]*?>)?\s*\("
)


def match_ts_function(text: str) -> Optional[FunctionMatch]:
	m = _TS_FUNCTION_HEAD.match(text)
	if not m:
		return None
	split = _params_and_rest(text, m.end() - 1)
	if split is None:
		return None
	params, rest = split
	is_default = bool(m.group(2))
	name = m.group(5) or ("default" if is_default else None)
	if name is None:
		return None
	return FunctionMatch(
		name=name,
		params=params,
		return_type=_return_type(rest, "brace"),
		is_async=bool(m.group(3)),
		is_generator=bool(m.group(4)),
		is_exported=bool(m.group(1)),
		is_default=is_default,
	)


_TS_ARROW_HEAD = re.compile(
	r"^(export\s+)?(?:declare\s+)?(?:const|let|var)\s+(" + IDENT + r")\s*(?::\s*[^=]+?)?\s*=\s*(async\s+)?"
)
_TS_FUNCTION_EXPR = re.compile(r"^function\b\s*(\*)?\s*(?:" + IDENT + r")?\s*\(")


def match_ts_arrow(text: str) -> Optional[FunctionMatch]:
	"""``const f = (a) => ...``, ``const f = async x => ...`` and
	``const f = function (a) {...}`` assignments."""
	m = _TS_ARROW_HEAD.match(text)
	if not m:
		return None
	name = m.group(2)
	is_async = bool(m.group(3))
	tail = text[m.end():]

	fm = _TS_FUNCTION_EXPR.match(tail)
	if fm:
		split = _params_and_rest(tail, fm.end() - 1)
		if split is None:
			return None
		params, rest = split
		return FunctionMatch(
			name=name,
			params=params,
			return_type=_return_type(rest, "brace"),
			is_async=is_async,
			is_generator=bool(fm.group(1)),
			is_exported=bool(m.group(1)),
		)

	single = re.match(r"^(" + IDENT + r")\s*=>", tail)
	if single:
		params, return_type = single.group(1), None
	else:
		generic = re.match(r"^<[^(]*?>\s*", tail)
		offset = generic.end() if generic else 0
		if not tail[offset:].startswith("("):
			return None
		split = _params_and_rest(tail, offset)
		if split is None:
			return None
		params, rest = split
		rest = rest.strip()
		if rest.startswith(":"):
			arrow = rest.find("=>")
			if arrow < 0:
				return None
			return_type = _clean(rest[1:arrow])
		elif rest.startswith("=>"):
			return_type = None
		else:
			return None
	return FunctionMatch(
		name=name,
		params=params,
		return_type=return_type,
		is_async=is_async,
		is_arrow=True,
		is_exported=bool(m.group(1)),
	)


_TS_CLASS = re.compile(
	r"^(export\s+)?(default\s+)?(?:declare\s+)?(abstract\s+)?class(?:\s+(?!(?:extends|implements)\b)(" + IDENT + r"))?"
	r"(?:\s*<[^{]*?>+)?"
	r"(?:\s+extends\s+([\w$.]+)(?:\s*<[^{]*?>+)?)?"
	r"(?:\s+implements\s+([^{]+))?"
)


def match_ts_class(line: str) -> Optional[ClassMatch]:
	m = _TS_CLASS.match(line)
	if not m:
		return None
	rest = line[m.end():].strip()
	if rest and not rest.startswith("{"):
		return None
	is_default = bool(m.group(2))
	name = m.group(4) or ("default" if is_default else None)
	if name is None:
		return None
	return ClassMatch(
		name=name,
		extends=m.group(5),
		implements=_name_list(m.group(6)),
		is_exported=bool(m.group(1)),
		is_default=is_default,
		is_abstract=bool(m.group(3)),
	)


_TS_MEMBER_MODIFIERS = r"((?:(?:public|private|protected|static|override|abstract|readonly|async|declare)\s+)*)"
_TS_METHOD_HEAD = re.compile(
	r"^" + _TS_MEMBER_MODIFIERS + r"(?:(get|set)\s+(?=[#\w$*]))?(\*\s*)?(#?" + IDENT + r")\s*\??\s*(?:<[^(]*?>)?\s*\("
)
_TS_PROPERTY = re.compile(
	r"^" + _TS_MEMBER_MODIFIERS + r"(#?" + IDENT + r")([?!])?\s*(?::\s*((?:=>|[^=;])+?))?\s*(?:=\s*(.+?))?\s*;?$"
)


def _visibility(modifiers: List[str], name: str) -> Optional[str]:
	for vis in ("public", "private", "protected"):
		if vis in modifiers:
			return vis
	if name.startswith("#"):
		return "private"
	return None


def match_ts_method(text: str) -> Optional[MethodMatch]:
	m = _TS_METHOD_HEAD.match(text)
	if not m:
		return None
	name = m.group(4)
	if name in CONTROL_KEYWORDS:
		return None
	split = _params_and_rest(text, m.end() - 1)
	if split is None:
		return None
	params, rest = split
	if rest.strip().startswith("=>") or rest.strip().startswith("."):
		return None
	modifiers = (m.group(1) or "").split()
	return MethodMatch(
		name=name,
		params=params,
		return_type=_return_type(rest, "brace"),
		is_async="async" in modifiers,
		is_generator=bool(m.group(3)),
		is_static="static" in modifiers,
		visibility=_visibility(modifiers, name),
		accessor=m.group(2),
	)


def match_ts_property(line: str) -> Optional[PropertyMatch]:
	m = _TS_PROPERTY.match(line)
	if not m:
		return None
	name = m.group(2)
	type_text, value = _clean(m.group(4)), _clean(m.group(5))
	if name in CONTROL_KEYWORDS or (type_text is None and value is None):
		return None
	modifiers = (m.group(1) or "").split()
	return PropertyMatch(
		name=name,
		type=type_text,
		value=value,
		is_readonly="readonly" in modifiers,
		is_optional=m.group(3) == "?",
		is_static="static" in modifiers,
		visibility=_visibility(modifiers, name),
	)


_TS_INTERFACE = re.compile(
	r"^(export\s+)?(?:default\s+)?(?:declare\s+)?interface\s+(" + IDENT + r")(?:\s*(<[^{]*?>+))?(?:\s+extends\s+([^{]+))?"
)


def match_ts_interface(line: str) -> Optional[InterfaceMatch]:
	m = _TS_INTERFACE.match(line)
	if not m:
		return None
	generics = _name_list(m.group(3)[1:-1]) if m.group(3) else []
	return InterfaceMatch(
		name=m.group(2),
		extends=_name_list(m.group(4)),
		generic_params=[g.split(" extends ")[0].split("=")[0].strip() for g in generics],
		is_exported=bool(m.group(1)),
	)


_TS_INTERFACE_METHOD = re.compile(r"^(?:readonly\s+)?(" + IDENT + r")(\?)?\s*(?:<[^(]*?>)?\s*\(")
_TS_INTERFACE_PROPERTY = re.compile(r"^(readonly\s+)?(" + IDENT + r"|'[^']+'|\"[^\"]+\")(\?)?\s*:\s*(.+?)\s*[;,]?$")


def match_ts_interface_method(text: str) -> Optional[MethodMatch]:
	m = _TS_INTERFACE_METHOD.match(text)
	if not m or m.group(1) in CONTROL_KEYWORDS:
		return None
	split = _params_and_rest(text, m.end() - 1)
	if split is None:
		return None
	params, rest = split
	return MethodMatch(name=m.group(1), params=params, return_type=_return_type(rest, "brace"))


def match_ts_interface_property(line: str) -> Optional[PropertyMatch]:
	m = _TS_INTERFACE_PROPERTY.match(line)
	if not m:
		return None
	return PropertyMatch(
		name=m.group(2).strip("'\""),
		type=_clean(m.group(4)),
		is_readonly=bool(m.group(1)),
		is_optional=bool(m.group(3)),
	)


_TS_TYPE = re.compile(r"^(export\s+)?(?:declare\s+)?type\s+(" + IDENT + r")\s*(?:<[^=]*?>)?\s*=\s*(.*)$")
_TS_ENUM = re.compile(r"^(export\s+)?(?:declare\s+)?(?:const\s+)?enum\s+(" + IDENT + r")")
_TS_NAMESPACE = re.compile(r"^(export\s+)?(?:declare\s+)?(?:namespace|module)\s+(" + IDENT + r"(?:\." + IDENT + r")*)\s*\{?")


def match_ts_type(line: str) -> Optional[TypeMatch]:
	m = _TS_TYPE.match(line)
	if m:
		return TypeMatch(name=m.group(2), kind="type", value=_clean(m.group(3)), is_exported=bool(m.group(1)))
	m = _TS_ENUM.match(line)
	if m:
		return TypeMatch(name=m.group(2), kind="enum", is_exported=bool(m.group(1)))
	m = _TS_NAMESPACE.match(line)
	if m:
		return TypeMatch(name=m.group(2), kind="namespace", is_exported=bool(m.group(1)))
	return None


_TS_ENUM_MEMBER = re.compile(r"^(" + IDENT + r"|'[^']+'|\"[^\"]+\")\s*(?:=\s*[^,]+)?,?$")


def match_ts_enum_members(text: str) -> List[str]:
	"""Member names from an enum body fragment (one line or ``{ A, B }``)."""
	members = []
	for part in split_top_level(text.strip().strip("{}").strip()):
		m = _TS_ENUM_MEMBER.match(part.strip())
		if m:
			members.append(m.group(1).strip("'\""))
	return members


_TS_CONSTANT = re.compile(
	r"^(export\s+)?(default\s+)?(?:declare\s+)?const\s+(" + IDENT + r")\s*(?::\s*((?:=>|[^=])+?))?\s*=\s*(.+?);?$"
)


def match_ts_constant(line: str) -> Optional[ConstantMatch]:
	m = _TS_CONSTANT.match(line)
	if not m:
		return None
	return ConstantMatch(
		name=m.group(3),
		type=_clean(m.group(4)),
		value=_clean(m.group(5)),
		is_exported=bool(m.group(1)),
		is_default=bool(m.group(2)),
	)


def classify_ts_import(module: str) -> str:
	if module.startswith((".", "/", "@/", "~/")):
		return "internal"
	if module.startswith("node:") or module in NODE_BUILTINS:
		return "builtin"
	return "external"


# ---------------------------------------------------------------------------
# Indentation family
# ---------------------------------------------------------------------------

_PY_IMPORT = re.compile(r"^import\s+(.+)$")
_PY_FROM_IMPORT = re.compile(r"^from\s+(\.*[\w.]*)\s+import\s+(.+)$")


def _strip_comment(text: str) -> str:
	return strip_trailing_comment(text, "#")


def match_py_import(line: str) -> List[ImportMatch]:
	m = _PY_FROM_IMPORT.match(line)
	if m:
		module = m.group(1)
		names_text = _strip_comment(m.group(2)).replace("(", " ").replace(")", " ").replace("\\", " ")
		names = [n.strip().split(" as ")[0].strip() for n in names_text.split(",") if n.strip()]
		if names == ["*"]:
			return [ImportMatch(module=module, names=[], is_namespace=True)]
		return [ImportMatch(module=module, names=names)]
	m = _PY_IMPORT.match(line)
	if m:
		matches = []
		for item in _strip_comment(m.group(1)).replace("\\", " ").split(","):
			item = item.strip()
			if not item:
				continue
			pieces = [p.strip() for p in item.split(" as ")]
			matches.append(ImportMatch(module=pieces[0], names=[pieces[-1]]))
		return matches
	return []


def py_import_needs_more(line: str) -> bool:
	code = _strip_comment(line).rstrip()
	if code.endswith("\\"):
		return True
	return line.startswith("from ") and "(" in code and ")" not in code


def match_decorator(line: str) -> Optional[str]:
	if line.startswith("@") and len(line) > 1:
		return line[1:].strip()
	return None


_PY_DEF_HEAD = re.compile(r"^(async\s+)?def\s+(\w+)\s*(?:\[[^\]]*\])?\s*\(")


def match_py_def(text: str) -> Optional[FunctionMatch]:
	m = _PY_DEF_HEAD.match(text)
	if not m:
		return None
	split = _params_and_rest(text, m.end() - 1)
	if split is None:
		return None
	params, rest = split
	if not re.match(r"^\s*(?:->[^:]*)?:", rest) and not re.match(r"^\s*->.*:", rest):
		return None
	return FunctionMatch(
		name=m.group(2),
		params=params,
		return_type=_return_type(rest, "indent"),
		is_async=bool(m.group(1)),
	)


_PY_CLASS = re.compile(r"^class\s+(\w+)\s*(?:\[[^\]]*\])?\s*(\(.*\))?\s*:")


def match_py_class(text: str) -> Optional[ClassMatch]:
	m = _PY_CLASS.match(text)
	if not m:
		return None
	positional: List[str] = []
	is_abstract = False
	if m.group(2):
		for base in split_top_level(m.group(2)[1:-1]):
			if "=" in base:
				if "ABCMeta" in base:
					is_abstract = True
				continue
			positional.append(base)
	if any(base in ("ABC", "abc.ABC") for base in positional):
		is_abstract = True
	return ClassMatch(
		name=m.group(1),
		extends=positional[0] if positional else None,
		implements=positional[1:],
		is_abstract=is_abstract,
	)


_PY_SELF_ATTR = re.compile(r"^self\.(\w+)\s*(?::\s*([^=]+?))?\s*=(?!=)\s*(.+)$")
_PY_CLASS_ATTR_TYPED = re.compile(r"^(\w+)\s*:\s*([^=]+?)\s*(?:=\s*(.+))?$")
_PY_CLASS_ATTR = re.compile(r"^(\w+)\s*=(?!=)\s*(.+)$")
_PY_CONSTANT = re.compile(r"^([A-Z_][A-Z0-9_]*)\s*(?::\s*([^=]+?))?\s*=(?!=)\s*(.+)$")


def match_py_self_attribute(line: str) -> Optional[PropertyMatch]:
	m = _PY_SELF_ATTR.match(line)
	if not m:
		return None
	return PropertyMatch(name=m.group(1), type=_clean(m.group(2)), value=_clean(_strip_comment(m.group(3))))


def match_py_class_attribute(line: str) -> Optional[PropertyMatch]:
	m = _PY_CLASS_ATTR_TYPED.match(line)
	if m and not keyword.iskeyword(m.group(1)):
		return PropertyMatch(
			name=m.group(1),
			type=_clean(m.group(2)),
			value=_clean(_strip_comment(m.group(3) or "")),
		)
	m = _PY_CLASS_ATTR.match(line)
	if m and not keyword.iskeyword(m.group(1)):
		return PropertyMatch(name=m.group(1), value=_clean(_strip_comment(m.group(2))), is_static=True)
	return None


def match_py_constant(line: str) -> Optional[ConstantMatch]:
	m = _PY_CONSTANT.match(line)
	if not m:
		return None
	return ConstantMatch(name=m.group(1), type=_clean(m.group(2)), value=_clean(_strip_comment(m.group(3))))


def classify_py_import(module: str) -> str:
	if module.startswith("."):
		return "internal"
	root = module.split(".")[0]
	if root in getattr(sys, "stdlib_module_names", ()) or root in sys.builtin_module_names:
		return "builtin"
	return "external"


def py_visibility(name: str) -> str:
	if name.startswith("__") and not name.endswith("__"):
		return "private"
	if name.startswith("_") and not name.startswith("__"):
		return "protected"
	return "public"
