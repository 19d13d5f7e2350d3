"""Keyword heuristics over a line range of a source file.

Every analyzer takes the whole file content plus a 1-based inclusive line
range and returns a best-effort summary. None of them raise: an empty range
simply produces the default result. The numbers are rough proxies meant for a
human-readable report, not metrics to gate a build on.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .model import ConfigInfo, DataFlowInfo, ErrorHandlingInfo, PerformanceInfo
from .vocabulary import (
	BUSINESS_KEYWORDS,
	CALL_EXCLUSIONS,
	DATA_FLOW_KEYWORDS,
	DOMAIN_KEYWORDS,
	FALLBACK_MARKERS,
	GENERAL_DOMAIN,
	GENERAL_LAYER,
	GENERAL_LOGIC,
	LAYER_SEGMENTS,
	LOGGING_MARKERS,
	OPTIMIZATION_KEYWORDS,
	PATTERN_KEYWORDS,
	PURPOSE_BY_FILENAME,
	SECRET_MARKERS,
	VALIDATION_MARKERS,
	DesignPattern,
	FilePurpose,
)


_BRANCH_TOKENS = [
	re.compile(r"\bif\b"),
	re.compile(r"\bfor\b"),
	re.compile(r"\bwhile\b"),
	re.compile(r"\bswitch\b"),
	re.compile(r"\bcatch\b"),
	re.compile(r"&&|\|\|"),
]
_INDENT_BRANCH_TOKENS = [
	re.compile(r"\belif\b"),
	re.compile(r"\bexcept\b"),
	re.compile(r"\b(?:and|or)\b"),
]
_QUESTION = re.compile(r"\?(?![.?=])")

_CALL = re.compile(r"([A-Za-z_$][\w$]*)\s*\(")
_TRY_CATCH = re.compile(r"\b(?:try|catch|except)\b")
_CATCH_BINDING = re.compile(r"catch\s*\(\s*([^)]+?)\s*\)")
_EXCEPT_CLAUSE = re.compile(r"\bexcept\s+(\([^)]*\)|[\w.]+(?:\s*,\s*[\w.]+)*)(?:\s+as\s+\w+)?\s*:")
_ERROR_LITERAL = re.compile(r"(['\"`])([^'\"`]*?(?:error|exception)[^'\"`]*)\1", re.IGNORECASE)
_LOOP = re.compile(r"\b(?:for|while)\b|\.forEach\s*\(")
_AWAIT = re.compile(r"\bawait\b")

_ENV_PATTERNS = [
	re.compile(r"process\.env\.([A-Za-z_][A-Za-z0-9_]*)"),
	re.compile(r"process\.env\[\s*['\"]([^'\"]+)['\"]\s*\]"),
	re.compile(r"os\.environ\[\s*['\"]([^'\"]+)['\"]\s*\]"),
	re.compile(r"os\.environ\.get\(\s*['\"]([^'\"]+)['\"]"),
	re.compile(r"os\.getenv\(\s*['\"]([^'\"]+)['\"]"),
]


def _window(content: str, start_line: int, end_line: int) -> List[str]:
	lines = content.split("\n")
	start = max(start_line, 1)
	end = max(end_line, start)
	return lines[start - 1:end]


def _unique(items: List[str]) -> List[str]:
	return list(dict.fromkeys(items))


def _count_ternaries(line: str) -> int:
	count = 0
	for m in _QUESTION.finditer(line):
		rest = line[m.end():]
		# "name?: type" is an optional marker, not a ternary
		if rest.lstrip().startswith(":"):
			continue
		if ":" in rest:
			count += 1
	return count


def calculate_complexity(content: str, start_line: int, end_line: int, family: str = "brace") -> int:
	"""Approximate cyclomatic complexity: 1 plus one per branch token.

	The brace family counts if/else if, for/while, switch, catch, && / || and
	ternaries. The indentation family also counts elif, except and and/or.
	"""
	tokens = list(_BRANCH_TOKENS)
	if family == "indent":
		tokens.extend(_INDENT_BRANCH_TOKENS)
	complexity = 1
	for line in _window(content, start_line, end_line):
		for token in tokens:
			complexity += len(token.findall(line))
		if family == "brace":
			complexity += _count_ternaries(line)
	return complexity


def analyze_function_dependencies(content: str, start_line: int, end_line: int) -> List[str]:
	found: List[str] = []
	for line in _window(content, start_line, end_line):
		for m in _CALL.finditer(line):
			name = m.group(1)
			if name not in CALL_EXCLUSIONS:
				found.append(name)
	return _unique(found)


def analyze_business_logic(content: str, start_line: int, end_line: int) -> str:
	found: List[str] = []
	for line in _window(content, start_line, end_line):
		lower = line.lower()
		found.extend(kw for kw in BUSINESS_KEYWORDS if kw in lower)
	found = _unique(found)
	return ", ".join(found) if found else GENERAL_LOGIC


def analyze_error_handling(content: str, start_line: int, end_line: int) -> ErrorHandlingInfo:
	info = ErrorHandlingInfo()
	for line in _window(content, start_line, end_line):
		lower = line.lower()
		info.try_catch_blocks += len(_TRY_CATCH.findall(line))

		for m in _CATCH_BINDING.finditer(line):
			info.error_types.append(m.group(1).strip())
		for m in _EXCEPT_CLAUSE.finditer(line):
			clause = m.group(1).strip().strip("()")
			info.error_types.extend(part.strip() for part in clause.split(",") if part.strip())

		if "error" in lower or "exception" in lower:
			for m in _ERROR_LITERAL.finditer(line):
				info.error_messages.append(m.group(2))

		info.fallback_strategies.extend(marker for marker in FALLBACK_MARKERS if marker in lower)
		info.logging.extend(marker for marker in LOGGING_MARKERS if marker in lower)

	info.error_types = _unique(info.error_types)
	info.error_messages = _unique(info.error_messages)
	info.fallback_strategies = _unique(info.fallback_strategies)
	info.logging = _unique(info.logging)
	return info


def analyze_data_flow(content: str, start_line: int, end_line: int) -> DataFlowInfo:
	found: Dict[str, List[str]] = {category: [] for category in DATA_FLOW_KEYWORDS}
	for line in _window(content, start_line, end_line):
		lower = line.lower()
		for category, keywords in DATA_FLOW_KEYWORDS.items():
			found[category].extend(kw for kw in keywords if kw in lower)
	return DataFlowInfo(**{category: _unique(words) for category, words in found.items()})


def analyze_performance(content: str, start_line: int, end_line: int) -> PerformanceInfo:
	bottlenecks: List[str] = []
	optimizations: List[str] = []
	loop_indents: List[int] = []
	any_loop = False
	previous_awaited = False

	for line in _window(content, start_line, end_line):
		if not line.strip():
			continue
		lower = line.lower()
		indent = len(line) - len(line.lstrip())
		while loop_indents and indent <= loop_indents[-1]:
			loop_indents.pop()

		loops_here = len(_LOOP.findall(line))
		if loops_here:
			any_loop = True
			if loop_indents or loops_here > 1:
				bottlenecks.append("nested_loops")
			loop_indents.append(indent)

		awaits_here = len(_AWAIT.findall(line))
		if awaits_here > 1 or (awaits_here and previous_awaited):
			bottlenecks.append("sequential_awaits")
		previous_awaited = awaits_here > 0

		optimizations.extend(kw for kw in OPTIMIZATION_KEYWORDS if kw in lower)

	bottlenecks = _unique(bottlenecks)
	if "nested_loops" in bottlenecks:
		time_complexity = "O(n^2)"
	elif any_loop:
		time_complexity = "O(n)"
	else:
		time_complexity = "O(1)"
	return PerformanceInfo(
		time_complexity=time_complexity,
		bottlenecks=bottlenecks,
		optimizations=_unique(optimizations),
	)


def detect_design_pattern(content: str, start_line: int = 1, end_line: Optional[int] = None) -> str:
	if end_line is None:
		end_line = content.count("\n") + 1
	lower = "\n".join(_window(content, start_line, end_line)).lower()
	if "instance" in lower and "static" in lower:
		return DesignPattern.SINGLETON.value
	for keywords, pattern in PATTERN_KEYWORDS:
		if any(kw in lower for kw in keywords):
			return pattern.value
	return DesignPattern.STANDARD.value


def determine_file_purpose(content: str, path: str) -> str:
	file_name = path.replace("\\", "/").split("/")[-1]
	for keywords, purpose in PURPOSE_BY_FILENAME:
		if any(kw in file_name for kw in keywords):
			return purpose.value

	lower = content.lower()
	if "export default" in lower and "function" in lower:
		return FilePurpose.MAIN_MODULE.value
	if "interface" in lower and "export" in lower:
		return FilePurpose.TYPES.value
	if "class" in lower and "export" in lower:
		return FilePurpose.CLASSES.value
	if re.search(r"\b(?:describe|it)\(", lower) or re.search(r"^\s*def test_", lower, re.MULTILINE):
		return FilePurpose.TESTING.value
	if "process.env" in lower or "config" in lower:
		return FilePurpose.CONFIGURATION.value
	return FilePurpose.GENERAL.value


def determine_business_domain(content: str) -> str:
	lower = content.lower()
	for keywords, domain in DOMAIN_KEYWORDS:
		if any(kw in lower for kw in keywords):
			return domain
	return GENERAL_DOMAIN


def determine_architectural_layer(path: str) -> str:
	segments = [s for s in re.split(r"[\\/]", path) if s]
	for names, layer in LAYER_SEGMENTS:
		if any(name in segments for name in names):
			return layer
	return GENERAL_LAYER


def analyze_configuration(content: str) -> ConfigInfo:
	env_vars: List[str] = []
	secrets: List[str] = []
	validation: List[str] = []
	for line in content.split("\n"):
		lower = line.lower()
		for pattern in _ENV_PATTERNS:
			env_vars.extend(m.group(1) for m in pattern.finditer(line))
		secrets.extend(marker for marker in SECRET_MARKERS if marker in lower)
		validation.extend(marker for marker in VALIDATION_MARKERS if marker in lower)
	return ConfigInfo(
		environment_variables=_unique(env_vars),
		secrets=_unique(secrets),
		validation_rules=_unique(validation),
	)
