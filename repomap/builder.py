"""Scan state and record factories shared by the two file builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .docstrings import clean_block_line, clean_line_comment, full_doc, summarize_doc
from .heuristics import (
	analyze_business_logic,
	analyze_configuration,
	analyze_data_flow,
	analyze_error_handling,
	analyze_function_dependencies,
	analyze_performance,
	calculate_complexity,
	determine_architectural_layer,
	determine_business_domain,
	determine_file_purpose,
)
from .model import ClassInfo, FileStructure, FunctionInfo, InterfaceInfo, ParameterInfo, TypeInfo


class ScanMode(Enum):
	TOP_LEVEL = "top_level"
	IN_CLASS = "in_class"


@dataclass
class DocBuffer:
	"""Pending doc comment, attached to the next matched construct."""

	lines: List[str] = field(default_factory=list)
	in_block: bool = False

	def start_block(self, line: str) -> None:
		self.lines = [clean_block_line(line)]
		self.in_block = "*/" not in line[2:]

	def add_block_line(self, line: str) -> None:
		self.lines.append(clean_block_line(line))
		if "*/" in line:
			self.in_block = False

	def add_line_comment(self, line: str) -> None:
		self.lines.append(clean_line_comment(line))

	def take(self) -> Tuple[Optional[str], Optional[str]]:
		description, text = summarize_doc(self.lines), full_doc(self.lines)
		self.clear()
		return description, text

	def clear(self) -> None:
		self.lines = []
		self.in_block = False


@dataclass
class ScanState:
	"""Everything the line loop carries from one line to the next.

	``depth`` and the ``*_depth``/``*_opened`` fields are only used by the
	brace family; ``class_indent``/``body_indent`` only by the indentation
	family.
	"""

	mode: ScanMode = ScanMode.TOP_LEVEL
	current_class: Optional[ClassInfo] = None
	doc: DocBuffer = field(default_factory=DocBuffer)
	decorators: List[str] = field(default_factory=list)
	depth: int = 0
	class_depth: int = 0
	class_opened: bool = False
	container: Optional[object] = None
	container_depth: int = 0
	container_opened: bool = False
	class_indent: int = 0
	body_indent: Optional[int] = None

	def enter_class(self, cls: ClassInfo, depth: int = 0, indent: int = 0) -> None:
		self.mode = ScanMode.IN_CLASS
		self.current_class = cls
		self.class_depth = depth
		self.class_opened = False
		self.class_indent = indent
		self.body_indent = None

	def leave_class(self) -> None:
		self.mode = ScanMode.TOP_LEVEL
		self.current_class = None
		self.class_opened = False
		self.body_indent = None

	def enter_container(self, container: object, depth: int) -> None:
		self.container = container
		self.container_depth = depth
		self.container_opened = False

	def leave_container(self) -> None:
		self.container = None
		self.container_opened = False

	def resync(self) -> None:
		"""Drop back to module scope after brace counting went astray."""
		self.depth = 0
		self.leave_container()
		if self.in_class:
			self.leave_class()

	def take_decorators(self) -> List[str]:
		decorators, self.decorators = self.decorators, []
		return decorators

	@property
	def in_class(self) -> bool:
		return self.mode is ScanMode.IN_CLASS and self.current_class is not None

	@property
	def in_interface(self) -> bool:
		return isinstance(self.container, InterfaceInfo)

	@property
	def in_enum(self) -> bool:
		return isinstance(self.container, TypeInfo)


def new_structure(path: str, text: str, language: str) -> FileStructure:
	return FileStructure(
		path=path,
		language=language,
		size=len(text.encode("utf-8")),
		line_count=len(text.split("\n")),
		purpose=determine_file_purpose(text, path),
	)


def function_record(
	*,
	name: str,
	kind: str,
	params: List[ParameterInfo],
	path: str,
	text: str,
	start_line: int,
	end_line: int,
	family: str,
	return_type: Optional[str] = None,
	doc: Tuple[Optional[str], Optional[str]] = (None, None),
	**flags,
) -> FunctionInfo:
	"""Build a FunctionInfo and run every analyzer over its line extent."""
	return FunctionInfo(
		name=name,
		kind=kind,
		params=params,
		return_type=return_type,
		description=doc[0],
		full_doc=doc[1],
		location=path,
		line=start_line,
		complexity=calculate_complexity(text, start_line, end_line, family),
		lines_of_code=end_line - start_line + 1,
		dependencies=analyze_function_dependencies(text, start_line, end_line),
		business_logic=analyze_business_logic(text, start_line, end_line),
		error_handling=analyze_error_handling(text, start_line, end_line),
		data_flow=analyze_data_flow(text, start_line, end_line),
		performance=analyze_performance(text, start_line, end_line),
		**flags,
	)


def exported_names(structure: FileStructure) -> List[str]:
	names: List[str] = []
	for group in (structure.functions, structure.classes, structure.interfaces, structure.types, structure.constants):
		names.extend(item.name for item in group if item.is_exported)
	return names


def finish_structure(structure: FileStructure, text: str, family: str) -> FileStructure:
	"""Fill the whole-file fields once every construct has been collected."""
	structure.dependencies = list(dict.fromkeys(imp.module for imp in structure.imports if imp.module))
	structure.complexity = calculate_complexity(text, 1, structure.line_count, family)
	structure.business_domain = determine_business_domain(text)
	structure.architectural_layer = determine_architectural_layer(structure.path)
	structure.configuration = analyze_configuration(text)
	structure.api = exported_names(structure)
	return structure
