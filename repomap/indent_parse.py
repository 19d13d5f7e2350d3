"""Structure builder for indentation-delimited sources (Python).

A class ends on the first non-blank line at or left of the class line's
indentation that starts a new definition: ``def``, ``async def``, ``class``,
a decorator or an UPPER_CASE assignment. Anything else at that indentation
(a bare expression, an ``if`` block) does not end it. This is an
approximation and nested classes are not modelled.
"""

from __future__ import annotations

import re
from typing import List, Optional, Set

from .builder import ScanState, finish_structure, function_record, new_structure
from .docstrings import full_doc, read_python_docstring, summarize_doc
from .heuristics import calculate_complexity, detect_design_pattern
from .matchers import (
	MAX_SIGNATURE_LINES,
	ClassMatch,
	FunctionMatch,
	classify_py_import,
	collect_signature,
	indent_extent,
	indentation,
	match_decorator,
	match_py_class,
	match_py_class_attribute,
	match_py_constant,
	match_py_def,
	match_py_import,
	match_py_self_attribute,
	parse_parameters,
	py_import_needs_more,
	py_visibility,
)
from .model import ClassInfo, ConstantInfo, ExportInfo, FileStructure, ImportInfo, PropertyInfo


_CLASS_END = re.compile(r"^(?:def\s|async\s+def\s|class\s|@|[A-Z_][A-Z0-9_]*\s*(?::[^=]*)?=(?!=))")
_DUNDER_ALL = re.compile(r"^__all__\s*(?::[^=]+)?=\s*[\[(]")
_QUOTED = re.compile(r"""['"]([^'"]+)['"]""")
_YIELD = re.compile(r"\byield\b")
_STATIC_DECORATORS = ("staticmethod", "classmethod")


def read_dunder_all(lines: List[str]) -> Optional[Set[str]]:
	"""Names listed in a module-level ``__all__``, or None without one."""
	for i, line in enumerate(lines):
		if not _DUNDER_ALL.match(line):
			continue
		parts = [line]
		closer = "]" if "[" in line else ")"
		j = i
		while closer not in parts[-1] and j + 1 < len(lines):
			j += 1
			parts.append(lines[j])
		return set(_QUOTED.findall(" ".join(parts)))
	return None


def ends_class(stripped: str, indent: int, class_indent: int) -> bool:
	if indent > class_indent:
		return False
	return bool(_CLASS_END.match(stripped)) and not stripped.startswith("self.")


class _IndentScan:
	def __init__(self, path: str, text: str, language: str) -> None:
		self.path = path
		self.text = text
		self.lines = text.split("\n")
		self.structure = new_structure(path, text, language)
		self.state = ScanState()
		self.public_names = read_dunder_all(self.lines)

	def run(self) -> FileStructure:
		i = 0
		while i < len(self.lines):
			i = self.step(i)
		self.add_exports()
		return finish_structure(self.structure, self.text, "indent")

	def is_exported(self, name: str) -> bool:
		if self.public_names is not None:
			return name in self.public_names
		return not name.startswith("_")

	def docstring(self, body_start: int):
		"""(description, full_doc, index after the docstring) for a body."""
		found = read_python_docstring(self.lines, body_start)
		comment = self.state.doc.take()
		if found is None:
			return comment[0], comment[1], body_start
		doc_lines, end = found
		return summarize_doc(doc_lines), full_doc(doc_lines), end + 1

	def step(self, i: int) -> int:
		state = self.state
		raw = self.lines[i]
		stripped = raw.strip()
		if not stripped:
			return i + 1
		indent = indentation(raw)
		if state.in_class and ends_class(stripped, indent, state.class_indent):
			state.leave_class()

		if stripped.startswith("#"):
			state.doc.add_line_comment(stripped)
			return i + 1
		decorator = match_decorator(stripped)
		if decorator:
			state.decorators.append(decorator)
			return i + 1

		if stripped.startswith(("import ", "from ")) and not state.in_class:
			return self.add_imports(i, stripped)
		if stripped.startswith(("def ", "async def ")):
			signature, last = collect_signature(self.lines, i)
			fm = match_py_def(signature)
			if fm:
				return self.add_def(i, last, fm)
		if stripped.startswith("class "):
			signature, last = collect_signature(self.lines, i)
			cm = match_py_class(signature)
			if cm:
				return self.add_class(i, last, cm)

		if state.in_class:
			if state.body_indent is None and indent > state.class_indent:
				state.body_indent = indent
			if indent == state.body_indent:
				pm = match_py_class_attribute(stripped)
				if pm:
					self.add_class_attribute(pm)
					return i + 1
		else:
			km = match_py_constant(stripped)
			if km:
				description, _ = state.doc.take()
				state.decorators = []
				self.structure.constants.append(
					ConstantInfo(
						name=km.name,
						type=km.type,
						description=description,
						location=self.path,
						line=i + 1,
						is_exported=indent == 0 and self.is_exported(km.name),
						value=km.value,
					)
				)
				return i + 1

		state.doc.clear()
		state.decorators = []
		return i + 1

	def add_imports(self, i: int, stripped: str) -> int:
		parts, last = [stripped], i
		while py_import_needs_more(" ".join(parts)) and last + 1 < min(len(self.lines), i + MAX_SIGNATURE_LINES):
			last += 1
			parts.append(self.lines[last].strip())
		for im in match_py_import(" ".join(parts)):
			self.structure.imports.append(
				ImportInfo(
					module=im.module,
					names=im.names,
					is_default=im.is_default,
					is_namespace=im.is_namespace,
					line=i + 1,
					kind=classify_py_import(im.module),
				)
			)
		self.state.doc.clear()
		self.state.decorators = []
		return last + 1

	def add_def(self, i: int, last: int, fm: FunctionMatch) -> int:
		state = self.state
		decorators = state.take_decorators()
		description, full, body_start = self.docstring(last + 1)
		end = indent_extent(self.lines, i, body_start)
		body = self.lines[last + 1:end + 1]

		in_class = state.in_class
		if fm.is_async:
			kind = "async"
		elif any(_YIELD.search(line) for line in body):
			kind = "generator"
		else:
			kind = "method" if in_class else "function"

		record = function_record(
			name=fm.name,
			kind=kind,
			params=parse_parameters(fm.params, "indent"),
			return_type=fm.return_type,
			doc=(description, full),
			path=self.path,
			text=self.text,
			start_line=i + 1,
			end_line=end + 1,
			family="indent",
			visibility=py_visibility(fm.name),
			decorators=decorators,
			is_static=any(d.split("(")[0] in _STATIC_DECORATORS for d in decorators),
			is_exported=not in_class and indentation(self.lines[i]) == 0 and self.is_exported(fm.name),
		)
		if in_class:
			if state.body_indent is None:
				state.body_indent = indentation(self.lines[i])
			state.current_class.methods.append(record)
			self.collect_self_attributes(body)
		else:
			self.structure.functions.append(record)
		return end + 1

	def collect_self_attributes(self, body: List[str]) -> None:
		cls = self.state.current_class
		known = {prop.name for prop in cls.properties}
		for line in body:
			pm = match_py_self_attribute(line.strip())
			if pm is None or pm.name in known:
				continue
			known.add(pm.name)
			cls.properties.append(
				PropertyInfo(
					name=pm.name,
					type=pm.type,
					default_value=pm.value,
					visibility=py_visibility(pm.name),
				)
			)

	def add_class(self, i: int, last: int, cm: ClassMatch) -> int:
		state = self.state
		decorators = state.take_decorators()
		description, full, body_start = self.docstring(last + 1)
		end = indent_extent(self.lines, i, body_start)
		indent = indentation(self.lines[i])
		cls = ClassInfo(
			name=cm.name,
			description=description,
			full_doc=full,
			location=self.path,
			line=i + 1,
			is_exported=indent == 0 and self.is_exported(cm.name),
			extends=cm.extends,
			implements=cm.implements,
			decorators=decorators,
			is_abstract=cm.is_abstract,
			design_pattern=detect_design_pattern(self.text, i + 1, end + 1),
			complexity=calculate_complexity(self.text, i + 1, end + 1, "indent"),
			lines_of_code=end - i + 1,
		)
		self.structure.classes.append(cls)
		if state.in_class:
			# nested class: recorded, body skipped, outer class stays current
			return end + 1
		state.enter_class(cls, indent=indent)
		return body_start

	def add_class_attribute(self, pm) -> None:
		description, _ = self.state.doc.take()
		self.state.decorators = []
		cls = self.state.current_class
		if any(prop.name == pm.name for prop in cls.properties):
			return
		cls.properties.append(
			PropertyInfo(
				name=pm.name,
				type=pm.type,
				description=description,
				is_static=pm.is_static,
				default_value=pm.value,
				visibility=py_visibility(pm.name),
			)
		)

	def add_exports(self) -> None:
		s = self.structure
		exported = [(item.line, item.name, "function") for item in s.functions if item.is_exported]
		exported += [(item.line, item.name, "class") for item in s.classes if item.is_exported]
		exported += [(item.line, item.name, "constant") for item in s.constants if item.is_exported]
		for line, name, kind in sorted(exported):
			s.exports.append(ExportInfo(name=name, kind=kind, line=line))


def parse_indent_file(path: str, text: str, language: str = "python") -> FileStructure:
	"""Build the FileStructure of one Python source file."""
	return _IndentScan(path, text, language).run()
