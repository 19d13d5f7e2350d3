"""Structure builder for brace-delimited sources (TypeScript and JavaScript).

One left-to-right pass over the lines. Brace depth is tracked on every line
with strings and comments blanked out, so top-level productions are only
tried at depth 0 and class members only directly inside the current class
body. Anything that matches no production is skipped.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from .builder import ScanState, finish_structure, function_record, new_structure
from .heuristics import calculate_complexity, detect_design_pattern
from .matchers import (
	MAX_SIGNATURE_LINES,
	ExportMatch,
	FunctionMatch,
	brace_extent,
	classify_ts_import,
	collect_signature,
	match_decorator,
	match_ts_arrow,
	match_ts_class,
	match_ts_constant,
	match_ts_enum_members,
	match_ts_export,
	match_ts_function,
	match_ts_import,
	match_ts_interface,
	match_ts_interface_method,
	match_ts_interface_property,
	match_ts_method,
	match_ts_property,
	match_ts_type,
	paren_balance,
	parse_parameters,
	split_top_level,
	scan_code,
	strip_code,
	strip_trailing_comment,
	ts_import_needs_more,
)
from .model import (
	ClassInfo,
	ConstantInfo,
	ExportInfo,
	FileStructure,
	FunctionInfo,
	ImportInfo,
	InterfaceInfo,
	PropertyInfo,
	TypeInfo,
)


_FUNCTION_KEYWORD = re.compile(r"\bfunction\b")
_VARIABLE_KEYWORD = re.compile(r"^(?:export\s+)?(?:declare\s+)?(?:const|let|var)\s")
# export and import statements are only legal at module scope
_MODULE_STATEMENT = re.compile(r"^(?:export|import)\s")


def _function_kind(match: FunctionMatch, default: str = "function") -> str:
	if match.is_async:
		return "async"
	if match.is_generator:
		return "generator"
	if match.is_arrow:
		return "arrow"
	return default


def _decorator_text(line: str) -> str:
	# A decorator whose arguments run over several lines keeps only its name.
	if paren_balance(line) > 0:
		return line[:line.index("(")] + "(...)"
	return line


def _inline_body(code: str) -> str:
	start, end = code.find("{"), code.rfind("}")
	if start < 0 or end <= start:
		return ""
	return code[start + 1:end]


class _BraceScan:
	def __init__(self, path: str, text: str, language: str) -> None:
		self.path = path
		self.text = text
		self.lines = text.split("\n")
		self.structure = new_structure(path, text, language)
		self.state = ScanState()
		self.exports: List[Tuple[ExportMatch, int]] = []
		self.in_template = False

	def run(self) -> FileStructure:
		i = 0
		while i < len(self.lines):
			i = self.step(i)
		self.resolve_exports()
		return finish_structure(self.structure, self.text, "brace")

	# -- line loop -------------------------------------------------------

	def step(self, i: int) -> int:
		state = self.state
		if self.in_template:
			self.track_depth(i, i)
			return i + 1
		stripped = self.lines[i].strip()
		if state.depth > 0 and _MODULE_STATEMENT.match(self.lines[i]) and not self.has_namespace():
			state.resync()
		if state.doc.in_block:
			state.doc.add_block_line(stripped)
			return i + 1
		if stripped.startswith("/*"):
			state.doc.start_block(stripped)
			return i + 1
		if stripped.startswith("//"):
			state.doc.add_line_comment(stripped)
			return i + 1
		if not stripped:
			return i + 1

		code = strip_trailing_comment(stripped)
		last = i
		evaluated = True
		matched = False
		if state.container is not None:
			if state.container_opened and state.depth == state.container_depth + 1:
				matched, last = self.container_member(i, code)
			else:
				evaluated = False
		elif state.in_class:
			if state.class_opened and state.depth == state.class_depth + 1:
				matched, last = self.class_member(i, code)
			else:
				evaluated = False
		elif state.depth == 0:
			matched, last = self.top_level(i, code)
		else:
			evaluated = False

		if not matched:
			state.doc.clear()
			if evaluated:
				state.decorators = []
		self.track_depth(i, last)
		return last + 1

	def track_depth(self, first: int, last: int) -> None:
		state = self.state
		for j in range(first, last + 1):
			code, self.in_template = scan_code(self.lines[j], self.in_template)
			if "{" in code:
				if state.in_class and not state.class_opened:
					state.class_opened = True
				if state.container is not None and not state.container_opened:
					state.container_opened = True
			state.depth = max(state.depth + code.count("{") - code.count("}"), 0)
			if state.container is not None and state.container_opened and state.depth <= state.container_depth:
				state.leave_container()
			if state.in_class and state.class_opened and state.depth <= state.class_depth:
				state.leave_class()

	def has_namespace(self) -> bool:
		return any(t.kind == "namespace" for t in self.structure.types)

	def opens_block(self, start: int, end: int) -> bool:
		return any("{" in strip_code(line) for line in self.lines[start:end + 1])

	# -- top level -------------------------------------------------------

	def top_level(self, i: int, code: str) -> Tuple[bool, int]:
		if code.startswith("import ") or code.startswith("import{"):
			return self.add_import(i, code)

		decorator = match_decorator(code)
		if decorator:
			self.state.decorators.append(_decorator_text(decorator))
			return True, i

		exports = match_ts_export(code)
		for export in exports:
			self.exports.append((export, i + 1))

		cm = match_ts_class(code)
		if cm:
			return True, self.add_class(i, cm)
		im = match_ts_interface(code)
		if im:
			return True, self.add_interface(i, code, im)
		tm = match_ts_type(code)
		if tm:
			return True, self.add_type(i, code, tm)
		if _FUNCTION_KEYWORD.search(code) and not _VARIABLE_KEYWORD.match(code):
			signature, last = collect_signature(self.lines, i)
			fm = match_ts_function(strip_trailing_comment(signature))
			if fm:
				self.add_function(i, last, fm)
				return True, last
		if _VARIABLE_KEYWORD.match(code):
			signature, last = collect_signature(self.lines, i)
			am = match_ts_arrow(strip_trailing_comment(signature))
			if am:
				self.add_function(i, last, am)
				return True, last
		km = match_ts_constant(code)
		if km:
			description, _ = self.state.doc.take()
			self.structure.constants.append(
				ConstantInfo(
					name=km.name,
					type=km.type,
					description=description,
					location=self.path,
					line=i + 1,
					is_exported=km.is_exported,
					is_default=km.is_default,
					value=km.value,
				)
			)
			return True, i
		return bool(exports), i

	def add_import(self, i: int, code: str) -> Tuple[bool, int]:
		text, last = code, i
		if ts_import_needs_more(code):
			parts = [code]
			for j in range(i + 1, min(len(self.lines), i + MAX_SIGNATURE_LINES)):
				parts.append(strip_trailing_comment(self.lines[j].strip()))
				if "}" in self.lines[j]:
					text, last = " ".join(parts), j
					break
		im = match_ts_import(text)
		if im is None:
			return False, i
		self.structure.imports.append(
			ImportInfo(
				module=im.module,
				names=im.names,
				is_default=im.is_default,
				is_namespace=im.is_namespace,
				line=i + 1,
				kind=classify_ts_import(im.module),
			)
		)
		self.state.doc.clear()
		return True, last

	def add_function(self, i: int, last: int, fm: FunctionMatch) -> None:
		end = max(brace_extent(self.lines, i), last)
		self.structure.functions.append(
			function_record(
				name=fm.name,
				kind=_function_kind(fm),
				params=parse_parameters(fm.params),
				return_type=fm.return_type,
				doc=self.state.doc.take(),
				path=self.path,
				text=self.text,
				start_line=i + 1,
				end_line=end + 1,
				family="brace",
				is_exported=fm.is_exported,
				is_default=fm.is_default,
				decorators=self.state.take_decorators(),
			)
		)

	def add_class(self, i: int, cm) -> int:
		end = brace_extent(self.lines, i)
		description, full = self.state.doc.take()
		cls = ClassInfo(
			name=cm.name,
			description=description,
			full_doc=full,
			location=self.path,
			line=i + 1,
			is_exported=cm.is_exported,
			is_default=cm.is_default,
			extends=cm.extends,
			implements=cm.implements,
			decorators=self.state.take_decorators(),
			is_abstract=cm.is_abstract,
			design_pattern=detect_design_pattern(self.text, i + 1, end + 1),
			complexity=calculate_complexity(self.text, i + 1, end + 1, "brace"),
			lines_of_code=end - i + 1,
		)
		self.structure.classes.append(cls)
		if self.opens_block(i, end):
			self.state.enter_class(cls, depth=self.state.depth)
		return i

	def add_interface(self, i: int, code: str, im) -> int:
		description, full = self.state.doc.take()
		iface = InterfaceInfo(
			name=im.name,
			description=description,
			full_doc=full,
			location=self.path,
			line=i + 1,
			is_exported=im.is_exported,
			extends=im.extends,
			generic_params=im.generic_params,
		)
		self.structure.interfaces.append(iface)
		if "{" in strip_code(code) and brace_extent(self.lines, i) == i:
			for part in split_top_level(_inline_body(code), ";"):
				self.interface_member(i, part.strip())
		elif self.opens_block(i, brace_extent(self.lines, i)):
			self.state.enter_container(iface, self.state.depth)
		return i

	def add_type(self, i: int, code: str, tm) -> int:
		description, _ = self.state.doc.take()
		info = TypeInfo(
			name=tm.name,
			kind=tm.kind,
			description=description,
			location=self.path,
			line=i + 1,
			is_exported=tm.is_exported,
			value=tm.value,
		)
		self.structure.types.append(info)
		if tm.kind == "enum":
			if "{" in strip_code(code) and brace_extent(self.lines, i) == i:
				info.members = match_ts_enum_members(_inline_body(code))
			elif self.opens_block(i, brace_extent(self.lines, i)):
				self.state.enter_container(info, self.state.depth)
		return i

	# -- class bodies ----------------------------------------------------

	def class_member(self, i: int, code: str) -> Tuple[bool, int]:
		state = self.state
		decorator = match_decorator(code)
		if decorator:
			state.decorators.append(_decorator_text(decorator))
			return True, i
		if "(" in code:
			signature, last = collect_signature(self.lines, i)
			mm = match_ts_method(strip_trailing_comment(signature))
			if mm:
				end = max(brace_extent(self.lines, i), last)
				kind = "async" if mm.is_async else "generator" if mm.is_generator else "method"
				state.current_class.methods.append(
					function_record(
						name=mm.name,
						kind=kind,
						params=parse_parameters(mm.params),
						return_type=mm.return_type,
						doc=state.doc.take(),
						path=self.path,
						text=self.text,
						start_line=i + 1,
						end_line=end + 1,
						family="brace",
						visibility=mm.visibility or "public",
						is_static=mm.is_static,
						decorators=state.take_decorators(),
					)
				)
				return True, last
		pm = match_ts_property(code)
		if pm:
			description, _ = state.doc.take()
			state.decorators = []
			state.current_class.properties.append(
				PropertyInfo(
					name=pm.name,
					type=pm.type,
					description=description,
					is_readonly=pm.is_readonly,
					is_optional=pm.is_optional,
					is_static=pm.is_static,
					default_value=pm.value,
					visibility=pm.visibility or "public",
				)
			)
			return True, i
		return False, i

	# -- interface and enum bodies ---------------------------------------

	def container_member(self, i: int, code: str) -> Tuple[bool, int]:
		container = self.state.container
		if self.state.in_enum:
			members = match_ts_enum_members(code)
			container.members.extend(members)
			return bool(members), i
		last = i
		if "(" in code:
			code, last = collect_signature(self.lines, i)
			code = strip_trailing_comment(code)
		return self.interface_member(i, code), last

	def interface_member(self, i: int, code: str) -> bool:
		iface = self.state.container if self.state.in_interface else self.structure.interfaces[-1]
		if not code:
			return False
		mm = match_ts_interface_method(code)
		if mm:
			description, full = self.state.doc.take()
			iface.methods.append(
				FunctionInfo(
					name=mm.name,
					kind="method",
					params=parse_parameters(mm.params),
					return_type=mm.return_type,
					description=description,
					full_doc=full,
					location=self.path,
					line=i + 1,
				)
			)
			return True
		pm = match_ts_interface_property(code)
		if pm:
			description, _ = self.state.doc.take()
			iface.properties.append(
				PropertyInfo(
					name=pm.name,
					type=pm.type,
					description=description,
					is_readonly=pm.is_readonly,
					is_optional=pm.is_optional,
				)
			)
			return True
		return False

	# -- exports ---------------------------------------------------------

	def resolve_exports(self) -> None:
		"""Turn recorded export lines into ExportInfo records.

		``export { a }`` and ``export default a`` name a declaration made
		elsewhere in the file; that declaration is marked exported and lends
		its kind. Names declared nowhere in the file count as constants.
		"""
		s = self.structure
		declared = {}
		for kind, group in (
			("function", s.functions),
			("class", s.classes),
			("interface", s.interfaces),
			("type", s.types),
			("constant", s.constants),
		):
			for item in group:
				declared.setdefault(item.name, (kind, item))

		for export, line in self.exports:
			kind = export.kind
			if kind is None or kind == "default":
				found = declared.get(export.name)
				if found:
					found[1].is_exported = True
					if export.is_default and hasattr(found[1], "is_default"):
						found[1].is_default = True
				if kind is None:
					kind = found[0] if found else "constant"
			s.exports.append(ExportInfo(name=export.name, kind=kind, is_default=export.is_default, line=line))


def parse_brace_file(path: str, text: str, language: str = "typescript") -> FileStructure:
	"""Build the FileStructure of one TypeScript/JavaScript source file."""
	return _BraceScan(path, text, language).run()
