"""Deterministic text rendering of collected file structures.

``render_map`` does no I/O and reads no clock: the generation timestamp is
passed in by the caller, so the same input always renders the same text.
"""

from __future__ import annotations

import posixpath
from typing import Dict, List, Optional

from .model import (
	ClassInfo,
	ConstantInfo,
	FileStructure,
	FunctionInfo,
	InterfaceInfo,
	ParameterInfo,
	PropertyInfo,
	ScanStats,
	TypeInfo,
)
from .vocabulary import FilePurpose


ROOT_LABEL = "Корень проекта"

# (field on FileStructure, report label)
CATEGORIES = [
	("functions", "Функций"),
	("classes", "Классов"),
	("interfaces", "Интерфейсов"),
	("types", "Типов"),
	("constants", "Констант"),
]


def collect_stats(files: List[FileStructure]) -> ScanStats:
	totals: Dict[str, int] = {}
	exported: Dict[str, int] = {}
	for field, _ in CATEGORIES:
		items = [item for f in files for item in getattr(f, field)]
		totals[field] = len(items)
		exported[field] = sum(1 for item in items if item.is_exported)
	return ScanStats(files=len(files), size=sum(f.size for f in files), totals=totals, exported=exported)


def _kb(size: int) -> str:
	return f"{size / 1024:.1f} KB"


def _params(params: List[ParameterInfo]) -> str:
	parts = []
	for p in params:
		text = ("..." if p.is_rest else "") + p.name + ("?" if p.is_optional else "")
		if p.type:
			text += f": {p.type}"
		parts.append(text)
	return ", ".join(parts)


def _entry(signature: str, description: Optional[str], line: Optional[int], indent: str = "") -> str:
	text = f"{indent}- `{signature}`"
	if description:
		text += f" - {description}"
	if line is not None:
		text += f" (строка {line})"
	return text


def _function_signature(fn: FunctionInfo, with_export: bool = True) -> str:
	prefix = "export " if with_export and fn.is_exported else ""
	if fn.is_default and with_export:
		prefix += "default "
	if fn.kind == "async":
		prefix += "async "
	if fn.is_static:
		prefix += "static "
	signature = f"{prefix}{fn.name}({_params(fn.params)})"
	if fn.return_type:
		signature += f": {fn.return_type}"
	return signature


def _property_signature(prop: PropertyInfo) -> str:
	signature = ("readonly " if prop.is_readonly else "") + prop.name + ("?" if prop.is_optional else "")
	if prop.type:
		signature += f": {prop.type}"
	return signature


def _render_functions(functions: List[FunctionInfo]) -> List[str]:
	out = ["**Функции:**", ""]
	for fn in functions:
		out.append(_entry(_function_signature(fn), fn.description, fn.line))
	out.append("")
	return out


def _render_class(cls: ClassInfo) -> List[str]:
	signature = ("export " if cls.is_exported else "") + ("abstract " if cls.is_abstract else "") + f"class {cls.name}"
	if cls.extends:
		signature += f" extends {cls.extends}"
	if cls.implements:
		signature += f" implements {', '.join(cls.implements)}"
	if cls.design_pattern:
		signature += f" (архитектурный паттерн: {cls.design_pattern})"
	out = [_entry(signature, cls.description, cls.line)]
	for method in cls.methods:
		out.append(_entry(_function_signature(method, with_export=False), method.description, method.line, "  "))
	for prop in cls.properties:
		out.append(_entry(_property_signature(prop), prop.description, None, "  "))
	out.append("")
	return out


def _render_interface(iface: InterfaceInfo) -> List[str]:
	signature = ("export " if iface.is_exported else "") + f"interface {iface.name}"
	if iface.generic_params:
		signature += f"<{', '.join(iface.generic_params)}>"
	if iface.extends:
		signature += f" extends {', '.join(iface.extends)}"
	out = [_entry(signature, iface.description, iface.line)]
	for method in iface.methods:
		out.append(_entry(_function_signature(method, with_export=False), method.description, method.line, "  "))
	for prop in iface.properties:
		out.append(_entry(_property_signature(prop), prop.description, None, "  "))
	out.append("")
	return out


def _type_signature(info: TypeInfo) -> str:
	signature = ("export " if info.is_exported else "") + f"{info.kind} {info.name}"
	if info.kind == "enum" and info.members:
		signature += " { " + ", ".join(info.members) + " }"
	return signature


def _constant_signature(const: ConstantInfo) -> str:
	signature = ("export " if const.is_exported else "") + ("default " if const.is_default else "") + const.name
	if const.type:
		signature += f": {const.type}"
	if const.value:
		signature += f" = {const.value}"
	return signature


def render_file(f: FileStructure) -> List[str]:
	out = [f"#### 📄 {posixpath.basename(f.path)}", ""]
	out.append(f"- Назначение: {f.purpose}")
	if f.business_domain:
		out.append(f"- Домен: {f.business_domain}")
	if f.architectural_layer:
		out.append(f"- Слой: {f.architectural_layer}")
	if f.configuration.environment_variables:
		out.append(f"- Переменные окружения: {', '.join(f.configuration.environment_variables)}")
	out.append("")

	if f.functions:
		out.extend(_render_functions(f.functions))
	if f.classes:
		out.extend(["**Классы:**", ""])
		for cls in f.classes:
			out.extend(_render_class(cls))
	if f.interfaces:
		out.extend(["**Интерфейсы:**", ""])
		for iface in f.interfaces:
			out.extend(_render_interface(iface))
	if f.types:
		out.extend(["**Типы:**", ""])
		out.extend(_entry(_type_signature(t), t.description, t.line) for t in f.types)
		out.append("")
	if f.constants:
		out.extend(["**Константы:**", ""])
		out.extend(_entry(_constant_signature(c), c.description, c.line) for c in f.constants)
		out.append("")
	return out


def _group_by_directory(files: List[FileStructure]) -> Dict[str, List[FileStructure]]:
	groups: Dict[str, List[FileStructure]] = {}
	for f in files:
		groups.setdefault(posixpath.dirname(f.path), []).append(f)
	return groups


def render_map(files: List[FileStructure], generated_at: Optional[str] = None) -> str:
	"""Render the repository map for ``files`` in the order given."""
	stats = collect_stats(files)
	out = [
		"# Карта репозитория",
		"",
		"*Сгенерировано автоматически*",
		"",
		"> Поддерживаются TypeScript/JavaScript (.ts, .tsx, .js, .jsx) и Python (.py) файлы",
		"",
		"## 🏗️ Архитектурный обзор",
		"",
		"### 📊 Общая статистика",
		"",
		f"- Всего файлов: {stats.files}",
		f"- Общий размер: {_kb(stats.size)}",
	]
	for field, label in CATEGORIES:
		out.append(f"- {label}: {stats.totals[field]} (экспортировано: {stats.exported[field]})")

	out.extend(["", "### 🎯 Назначения файлов", ""])
	purposes: Dict[str, int] = {}
	for f in files:
		purpose = f.purpose or FilePurpose.GENERAL.value
		purposes[purpose] = purposes.get(purpose, 0) + 1
	for purpose, count in purposes.items():
		out.append(f"- {purpose}: {count} файлов")

	out.extend(["", "## 📁 Структура по директориям", ""])
	for directory, group in _group_by_directory(files).items():
		out.extend([f"### 📂 {directory or ROOT_LABEL}", ""])
		for f in group:
			out.extend(render_file(f))

	out.extend(["## 📊 Статистика", "", f"- Всего файлов: {stats.files}"])
	for field, label in CATEGORIES:
		out.append(f"- {label}: {stats.totals[field]} (экспортировано: {stats.exported[field]})")

	out.extend(["", "## 🔗 Основные экспорты", ""])
	for f in files:
		if not f.api:
			continue
		out.append(f"### {f.path}")
		out.extend(f"- `{name}`" for name in f.api)
		out.append("")

	out.append("---")
	if generated_at:
		out.append(f"*Карта сгенерирована: {generated_at}*")
	return "\n".join(out) + "\n"
