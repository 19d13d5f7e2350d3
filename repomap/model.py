from __future__ import annotations

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel


FunctionKind = Literal["function", "method", "arrow", "async", "generator"]
Visibility = Literal["public", "private", "protected"]
ImportKind = Literal["internal", "external", "builtin"]
ExportKind = Literal["function", "class", "interface", "type", "constant", "default"]
TypeKind = Literal["type", "enum", "namespace"]


class ParameterInfo(BaseModel):
	name: str
	type: Optional[str] = None
	is_optional: bool = False
	default_value: Optional[str] = None
	is_rest: bool = False


class ErrorHandlingInfo(BaseModel):
	try_catch_blocks: int = 0
	error_types: List[str] = []
	error_messages: List[str] = []
	fallback_strategies: List[str] = []
	logging: List[str] = []


class DataFlowInfo(BaseModel):
	inputs: List[str] = []
	outputs: List[str] = []
	transformations: List[str] = []
	side_effects: List[str] = []
	data_structures: List[str] = []


class PerformanceInfo(BaseModel):
	time_complexity: Optional[str] = None
	bottlenecks: List[str] = []
	optimizations: List[str] = []


class FunctionInfo(BaseModel):
	name: str
	kind: FunctionKind = "function"
	params: List[ParameterInfo] = []
	return_type: Optional[str] = None
	description: Optional[str] = None
	full_doc: Optional[str] = None
	location: str
	line: int
	is_exported: bool = False
	is_default: bool = False
	visibility: Optional[Visibility] = None
	decorators: List[str] = []
	is_static: bool = False
	complexity: Optional[int] = None
	lines_of_code: Optional[int] = None
	dependencies: List[str] = []
	business_logic: Optional[str] = None
	error_handling: Optional[ErrorHandlingInfo] = None
	data_flow: Optional[DataFlowInfo] = None
	performance: Optional[PerformanceInfo] = None


class PropertyInfo(BaseModel):
	name: str
	type: Optional[str] = None
	description: Optional[str] = None
	is_exported: bool = False
	is_readonly: bool = False
	is_optional: bool = False
	is_static: bool = False
	default_value: Optional[str] = None
	visibility: Optional[Visibility] = None


class ClassInfo(BaseModel):
	name: str
	description: Optional[str] = None
	full_doc: Optional[str] = None
	location: str
	line: int
	methods: List[FunctionInfo] = []
	properties: List[PropertyInfo] = []
	is_exported: bool = False
	is_default: bool = False
	extends: Optional[str] = None
	implements: List[str] = []
	decorators: List[str] = []
	is_abstract: bool = False
	design_pattern: Optional[str] = None
	complexity: Optional[int] = None
	lines_of_code: Optional[int] = None


class InterfaceInfo(BaseModel):
	name: str
	description: Optional[str] = None
	full_doc: Optional[str] = None
	location: str
	line: int
	properties: List[PropertyInfo] = []
	methods: List[FunctionInfo] = []
	is_exported: bool = False
	extends: List[str] = []
	generic_params: List[str] = []


class TypeInfo(BaseModel):
	name: str
	kind: TypeKind = "type"
	description: Optional[str] = None
	location: str
	line: int
	is_exported: bool = False
	value: Optional[str] = None
	members: List[str] = []


class ConstantInfo(BaseModel):
	name: str
	type: Optional[str] = None
	description: Optional[str] = None
	location: str
	line: int
	is_exported: bool = False
	is_default: bool = False
	value: Optional[str] = None


class ImportInfo(BaseModel):
	module: str
	names: List[str] = []
	is_default: bool = False
	is_namespace: bool = False
	line: int
	kind: Optional[ImportKind] = None


class ExportInfo(BaseModel):
	name: str
	kind: ExportKind
	is_default: bool = False
	line: int


class ConfigInfo(BaseModel):
	environment_variables: List[str] = []
	secrets: List[str] = []
	validation_rules: List[str] = []


class FileStructure(BaseModel):
	path: str
	language: str
	functions: List[FunctionInfo] = []
	classes: List[ClassInfo] = []
	interfaces: List[InterfaceInfo] = []
	types: List[TypeInfo] = []
	constants: List[ConstantInfo] = []
	imports: List[ImportInfo] = []
	exports: List[ExportInfo] = []
	dependencies: List[str] = []
	size: int = 0
	line_count: int = 0
	complexity: int = 1
	purpose: str
	business_domain: Optional[str] = None
	architectural_layer: Optional[str] = None
	configuration: ConfigInfo = ConfigInfo()
	api: List[str] = []


class WriteResult(BaseModel):
	path: str
	written: bool
	already_exists: bool = False
	size_bytes: int = 0
	line_count: int = 0


class MapResult(BaseModel):
	files: List[FileStructure]
	report: str
	warnings: List[str] = []


class ScanStats(BaseModel):
	files: int = 0
	size: int = 0
	totals: Dict[str, int] = {}
	exported: Dict[str, int] = {}
