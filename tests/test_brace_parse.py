from pathlib import Path
from textwrap import dedent

import pytest

from repomap.brace_parse import parse_brace_file


FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="module")
def service():
	text = (FIXTURES / "user_service.ts").read_text(encoding="utf-8")
	return parse_brace_file("src/user_service.ts", text)


def test_class_with_single_method():
	code = dedent(
		"""\
		class Foo extends Bar {
			method(): void {
				return;
			}
		}
		"""
	)
	s = parse_brace_file("foo.ts", code)
	assert len(s.classes) == 1
	cls = s.classes[0]
	assert cls.name == "Foo"
	assert cls.extends == "Bar"
	assert [m.name for m in cls.methods] == ["method"]
	assert cls.methods[0].kind == "method"
	assert s.functions == []


def test_top_level_constant_line_and_export():
	code = "// limits\n\nconst MAX = 5;\nexport const LIMIT = 10;\n"
	s = parse_brace_file("limits.ts", code)
	by_name = {c.name: c for c in s.constants}
	assert by_name["MAX"].value == "5"
	assert by_name["MAX"].line == 3
	assert not by_name["MAX"].is_exported
	assert by_name["LIMIT"].is_exported
	assert by_name["LIMIT"].line == 4


def test_imports(service):
	assert [i.module for i in service.imports] == ["@angular/core", "path", "axios", "./types"]
	assert [i.kind for i in service.imports] == ["external", "builtin", "external", "internal"]
	assert service.imports[1].is_namespace
	assert service.imports[2].is_default
	assert service.imports[2].names == ["axios", "AxiosInstance"]
	assert service.imports[3].names == ["User", "UserRole"]
	assert service.imports[3].line == 4
	assert service.dependencies == ["@angular/core", "path", "axios", "./types"]


def test_constants_and_types(service):
	assert [c.name for c in service.constants] == ["MAX_RETRIES", "API_URL"]
	max_retries, api_url = service.constants
	assert max_retries.is_exported and max_retries.value == "3" and max_retries.line == 9
	assert api_url.type == "string" and not api_url.is_exported

	user_id, status = service.types
	assert (user_id.name, user_id.kind, user_id.value) == ("UserId", "type", "string")
	assert (status.name, status.kind) == ("Status", "enum")
	assert status.members == ["Active", "Disabled"]


def test_interface(service):
	(iface,) = service.interfaces
	assert iface.name == "UserStore"
	assert iface.description == "Describes what the service can do."
	assert iface.extends == ["Iterable"]
	assert iface.generic_params == ["T"]
	assert [p.name for p in iface.properties] == ["id", "name"]
	assert iface.properties[0].is_readonly
	assert iface.properties[1].is_optional
	assert [m.name for m in iface.methods] == ["find"]
	assert iface.methods[0].return_type == "Promise<T | undefined>"


def test_class_members(service):
	(cls,) = service.classes
	assert cls.name == "UserService"
	assert cls.line == 34
	assert cls.lines_of_code == 25
	assert cls.implements == ["UserStore"]
	assert cls.decorators == ["Injectable()"]
	assert cls.description == "Loads and caches users."
	assert cls.design_pattern == "Singleton"
	assert cls.is_exported and cls.is_default

	assert [p.name for p in cls.properties] == ["instance", "id", "cache"]
	instance, ident, _ = cls.properties
	assert instance.is_static and instance.visibility == "private"
	assert ident.is_readonly and ident.default_value == "'users'"

	assert [m.name for m in cls.methods] == ["constructor", "find", "getInstance"]
	find = cls.methods[1]
	assert find.kind == "async"
	assert find.line == 42
	assert find.description == "Find one user by id."
	assert find.error_handling.try_catch_blocks == 2
	assert "err" in find.error_handling.error_types
	assert "console." in find.error_handling.logging
	assert cls.methods[2].is_static


def test_functions_and_exports(service):
	assert [f.name for f in service.functions] == ["formatUser", "isAdmin", "joinPath"]
	assert [f.kind for f in service.functions] == ["function", "arrow", "function"]
	format_user, is_admin, join_path = service.functions
	assert format_user.return_type == "string"
	assert format_user.params[1].default_value == "'guest'"
	assert is_admin.return_type == "boolean"
	assert join_path.params[0].is_rest
	# exported through `export { joinPath }`
	assert join_path.is_exported

	exports = [(e.name, e.kind) for e in service.exports]
	assert ("joinPath", "function") in exports
	assert ("UserService", "default") in exports
	assert ("Status", "type") in exports
	assert service.api == [
		"formatUser", "isAdmin", "joinPath", "UserService", "UserStore", "UserId", "Status", "MAX_RETRIES",
	]
	assert service.configuration.environment_variables == ["API_URL"]
	assert service.purpose == "Основной модуль"


def test_nested_blocks_stay_inside_their_class():
	code = dedent(
		"""\
		export class Box {
			open(): void {
				const inner = { a: 1 };
				if (inner) {
					helper(inner);
				}
			}
			size = 3;
		}

		function helper(x: unknown) {
			return x;
		}
		"""
	)
	s = parse_brace_file("box.ts", code)
	(box,) = s.classes
	assert [m.name for m in box.methods] == ["open"]
	assert [(p.name, p.default_value) for p in box.properties] == [("size", "3")]
	assert [f.name for f in s.functions] == ["helper"]
	assert s.constants == []


def test_brace_on_next_line():
	code = "class A\n{\n  run() {}\n}\n"
	(cls,) = parse_brace_file("a.js", code, "javascript").classes
	assert [m.name for m in cls.methods] == ["run"]


def test_one_line_bodies():
	code = "export enum Color { Red, Green }\ninterface Point { x: number; y?: string }\n"
	s = parse_brace_file("shapes.ts", code)
	assert s.types[0].members == ["Red", "Green"]
	assert [p.name for p in s.interfaces[0].properties] == ["x", "y"]
	assert s.interfaces[0].properties[1].is_optional


def test_multi_line_signature():
	code = dedent(
		"""\
		export function build(
			name: string,
			size = 2,
		): Widget {
			return make(name, size);
		}
		"""
	)
	(fn,) = parse_brace_file("build.ts", code).functions
	assert fn.line == 1
	assert [p.name for p in fn.params] == ["name", "size"]
	assert fn.params[1].is_optional
	assert fn.return_type == "Widget"
	assert fn.lines_of_code == 6


def test_malformed_input_is_skipped():
	code = "class {{{\n))) function (\nexport {\n}}}}\nconst = ;\n"
	s = parse_brace_file("broken.ts", code)
	assert s.classes == []
	assert s.functions == []
	assert s.line_count == 6


@pytest.mark.parametrize(
	"heading, extends, implements",
	[
		("class Foo extends Bar {", "Bar", []),
		("export class Svc implements Store {", None, ["Store"]),
		("export class Repo<T> extends Base<T> implements Reader<T>, Writer {", "Base", ["Reader", "Writer"]),
		("class Cache extends Map<string, Array<number>> {", "Map", []),
	],
)
def test_class_headings_with_heritage(heading, extends, implements):
	code = heading + "\n  method(): void {\n    return;\n  }\n}\n"
	(cls,) = parse_brace_file("heritage.ts", code).classes
	assert cls.extends == extends
	assert cls.implements == implements
	assert [m.name for m in cls.methods] == ["method"]


def test_anonymous_default_class():
	s = parse_brace_file("page.ts", "export default class extends Base {\n  render() {}\n}\n")
	(cls,) = s.classes
	assert cls.name == "default"
	assert cls.extends == "Base"
	assert cls.is_default
	assert [m.name for m in cls.methods] == ["render"]
	assert [(e.name, e.kind) for e in s.exports] == [("default", "class")]


def test_interface_extends_without_generics():
	(iface,) = parse_brace_file("shape.ts", "interface Square extends Shape, Sized {\n  side: number;\n}\n").interfaces
	assert iface.extends == ["Shape", "Sized"]
	assert [p.name for p in iface.properties] == ["side"]


def test_regex_literal_braces_do_not_shift_depth():
	code = "const re = /[{]/;\nconst close = /}+$/g;\nexport function after() {}\n"
	s = parse_brace_file("re.ts", code)
	assert [f.name for f in s.functions] == ["after"]
	assert s.functions[0].is_exported


def test_multi_line_template_literal():
	code = dedent(
		"""\
		const css = `
		.a {
		  color: red;
		`;

		class K {
		  run() {}
		}

		function after() {
		  return `${css} }`;
		}
		"""
	)
	s = parse_brace_file("styles.ts", code)
	assert [c.name for c in s.classes] == ["K"]
	assert [m.name for m in s.classes[0].methods] == ["run"]
	assert [f.name for f in s.functions] == ["after"]
	assert s.functions[0].lines_of_code == 3


def test_export_resets_lost_depth():
	code = "function broken() {\n  if (x) {\n    go();\n}\n\nexport const READY = true;\nexport function next() {}\n"
	s = parse_brace_file("broken.ts", code)
	assert [c.name for c in s.constants] == ["READY"]
	assert [f.name for f in s.functions] == ["broken", "next"]
