import logging
from textwrap import dedent

from repomap.config import MapConfig
from repomap.fs_scan import analyze_file, detect_language, expand_braces, glob_match, matches_any, resolve_files, scan_repository
from repomap.pipeline import build_map


def _write(root, rel_path, text):
	path = root / rel_path
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def test_scan_finds_typescript_structure(tmp_path):
	_write(
		tmp_path,
		"src/index.ts",
		"export function testFunction() {\n  return 'test';\n}\n\nexport class TestClass {\n  method() {}\n}\n",
	)
	(structure,) = scan_repository(str(tmp_path))
	assert structure.path == "src/index.ts"
	assert structure.language == "typescript"
	assert [f.name for f in structure.functions] == ["testFunction"]
	assert [c.name for c in structure.classes] == ["TestClass"]


def test_excluded_directories_are_pruned(tmp_path):
	_write(tmp_path, "app.py", "x = 1\n")
	_write(tmp_path, "node_modules/lib/index.js", "function f() {}\n")
	_write(tmp_path, "web/node_modules/dep.js", "function g() {}\n")
	_write(tmp_path, "pkg/__pycache__/mod.py", "y = 2\n")
	assert resolve_files(str(tmp_path)) == ["app.py"]


def test_include_order_and_deduplication(tmp_path):
	for rel_path in ["b.py", "a.py", "src/z.ts", "src/c.ts"]:
		_write(tmp_path, rel_path, "")
	files = resolve_files(str(tmp_path), include=["**/*.ts", "**/*.py", "*.py"], exclude=[])
	assert files == ["src/c.ts", "src/z.ts", "a.py", "b.py"]


def test_missing_root_yields_nothing(tmp_path, caplog):
	with caplog.at_level(logging.WARNING, logger="repomap"):
		assert resolve_files(str(tmp_path / "missing")) == []
	assert "not a directory" in caplog.text


def test_unreadable_file_is_skipped_with_warning(tmp_path, caplog):
	(tmp_path / "bad.py").write_bytes(b"x = '\xff\xfe'\n")
	_write(tmp_path, "good.py", "def ok():\n    pass\n")
	with caplog.at_level(logging.WARNING, logger="repomap"):
		files = scan_repository(str(tmp_path))
	assert [f.path for f in files] == ["good.py"]
	assert "bad.py" in caplog.text


def test_unsupported_extension(tmp_path, caplog):
	_write(tmp_path, "notes.md", "# hi\n")
	with caplog.at_level(logging.WARNING, logger="repomap"):
		assert analyze_file(str(tmp_path), "notes.md") is None
	assert "unsupported" in caplog.text


def test_language_and_patterns():
	assert detect_language("a/b/View.TSX") == "typescript"
	assert detect_language("tool.mjs") == "javascript"
	assert detect_language("README") == "unknown"

	assert matches_any("main.py", ["**/*.py"])
	assert matches_any("a/b/main.py", ["**/*.py"])
	assert not matches_any("main.pyc", ["**/*.py"])


def test_star_stays_inside_one_directory(tmp_path):
	for rel_path in ["src/a.ts", "src/deep/b.ts", "top.ts"]:
		_write(tmp_path, rel_path, "")
	assert resolve_files(str(tmp_path), include=["src/*.ts"], exclude=[]) == ["src/a.ts"]
	assert resolve_files(str(tmp_path), include=["*.ts"], exclude=[]) == ["top.ts"]
	assert resolve_files(str(tmp_path), include=["src/**/*.ts"], exclude=[]) == ["src/a.ts", "src/deep/b.ts"]


def test_dot_directories_skipped_unless_named(tmp_path):
	_write(tmp_path, "app.py", "")
	_write(tmp_path, ".venv/lib/site-packages/pkg/mod.py", "")
	_write(tmp_path, ".github/scripts/x.js", "")
	_write(tmp_path, ".eslintrc.js", "")
	assert resolve_files(str(tmp_path)) == ["app.py"]
	assert resolve_files(str(tmp_path), include=[".github/**/*.js"], exclude=[]) == [".github/scripts/x.js"]


def test_glob_segments():
	assert glob_match("src/a.ts", "src/*.ts")
	assert not glob_match("src/deep/a.ts", "src/*.ts")
	assert glob_match("a/b/c/node_modules/x/y.js", "**/node_modules/**")
	assert not glob_match(".hidden/a.py", "**/*.py")
	assert glob_match(".hidden/a.py", "**/*.py", dot=True)
	assert glob_match("src/View.tsx", "src/*.{ts,tsx}")
	assert expand_braces("*.{ts,tsx}") == ["*.ts", "*.tsx"]


def test_report_lists_scanned_names(tmp_path):
	_write(
		tmp_path,
		"src/index.ts",
		dedent(
			"""\
			export function testFunction(param: string): string {
				return param;
			}

			export class TestClass {
				constructor(private name: string) {}
			}
			"""
		),
	)
	result = build_map(MapConfig(root=str(tmp_path)), generated_at="2024-01-01T00:00:00")
	assert "- Всего файлов: 1" in result.report
	assert "testFunction(param: string): string" in result.report
	assert "class TestClass" in result.report
	assert "constructor(name: string)" in result.report
	(structure,) = result.files
	assert structure.classes[0].methods[0].params[0].name == "name"


def test_empty_directory_maps_to_zero_files(tmp_path):
	_write(tmp_path, "README.md", "# nothing to scan\n")
	result = build_map(MapConfig(root=str(tmp_path)))
	assert result.files == []
	assert "- Всего файлов: 0" in result.report
