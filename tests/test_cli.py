import json

import cli
from repomap.errors import ToolNotFoundError
from repomap.manifest import MANIFEST_FILENAME


def _project(tmp_path):
	root = tmp_path / "project"
	(root / "src").mkdir(parents=True)
	(root / "src" / "index.ts").write_text("export function hello() {\n  return 1;\n}\n", encoding="utf-8")
	return root


def test_map_writes_default_output(tmp_path, monkeypatch):
	root = _project(tmp_path)
	monkeypatch.chdir(tmp_path)
	assert cli.main(["map", str(root), "-q"]) == 0
	text = (tmp_path / "REPOSITORY_MAP.txt").read_text(encoding="utf-8")
	assert "- Всего файлов: 1" in text
	assert "#### 📄 index.ts" in text


def test_map_keeps_existing_output_without_force(tmp_path):
	root = _project(tmp_path)
	out = tmp_path / "MAP.txt"
	out.write_text("keep me", encoding="utf-8")
	assert cli.main(["map", str(root), "-o", str(out), "-q"]) == 0
	assert out.read_text(encoding="utf-8") == "keep me"

	assert cli.main(["map", str(root), "-o", str(out), "--force", "-q"]) == 0
	assert out.read_text(encoding="utf-8").startswith("# Карта репозитория")


def test_validate_command(tmp_path):
	assert cli.main(["validate", str(tmp_path), "-q"]) == 1

	(tmp_path / "main.js").write_text("", encoding="utf-8")
	manifest = {"name": "notes", "version": "1.0.0", "description": "Keeps short notes", "author": "me", "main": "main.js"}
	(tmp_path / MANIFEST_FILENAME).write_text(json.dumps(manifest), encoding="utf-8")
	assert cli.main(["validate", str(tmp_path), "-q"]) == 0

	manifest["version"] = "one"
	(tmp_path / MANIFEST_FILENAME).write_text(json.dumps(manifest), encoding="utf-8")
	assert cli.main(["validate", str(tmp_path), "-q"]) == 1


def test_export_without_tool_fails(tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)
	monkeypatch.setattr(cli, "export_project", _raise_missing_tool)
	assert cli.main(["export", "-q"]) == 1


def _raise_missing_tool(*args, **kwargs):
	raise ToolNotFoundError("code2prompt is not installed")
