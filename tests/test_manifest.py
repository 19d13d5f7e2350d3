import json

import pytest

from repomap.errors import ManifestError
from repomap.manifest import MANIFEST_FILENAME, missing_map_fields, read_manifest, validate_manifest
from repomap.pipeline import manifest_warnings


def _manifest_dir(tmp_path, data):
	(tmp_path / MANIFEST_FILENAME).write_text(json.dumps(data), encoding="utf-8")
	return str(tmp_path)


def test_missing_manifest(tmp_path):
	assert read_manifest(str(tmp_path)) is None
	assert missing_map_fields(None) == ["name", "version", "description"]
	assert manifest_warnings(str(tmp_path)) == [f"{MANIFEST_FILENAME} not found; the map will not describe the application"]


def test_valid_manifest(tmp_path):
	(tmp_path / "index.js").write_text("", encoding="utf-8")
	(tmp_path / "icon.png").write_bytes(b"")
	root = _manifest_dir(
		tmp_path,
		{
			"name": "notes",
			"version": "1.2.0",
			"description": "Keeps short notes in the chat",
			"author": "someone",
			"main": "index.js",
			"icon": "icon.png",
			"permissions": ["chat", "storage"],
			"category": "productivity",
			"extra": {"kept": True},
		},
	)
	manifest = read_manifest(root)
	assert manifest.model_extra == {"extra": {"kept": True}}
	assert validate_manifest(manifest, root) == ([], [])
	assert manifest_warnings(root) == []


def test_manifest_problems(tmp_path):
	root = _manifest_dir(
		tmp_path,
		{
			"name": "ab",
			"version": "1.0",
			"description": "short",
			"main": "missing.js",
			"permissions": ["chat", "camera"],
			"category": "games",
			"tags": [str(i) for i in range(11)],
		},
	)
	errors, warnings = validate_manifest(read_manifest(root), root)
	assert 'Field "author" is required' in errors
	assert 'Field "name" must be at least 3 characters long' in errors
	assert any("X.Y.Z" in e for e in errors)
	assert 'Main file "missing.js" not found' in errors
	assert "Invalid permissions: camera" in errors
	assert any("short" in w for w in warnings)
	assert "An application icon is recommended" in warnings
	assert any('Unknown category "games"' in w for w in warnings)
	assert any("Too many tags" in w for w in warnings)


def test_map_fields_reported(tmp_path):
	root = _manifest_dir(tmp_path, {"name": "notes"})
	assert manifest_warnings(root) == [f"{MANIFEST_FILENAME} is missing: version, description"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"tags": "one"}'])
def test_unreadable_manifest(tmp_path, content):
	(tmp_path / MANIFEST_FILENAME).write_text(content, encoding="utf-8")
	with pytest.raises(ManifestError):
		read_manifest(str(tmp_path))
	(warning,) = manifest_warnings(str(tmp_path))
	assert MANIFEST_FILENAME in warning
