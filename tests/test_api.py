from fastapi.testclient import TestClient

from api import create_app


client = TestClient(create_app())


def test_health():
	assert client.get("/health").json() == {"status": "ok"}


def test_map_endpoint(tmp_path):
	(tmp_path / "tool.py").write_text("def run(path: str) -> None:\n    pass\n", encoding="utf-8")
	(tmp_path / "vendor").mkdir()
	(tmp_path / "vendor" / "lib.py").write_text("x = 1\n", encoding="utf-8")

	resp = client.post("/map", json={"root_path": str(tmp_path), "exclude": ["vendor/**"]})
	assert resp.status_code == 200
	data = resp.json()
	assert [f["path"] for f in data["files"]] == ["tool.py"]
	assert data["files"][0]["functions"][0]["name"] == "run"
	assert "- Всего файлов: 1" in data["report"]
	assert any("neira-app.json" in w for w in data["warnings"])


def test_map_rejects_missing_root(tmp_path):
	resp = client.post("/map", json={"root_path": str(tmp_path / "nope")})
	assert resp.status_code == 400
