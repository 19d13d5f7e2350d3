import subprocess
from datetime import datetime

import pytest

from repomap import runner
from repomap.errors import RepoMapError, ToolNotFoundError


class FakeRun:
	"""Stands in for subprocess.run and records each call."""

	def __init__(self, returncode=0, writes_output=True):
		self.returncode = returncode
		self.writes_output = writes_output
		self.calls = []

	def __call__(self, cmd, cwd=None, capture_output=False, text=False):
		self.calls.append((cmd, cwd))
		if "-O" in cmd and self.writes_output and self.returncode == 0:
			with open(cmd[cmd.index("-O") + 1], "w", encoding="utf-8") as fh:
				fh.write("exported")
		return subprocess.CompletedProcess(cmd, self.returncode, stdout="code2prompt 2.0.0\n", stderr="boom")


def test_missing_tool_maps_to_127(monkeypatch):
	def raise_missing(*args, **kwargs):
		raise FileNotFoundError("code2prompt")

	monkeypatch.setattr(runner.subprocess, "run", raise_missing)
	result = runner.run_tool(["--version"])
	assert not result.ok
	assert result.returncode == 127
	assert not runner.tool_available()


def test_export_args_include_ignore_file(tmp_path):
	(tmp_path / ".exportignore").write_text("# generated\n*.snap\n\nfixtures\n", encoding="utf-8")
	extra = runner.read_export_ignore(str(tmp_path))
	assert extra == ["*.snap", "fixtures"]
	args = runner.build_export_args(".", "out.md", extra)
	assert args[:4] == [".", "--no-clipboard", "-O", "out.md"]
	assert args[-4:] == ["-e", "*.snap", "-e", "fixtures"]
	assert args.count("-e") == len(runner.BASIC_EXCLUDES) + 2


def test_export_requires_tool(monkeypatch, tmp_path):
	monkeypatch.setattr(runner.subprocess, "run", FakeRun(returncode=1))
	with pytest.raises(ToolNotFoundError):
		runner.export_project(str(tmp_path))


def test_export_writes_versioned_file(monkeypatch, tmp_path):
	fake = FakeRun()
	monkeypatch.setattr(runner.subprocess, "run", fake)
	project = tmp_path / "shop"
	project.mkdir()
	now = datetime(2024, 3, 5, 9, 7)

	result = runner.export_project(str(project), now=now)
	expected = project / ".neira" / "export_code" / "2024-03-05" / "v0907" / "v0907-2024-03-05-shop.md"
	assert result.written
	assert result.path == str(expected)
	assert expected.read_text(encoding="utf-8") == "exported"
	cmd, cwd = fake.calls[-1]
	assert cmd[:2] == ["code2prompt", "."]
	assert cwd == str(project)

	again = runner.export_project(str(project), now=now)
	assert again.already_exists and not again.written
	forced = runner.export_project(str(project), now=now, force=True)
	assert forced.written


def test_export_failure_raises(monkeypatch, tmp_path):
	calls = iter([FakeRun(), FakeRun(returncode=2)])

	def run(cmd, **kwargs):
		return next(calls)(cmd, **kwargs)

	monkeypatch.setattr(runner.subprocess, "run", run)
	with pytest.raises(RepoMapError) as exc_info:
		runner.export_project(str(tmp_path), output="dump.md")
	assert exc_info.value.details["returncode"] == "2"
