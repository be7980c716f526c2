"""Tests for the ``clean-arch check`` command."""

import json

import pytest
from typer.testing import CliRunner

from clean_arch import __version__
from clean_arch.cli import app

runner = CliRunner()

SERVICE = '''from app.api.views import Controller


class Service:
    def handle(self, controller: Controller) -> None:
        controller.render()
'''

VIEWS = '''class Controller:
    def render(self) -> str:
        return "ok"
'''

CONFIG = '''
[[modules]]
name = "Core"
roots = ["app/core"]

[modules.restrictions]
forbidden_dependencies = ["Api"]

[[modules]]
name = "Api"
roots = ["app/api"]
'''


@pytest.fixture
def project(tmp_path, monkeypatch):
    for relative, content in (("app/core/service.py", SERVICE), ("app/api/views.py", VIEWS)):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_config(project, content=CONFIG, name="clean-arch.toml"):
    path = project / name
    path.write_text(content, encoding="utf-8")
    return path


class TestCheckCommand:
    def test_violations_exit_one(self, project):
        _write_config(project)
        result = runner.invoke(app, ["check", str(project), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["summary"]["errors"] == 1
        assert data["violations"][0]["type"] == "illegal_dependency"

    def test_no_fail(self, project):
        _write_config(project)
        result = runner.invoke(app, ["check", str(project), "--format", "json", "--no-fail"])
        assert result.exit_code == 0

    def test_explicit_config(self, project):
        config = _write_config(project, name="architecture.toml")
        result = runner.invoke(app, ["check", str(project), "-c", str(config), "-f", "github"])
        assert result.exit_code == 1
        assert "::error title=illegal dependency::" in result.stdout

    def test_clean_project_exits_zero(self, project):
        _write_config(project, CONFIG.replace('forbidden_dependencies = ["Api"]', ""))
        result = runner.invoke(app, ["check", str(project)])
        assert result.exit_code == 0
        assert "No architecture violations found" in result.stdout

    def test_invalid_config_exits_two(self, project):
        _write_config(project, "modules = [\n")
        result = runner.invoke(app, ["check", str(project)])
        assert result.exit_code == 2
        assert "Error" in result.output

    def test_unknown_format_rejected(self, project):
        result = runner.invoke(app, ["check", str(project), "--format", "xml"])
        assert result.exit_code != 0

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
