"""Tests for the appnav CLI."""

import json
import subprocess
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import yaml
from typer.testing import CliRunner

from appnav.cli import app
from appnav.cli.commands.run import apply_overrides
from appnav.core.config import NavigatorConfig, get_settings
from appnav.crawler.models import AppMap, Summary

runner = CliRunner()


def _app_map() -> AppMap:
    return AppMap(
        generated_at=1700000000000,
        framework="nextjs",
        base_url="http://localhost:3000",
        summary=Summary(
            total_routes=3,
            successful_captures=2,
            total_elements=7,
            average_load_time=420,
            total_errors=0,
            performance_score=100,
        ),
    )


def _package(root: Path, **content) -> None:
    (root / "package.json").write_text(json.dumps(content))


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "appnav version 0.1.0" in result.output


class TestDetect:
    def test_uppercase_log_level_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("APPNAV_LOG_LEVEL", "INFO")
        get_settings.cache_clear()
        try:
            result = runner.invoke(app, ["detect", "-C", str(tmp_path)])
        finally:
            get_settings.cache_clear()

        assert result.exit_code == 0, result.output
        assert "generic" in result.output

    def test_detects_nextjs(self, tmp_path: Path):
        _package(tmp_path, dependencies={"next": "14"}, scripts={"dev": "next dev -p 4000"})

        result = runner.invoke(app, ["detect", "-C", str(tmp_path)])

        assert result.exit_code == 0
        assert "nextjs" in result.output
        assert "4000" in result.output
        assert "file_based" in result.output

    def test_empty_project(self, tmp_path: Path):
        result = runner.invoke(app, ["detect", "-C", str(tmp_path)])
        assert result.exit_code == 0
        assert "generic" in result.output


class TestInit:
    def test_writes_config(self, tmp_path: Path):
        _package(tmp_path, dependencies={"@sveltejs/kit": "2"})

        result = runner.invoke(app, ["init", "-C", str(tmp_path), "--exclude", "^/admin"])

        assert result.exit_code == 0
        data = yaml.safe_load((tmp_path / "appnav.config.yml").read_text())
        assert data["framework"] == "sveltekit"
        assert data["baseUrl"] == "http://localhost:5173"
        assert data["excludeRoutes"] == ["^/admin"]
        scripts = json.loads((tmp_path / "package.json").read_text())["scripts"]
        assert scripts["appnav:map"] == "appnav run"

    def test_explicit_framework_and_port(self, tmp_path: Path):
        result = runner.invoke(
            app, ["init", "-C", str(tmp_path), "--framework", "nextjs", "--port", "3001"]
        )

        assert result.exit_code == 0
        data = yaml.safe_load((tmp_path / "appnav.config.yml").read_text())
        assert data["framework"] == "nextjs"
        assert data["baseUrl"] == "http://localhost:3001"

    def test_refuses_to_overwrite(self, tmp_path: Path):
        runner.invoke(app, ["init", "-C", str(tmp_path), "--port", "3001"])

        result = runner.invoke(app, ["init", "-C", str(tmp_path), "--port", "4000"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        data = yaml.safe_load((tmp_path / "appnav.config.yml").read_text())
        assert data["baseUrl"] == "http://localhost:3001"

    def test_force_overwrites(self, tmp_path: Path):
        runner.invoke(app, ["init", "-C", str(tmp_path), "--port", "3001"])

        result = runner.invoke(app, ["init", "-C", str(tmp_path), "--port", "4000", "--force"])

        assert result.exit_code == 0
        data = yaml.safe_load((tmp_path / "appnav.config.yml").read_text())
        assert data["baseUrl"] == "http://localhost:4000"

    def test_invalid_pattern(self, tmp_path: Path):
        result = runner.invoke(app, ["init", "-C", str(tmp_path), "--exclude", "(["])

        assert result.exit_code == 1
        assert not (tmp_path / "appnav.config.yml").exists()


class TestRun:
    def test_runs_with_config(self, tmp_path: Path):
        (tmp_path / "appnav.config.yml").write_text(
            "framework: nextjs\nbaseUrl: http://localhost:3000\nparallel: false\n"
        )
        with patch(
            "appnav.cli.commands.run.generate_app_map",
            new=AsyncMock(return_value=_app_map()),
        ) as generate:
            result = runner.invoke(
                app, ["run", "-C", str(tmp_path), "--port", "3005", "--parallel"]
            )

        assert result.exit_code == 0
        assert "2/3" in result.output
        config = generate.call_args.args[0]
        assert config.framework == "nextjs"
        assert config.base_url == "http://localhost:3005"
        assert config.parallel is True

    def test_defaults_without_config(self, tmp_path: Path):
        _package(tmp_path, dependencies={"vue": "3"})
        with patch(
            "appnav.cli.commands.run.generate_app_map",
            new=AsyncMock(return_value=_app_map()),
        ) as generate:
            result = runner.invoke(app, ["run", "-C", str(tmp_path)])

        assert result.exit_code == 0
        assert "No configuration file found" in result.output
        assert generate.call_args.args[0].framework == "vue"

    def test_missing_explicit_config(self, tmp_path: Path):
        result = runner.invoke(app, ["run", "-C", str(tmp_path), "--config", "missing.yml"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_config(self, tmp_path: Path):
        (tmp_path / "appnav.config.yml").write_text("retries: -1\n")
        result = runner.invoke(app, ["run", "-C", str(tmp_path)])
        assert result.exit_code == 1

    def test_navigation_failure(self, tmp_path: Path):
        with patch(
            "appnav.cli.commands.run.generate_app_map",
            new=AsyncMock(side_effect=RuntimeError("browser crashed")),
        ):
            result = runner.invoke(app, ["run", "-C", str(tmp_path)])

        assert result.exit_code == 1
        assert "browser crashed" in result.output


class TestApplyOverrides:
    def test_only_given_values_change(self):
        config = NavigatorConfig(output_dir="out", headless=False)
        updated = apply_overrides(config, output="elsewhere")
        assert updated.output_dir == "elsewhere"
        assert updated.headless is False
        assert config.output_dir == "out"


class TestInstall:
    def test_installs_chromium(self):
        with patch("appnav.cli.commands.install.subprocess.run") as run:
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 0
        run.assert_called_once_with(
            [sys.executable, "-m", "playwright", "install", "chromium"], check=True
        )

    def test_install_failure(self):
        with patch(
            "appnav.cli.commands.install.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "playwright"),
        ):
            result = runner.invoke(app, ["install"])

        assert result.exit_code == 1
