"""
Tests for the pileshots command line interface
"""

import json
from unittest.mock import patch

import pytest
from playwright.async_api import Error as PlaywrightError

from pileshots import cli
from pileshots.data.projects import PROJECTS
from pileshots.data.themes import Theme
from pileshots.services.run_summary import RunSummary
from pileshots.services.screenshot_capture import CaptureResult


@pytest.fixture
def workdir(tmp_path, monkeypatch, clean_env):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _summary(themes=(Theme.LIGHT, Theme.DARK)):
    results = [
        CaptureResult(p.name, theme, True, output_filename=p.output_filename(theme))
        for p in PROJECTS
        for theme in themes
    ]
    return RunSummary.from_results(results, themes, len(results))


class TestGenerateCommand:
    def test_generate_uses_configured_output_dir(self, workdir, capsys):
        with patch.object(cli, "run_generation", return_value=_summary()) as run:
            assert cli.main(["generate", "--json"]) == 0

        config, projects = run.call_args[0]
        assert config.output_dir == workdir / "public" / "assets"
        assert projects == PROJECTS
        assert json.loads(capsys.readouterr().out)["successful"] == 8

    def test_theme_and_project_filters(self, workdir):
        with patch.object(cli, "run_generation", return_value=_summary((Theme.DARK,))) as run:
            assert cli.main(["generate", "--theme", "dark", "--project", "hyprl"]) == 0

        config, projects = run.call_args[0]
        assert config.enabled_themes == (Theme.DARK,)
        assert [p.name for p in projects] == ["HyprL"]

    def test_report_written(self, workdir):
        (workdir / "shots").mkdir()
        with patch.object(cli, "run_generation", return_value=_summary()):
            assert cli.main(["--output-dir", str(workdir / "shots"), "generate", "--report"]) == 0
        assert list((workdir / "shots").glob("capture_report_*.md"))

    def test_launch_failure_exit_code(self, workdir):
        with patch.object(cli, "run_generation", side_effect=PlaywrightError("no browser")):
            assert cli.main(["generate"]) == 1

    def test_unknown_project(self, workdir):
        with pytest.raises(SystemExit) as exc:
            cli.main(["generate", "--project", "Nope"])
        assert exc.value.code == 2


class TestVerifyCommand:
    def test_missing_files_exit_code(self, workdir):
        assert cli.main(["verify"]) == 1

    def test_all_present(self, workdir):
        assets = workdir / "public" / "assets"
        assets.mkdir(parents=True)
        for project in PROJECTS:
            for theme in Theme:
                (assets / project.output_filename(theme)).write_bytes(b"png")
        assert cli.main(["verify"]) == 0


class TestPrepareCommand:
    def test_prepare_never_fails(self, workdir):
        with patch.object(cli, "prepare_screenshots") as prepare:
            prepare.return_value.verification.success = False
            prepare.return_value.verification.missing = [object()]
            assert cli.main(["prepare"]) == 0
        prepare.assert_called_once()


class TestInvalidConfig:
    def test_bad_environment_value(self, workdir, monkeypatch):
        monkeypatch.setenv("SCREENSHOT_MAX_RETRIES", "0")
        with pytest.raises(SystemExit) as exc:
            cli.main(["verify"])
        assert exc.value.code == 2
