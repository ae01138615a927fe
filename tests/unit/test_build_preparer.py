"""
Tests for the pre-build screenshot preparation step
"""

import subprocess
from unittest.mock import Mock

import pytest
from playwright.async_api import Error as PlaywrightError

from pileshots.data.projects import PROJECTS
from pileshots.data.themes import Theme
from pileshots.services.build_preparer import (
    INSTALL_BROWSERS_COMMAND,
    install_browsers,
    prepare_screenshots,
)


def _write_all(config, themes=(Theme.LIGHT, Theme.DARK)):
    config.output_dir.mkdir(parents=True, exist_ok=True)
    for project in PROJECTS:
        for theme in themes:
            config.output_path(project, theme).write_bytes(b"png-data")


@pytest.fixture
def run_command():
    return Mock()


class TestInstallBrowsers:
    def test_success(self, run_command):
        assert install_browsers(run_command) is True
        run_command.assert_called_once_with(INSTALL_BROWSERS_COMMAND, check=True)

    def test_failure_is_not_fatal(self):
        run_command = Mock(side_effect=subprocess.CalledProcessError(1, "playwright"))
        assert install_browsers(run_command) is False

    def test_missing_executable(self):
        assert install_browsers(Mock(side_effect=FileNotFoundError("python"))) is False


class TestPrepareScreenshots:
    def test_skips_generation_when_all_present(self, screenshot_config, run_command):
        _write_all(screenshot_config)
        generate = Mock()

        outcome = prepare_screenshots(
            screenshot_config, PROJECTS, environ={}, run_command=run_command, generate=generate
        )

        generate.assert_not_called()
        run_command.assert_not_called()
        assert outcome.generated is False
        assert outcome.verification.success is True

    def test_generates_when_missing(self, screenshot_config, run_command):
        def generate(config, projects):
            _write_all(config)
            return "summary"

        outcome = prepare_screenshots(
            screenshot_config, PROJECTS, environ={}, run_command=run_command, generate=generate
        )

        assert outcome.generated is True
        assert outcome.summary == "summary"
        assert outcome.error is None
        assert outcome.verification.success is True

    def test_generation_failure_is_tolerated(self, screenshot_config, run_command):
        generate = Mock(side_effect=PlaywrightError("Executable doesn't exist"))

        outcome = prepare_screenshots(
            screenshot_config, PROJECTS, environ={}, run_command=run_command, generate=generate
        )

        assert outcome.generated is False
        assert "Executable" in outcome.error
        assert outcome.verification.success is False
        assert outcome.verification.total_found == 0

    def test_placeholders_fill_missing_files(self, screenshot_config, run_command):
        output_dir = screenshot_config.output_dir
        output_dir.mkdir(parents=True)
        (output_dir / "hyprl.png").write_bytes(b"placeholder")
        (output_dir / "portfolio-light.png").write_bytes(b"real")

        outcome = prepare_screenshots(
            screenshot_config,
            PROJECTS,
            environ={},
            run_command=run_command,
            generate=Mock(side_effect=RuntimeError("browser crashed")),
        )

        assert sorted(outcome.placeholders_used) == ["hyprl-dark.png", "hyprl-light.png"]
        assert (output_dir / "hyprl-dark.png").read_bytes() == b"placeholder"
        # real screenshots are never overwritten
        assert (output_dir / "portfolio-light.png").read_bytes() == b"real"
        assert outcome.verification.total_found == 3

    def test_deployment_environment_installs_browsers(self, screenshot_config, run_command):
        _write_all(screenshot_config)

        outcome = prepare_screenshots(
            screenshot_config, PROJECTS, environ={"VERCEL": "1"}, run_command=run_command, generate=Mock()
        )

        run_command.assert_called_once_with(INSTALL_BROWSERS_COMMAND, check=True)
        assert outcome.browsers_installed is True
