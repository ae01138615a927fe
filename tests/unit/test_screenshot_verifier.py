"""
Tests for the screenshot verification step
"""

import pytest

from pileshots.data.projects import PROJECTS
from pileshots.data.themes import Theme
from pileshots.services.screenshot_verifier import verify_theme_screenshots

THEMES = (Theme.LIGHT, Theme.DARK)


@pytest.fixture
def assets_dir(tmp_path):
    path = tmp_path / "assets"
    path.mkdir()
    return path


def _write(path, size):
    path.write_bytes(b"x" * size)


class TestVerifyThemeScreenshots:
    def test_only_light_files_present(self, assets_dir):
        for project in PROJECTS:
            _write(assets_dir / project.output_filename(Theme.LIGHT), 2048)

        report = verify_theme_screenshots(PROJECTS, THEMES, assets_dir)

        assert report.total_found == 4
        assert report.total_expected == 8
        assert report.success is False
        assert sorted(r.filename for r in report.missing) == sorted(
            p.output_filename(Theme.DARK) for p in PROJECTS
        )

    def test_all_present(self, assets_dir):
        for project in PROJECTS:
            _write(assets_dir / project.output_filename(Theme.LIGHT), 2048)
            _write(assets_dir / project.output_filename(Theme.DARK), 3072)

        report = verify_theme_screenshots(PROJECTS, THEMES, assets_dir)

        assert report.success is True
        assert report.total_found == 8
        assert all(r.size_kb in (2, 3) for r in report.results)
        assert report.size_comparison() == {p.name: 1 for p in PROJECTS}

    def test_zero_byte_file_counts_as_missing(self, assets_dir):
        project = PROJECTS[0]
        _write(assets_dir / project.output_filename(Theme.LIGHT), 0)

        report = verify_theme_screenshots([project], (Theme.LIGHT,), assets_dir)
        assert report.total_found == 0
        assert report.success is False

    def test_missing_directory(self, tmp_path):
        report = verify_theme_screenshots(PROJECTS, THEMES, tmp_path / "nope")
        assert report.total_found == 0
        assert report.to_dict()["total_expected"] == 8

    def test_image_format(self, assets_dir):
        project = PROJECTS[1]
        _write(assets_dir / "portfolio-dark.jpeg", 10)
        report = verify_theme_screenshots([project], (Theme.DARK,), assets_dir, "jpeg")
        assert report.success is True
