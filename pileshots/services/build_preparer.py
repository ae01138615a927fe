"""
Pre-build step that makes sure themed screenshots are in place.

Screenshot generation is attempted only when files are missing, and any
failure (browser install, launch, capture) degrades to the assets already on
disk instead of failing the site build.
"""

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from pileshots.config.config import ScreenshotConfig, is_restricted_environment, load_screenshot_config
from pileshots.data.projects import PROJECTS, ProjectRecord
from pileshots.services.run_summary import RunSummary
from pileshots.services.screenshot_orchestrator import run_generation
from pileshots.services.screenshot_verifier import VerificationReport, verify_theme_screenshots
from pileshots.utils.logger import get_logger

logger = get_logger("pileshots.services.build_preparer")

INSTALL_BROWSERS_COMMAND = [sys.executable, "-m", "playwright", "install", "chromium", "--with-deps"]


@dataclass
class PrepareOutcome:
    browsers_installed: bool = False
    generated: bool = False
    summary: Optional[RunSummary] = None
    error: Optional[str] = None
    placeholders_used: List[str] = field(default_factory=list)
    verification: Optional[VerificationReport] = None


def install_browsers(run_command: Callable = subprocess.run) -> bool:
    """Install the Chromium build Playwright needs; failure is not fatal"""
    logger.info("🎭 Installing Playwright browsers...")
    try:
        run_command(INSTALL_BROWSERS_COMMAND, check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        logger.warning(f"⚠️ Failed to install Playwright browsers: {e}")
        return False
    logger.info("✅ Playwright browsers installed successfully")
    return True


def fill_placeholders(
    report: VerificationReport, projects: Sequence[ProjectRecord], config: ScreenshotConfig
) -> List[str]:
    """Copy the non-themed thumbnail over each missing themed file"""
    by_name = {project.name: project for project in projects}
    output_dir = Path(config.output_dir)
    used = []

    for check in report.missing:
        project = by_name[check.project_name]
        placeholder = output_dir / f"{project.output_base_name}.{config.image_format}"
        if not placeholder.is_file() or placeholder.stat().st_size == 0:
            continue
        try:
            shutil.copyfile(placeholder, output_dir / check.filename)
        except OSError as e:
            logger.warning(f"Could not copy placeholder for {check.filename}: {e}")
            continue
        logger.info(f"🖼️ Using placeholder {placeholder.name} for {check.filename}")
        used.append(check.filename)

    return used


def prepare_screenshots(
    config: Optional[ScreenshotConfig] = None,
    projects: Optional[Sequence[ProjectRecord]] = None,
    environ: Optional[Mapping[str, str]] = None,
    run_command: Callable = subprocess.run,
    generate: Callable = run_generation,
) -> PrepareOutcome:
    config = config or load_screenshot_config()
    projects = list(PROJECTS if projects is None else projects)
    environ = os.environ if environ is None else environ
    outcome = PrepareOutcome()

    logger.info("🔧 Preparing screenshots for the site build...")
    if is_restricted_environment(environ):
        logger.info("🚀 Detected deployment environment")
        outcome.browsers_installed = install_browsers(run_command)

    def verify() -> VerificationReport:
        return verify_theme_screenshots(
            projects, config.enabled_themes, config.output_dir, config.image_format
        )

    report = verify()
    if report.success:
        logger.info("✅ Screenshots already exist, skipping generation")
        outcome.verification = report
        return outcome

    try:
        logger.info("📸 Generating screenshots...")
        outcome.summary = generate(config, projects)
        outcome.generated = True
    except Exception as e:
        outcome.error = str(e)
        logger.warning(f"⚠️ Screenshot generation failed: {e}")
        logger.info("📦 Proceeding with build using existing or fallback screenshots")

    report = verify()
    if not report.success:
        outcome.placeholders_used = fill_placeholders(report, projects, config)
        if outcome.placeholders_used:
            report = verify()

    outcome.verification = report
    return outcome
