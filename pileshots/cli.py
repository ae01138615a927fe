"""
Command line interface for the pileshots screenshot toolchain
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from pileshots.config.config import Config, ConfigError
from pileshots.data.projects import PROJECTS, get_project
from pileshots.data.themes import Theme
from pileshots.services.build_preparer import prepare_screenshots
from pileshots.services.run_summary import write_capture_report
from pileshots.services.screenshot_orchestrator import run_generation
from pileshots.services.screenshot_verifier import verify_theme_screenshots
from pileshots.utils.logger import get_logger, setup_logging

logger = get_logger("pileshots.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pileshots",
        description="Themed screenshot capture for the Project Pile card grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pileshots generate                       # Capture every project in light and dark
  pileshots generate --theme dark          # Dark theme only
  pileshots generate --project HyprL       # A single project
  pileshots verify                         # Check the expected files exist
  pileshots prepare                        # Build step: generate if missing, never fail
        """,
    )
    parser.add_argument("--output-dir", help="Directory screenshots are written to")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Capture all screenshots")
    generate.add_argument(
        "--theme",
        action="append",
        choices=[theme.value for theme in Theme],
        help="Theme to capture (repeatable, default: all configured themes)",
    )
    generate.add_argument(
        "--project", action="append", help="Project name to capture (repeatable)"
    )
    generate.add_argument(
        "--report", action="store_true", help="Write a Markdown capture report"
    )
    generate.add_argument("--json", action="store_true", help="Print the summary as JSON")

    subparsers.add_parser("verify", help="Verify the expected screenshot files exist")
    subparsers.add_parser("prepare", help="Ensure screenshots exist before a site build")

    return parser


def _build_config(args, settings: Config):
    config = settings.screenshot_config()
    if args.output_dir:
        config = replace(config, output_dir=Path(args.output_dir))
    themes = getattr(args, "theme", None)
    if themes:
        capture = tuple(dict.fromkeys(Theme.parse(theme) for theme in themes))
        config = replace(config, themes=replace(config.themes, enabled=True, capture=capture))
    return config


def _cmd_generate(args, config, projects) -> int:
    try:
        summary = run_generation(config, projects)
    except (PlaywrightError, OSError) as e:
        logger.error(f"💥 Script failed: {e}")
        return 1

    if args.report:
        report_path = write_capture_report(summary, config.output_dir)
        logger.info(f"📝 Report written to {report_path}")
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    return 0


def _cmd_verify(args, config, projects) -> int:
    report = verify_theme_screenshots(
        projects, config.enabled_themes, config.output_dir, config.image_format
    )
    return 0 if report.success else 1


def _cmd_prepare(args, config, projects) -> int:
    outcome = prepare_screenshots(config, projects)
    if outcome.verification and not outcome.verification.success:
        logger.warning(
            f"⚠️ {len(outcome.verification.missing)} screenshots still missing; "
            "the site will use its default thumbnails"
        )
    return 0


COMMANDS = {
    "generate": _cmd_generate,
    "verify": _cmd_verify,
    "prepare": _cmd_prepare,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Config()
        setup_logging(
            "DEBUG" if args.verbose else settings.LOG_LEVEL,
            settings.LOG_FILE,
            settings.LOG_MAX_SIZE,
            settings.LOG_BACKUP_COUNT,
        )
        config = _build_config(args, settings)
        names = getattr(args, "project", None)
        projects = [get_project(name) for name in names] if names else PROJECTS
    except (ConfigError, KeyError) as e:
        parser.error(str(e))

    try:
        return COMMANDS[args.command](args, config, projects)
    except KeyboardInterrupt:
        print("\n❌ Screenshot capture interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
