"""
Screenshot run orchestration: one browser, every (project, theme) pair in order
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional, Sequence

from playwright.async_api import async_playwright

from pileshots.config.config import ScreenshotConfig, load_screenshot_config
from pileshots.data.projects import PROJECTS, ProjectRecord
from pileshots.data.themes import Theme
from pileshots.services.run_summary import RunSummary
from pileshots.services.screenshot_capture import CaptureResult, ScreenshotCapturer
from pileshots.utils.logger import get_logger

logger = get_logger("pileshots.services.screenshot_orchestrator")


@asynccontextmanager
async def launch_browser(config: ScreenshotConfig):
    """Start Playwright and a single Chromium process, closing both on exit"""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=config.headless, args=list(config.browser_args)
        )
        try:
            yield browser
        finally:
            await browser.close()


class ScreenshotOrchestrator:
    """Runs the capture pipeline across all projects and themes"""

    def __init__(
        self,
        config: Optional[ScreenshotConfig] = None,
        projects: Optional[Sequence[ProjectRecord]] = None,
        browser_factory=launch_browser,
        sleep=asyncio.sleep,
    ):
        self.config = config or load_screenshot_config()
        self.projects = list(PROJECTS if projects is None else projects)
        self._browser_factory = browser_factory
        self._sleep = sleep

    @property
    def total_expected(self) -> int:
        return len(self.projects) * len(self.config.enabled_themes)

    async def generate_all_screenshots(self) -> RunSummary:
        config = self.config
        themes = config.enabled_themes
        output_dir = Path(config.output_dir)

        logger.info("🚀 Starting theme-aware screenshot generation...")
        logger.info(f"📁 Output directory: {output_dir}")
        logger.info(
            f"📊 Processing {len(self.projects)} projects with {len(themes)} themes each..."
        )
        if config.themes.enabled:
            logger.info(f"🎨 Themes: {', '.join(theme.value for theme in themes)}")

        output_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Browser args: {' '.join(config.browser_args)}")

        results: List[CaptureResult] = []
        try:
            async with self._browser_factory(config) as browser:
                capturer = ScreenshotCapturer(browser, config, sleep=self._sleep)

                for index, project in enumerate(self.projects):
                    logger.info(f"📂 Processing {project.name}...")
                    results.extend(await self._capture_project(capturer, project, themes))

                    # Delay between projects
                    if index < len(self.projects) - 1:
                        await self._sleep(config.delay_between_captures / 1000)

        except Exception as e:
            logger.error(f"💥 Browser launch or screenshot generation failed: {e}")
            raise

        summary = RunSummary.from_results(results, themes, self.total_expected)
        summary.log(logger, len(self.projects), show_themes=config.themes.enabled)
        logger.info("🎉 Screenshot generation complete!")
        return summary

    async def _capture_project(
        self, capturer: ScreenshotCapturer, project: ProjectRecord, themes: Sequence[Theme]
    ) -> List[CaptureResult]:
        results = []
        for index, theme in enumerate(themes):
            results.append(await capturer.capture_with_retry(project, theme))

            # Small delay between theme captures
            if index < len(themes) - 1:
                await self._sleep(self.config.themes.theme_wait_delay / 1000)
        return results


async def generate_all_screenshots(
    config: Optional[ScreenshotConfig] = None,
    projects: Optional[Sequence[ProjectRecord]] = None,
) -> RunSummary:
    return await ScreenshotOrchestrator(config, projects).generate_all_screenshots()


def run_generation(
    config: Optional[ScreenshotConfig] = None,
    projects: Optional[Sequence[ProjectRecord]] = None,
) -> RunSummary:
    """Synchronous entry point for scripts and the build step"""
    return asyncio.run(generate_all_screenshots(config, projects))
