"""
Single themed screenshot capture with bounded retries
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

from playwright.async_api import Error as PlaywrightError

from pileshots.config.config import ScreenshotConfig
from pileshots.data.projects import ProjectRecord
from pileshots.data.themes import Theme
from pileshots.services.theme_coercion import apply_theme, context_theme_options
from pileshots.utils.logger import get_logger

logger = get_logger("pileshots.services.screenshot_capture")

# Extra pause after coercion so theme transitions finish
THEME_SETTLE_MS = 1000


@dataclass
class CaptureResult:
    """Outcome of capturing one project in one theme"""

    project_name: str
    theme: Theme
    success: bool
    output_filename: Optional[str] = None
    error_message: Optional[str] = None
    attempts_used: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project_name,
            "theme": self.theme.value,
            "success": self.success,
            "filename": self.output_filename,
            "error": self.error_message,
            "attempts": self.attempts_used,
        }


class ScreenshotCapturer:
    """Captures project pages in a shared browser, one isolated context per attempt"""

    def __init__(self, browser, config: ScreenshotConfig, sleep=asyncio.sleep):
        self.browser = browser
        self.config = config
        self._sleep = sleep

    async def capture_once(self, project: ProjectRecord, theme: Theme, attempt: int = 1) -> CaptureResult:
        theme = Theme.parse(theme)
        config = self.config.for_project(project)
        prefix = f"Retry {attempt}/{config.max_retries} - " if attempt > 1 else ""
        logger.info(f"📸 {prefix}Capturing {theme} theme screenshot for {project.name}...")

        context = None
        try:
            context = await self.browser.new_context(
                viewport=config.viewport.as_playwright(),
                device_scale_factor=config.viewport.device_scale_factor,
                **context_theme_options(theme),
            )
            page = await context.new_page()
            await page.emulate_media(**context_theme_options(theme))

            await page.goto(project.url, wait_until="networkidle", timeout=config.timeout)

            await apply_theme(page, theme)
            await page.wait_for_timeout(config.wait_after_load + THEME_SETTLE_MS)

            screenshot_path = config.output_path(project, theme)
            await page.screenshot(
                path=str(screenshot_path),
                type=config.image_format,
                full_page=config.full_page,
            )

            logger.info(f"✅ {theme.value.capitalize()} screenshot saved: {screenshot_path.name}")
            return CaptureResult(
                project_name=project.name,
                theme=theme,
                success=True,
                output_filename=screenshot_path.name,
                attempts_used=attempt,
            )

        except (PlaywrightError, OSError) as e:
            logger.error(f"❌ Attempt {attempt} failed for {project.name} ({theme}): {e}")
            return CaptureResult(
                project_name=project.name,
                theme=theme,
                success=False,
                error_message=str(e),
                attempts_used=attempt,
            )

        finally:
            if context is not None:
                try:
                    await context.close()
                except PlaywrightError as e:
                    logger.warning(f"Failed to close browser context for {project.name}: {e}")

    async def capture_with_retry(self, project: ProjectRecord, theme: Theme) -> CaptureResult:
        """Capture until success or until max_retries attempts have failed"""
        theme = Theme.parse(theme)
        max_retries = self.config.max_retries
        result = None

        for attempt in range(1, max_retries + 1):
            result = await self.capture_once(project, theme, attempt)
            if result.success:
                return result

            if attempt < max_retries:
                logger.info(
                    f"⏳ Retrying {theme} theme in {self.config.retry_delay / 1000:g}s..."
                )
                await self._sleep(self.config.retry_delay / 1000)

        return result
