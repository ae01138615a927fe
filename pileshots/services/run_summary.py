"""
Aggregate statistics for a screenshot run
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pileshots.data.themes import Theme
from pileshots.services.screenshot_capture import CaptureResult


@dataclass
class RunSummary:
    """Counts over every CaptureResult of one invocation"""

    total_expected: int
    successful: int
    failed: List[CaptureResult]
    retried_count: int
    by_theme: Dict[Theme, int]
    results: List[CaptureResult] = field(default_factory=list)

    @classmethod
    def from_results(
        cls, results: Sequence[CaptureResult], themes: Sequence[Theme], total_expected: int
    ) -> "RunSummary":
        return cls(
            total_expected=total_expected,
            successful=sum(1 for r in results if r.success),
            failed=[r for r in results if not r.success],
            retried_count=sum(1 for r in results if r.attempts_used > 1),
            by_theme={
                theme: sum(1 for r in results if r.theme == theme and r.success)
                for theme in themes
            },
            results=list(results),
        )

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def success_rate(self) -> float:
        if not self.total_expected:
            return 0.0
        return self.successful / self.total_expected * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total_expected,
            "successful": self.successful,
            "failed": self.failed_count,
            "retried": self.retried_count,
            "by_theme": {theme.value: count for theme, count in self.by_theme.items()},
            "results": [r.to_dict() for r in self.results],
        }

    def log(self, logger: logging.Logger, project_count: int, show_themes: bool = True) -> None:
        logger.info("📊 Screenshot Generation Summary:")
        logger.info(f"✅ Total successful: {self.successful}/{self.total_expected}")

        if show_themes and self.by_theme:
            logger.info("🎨 By theme:")
            for theme, count in self.by_theme.items():
                logger.info(f"  {theme}: {count}/{project_count}")

        if self.retried_count:
            logger.info(f"🔄 Required retries: {self.retried_count}")

        if self.failed:
            logger.warning("❌ Failed:")
            for result in self.failed:
                logger.warning(
                    f"  - {result.project_name} ({result.theme}): {result.error_message} "
                    f"({result.attempts_used} attempts)"
                )


def write_capture_report(summary: RunSummary, output_dir: Path) -> Path:
    """Write a Markdown report of the run next to the screenshots"""
    now = datetime.now()
    output_dir = Path(output_dir)

    captured = "\n".join(
        f"- ✅ {r.output_filename} ({r.project_name}, {r.theme})"
        for r in summary.results
        if r.success
    ) or "- none"
    failed = "\n".join(
        f"- ❌ {r.project_name} ({r.theme}) after {r.attempts_used} attempts: {r.error_message}"
        for r in summary.failed
    ) or "- none"
    themes = "\n".join(
        f"- **{theme}**: {count}" for theme, count in summary.by_theme.items()
    )
    status = (
        "✅ **SUCCESS**: All screenshots captured."
        if not summary.failed
        else "⚠️ **PARTIAL**: Some screenshots failed; previously generated assets stay in place."
    )

    report = f"""# Screenshot Capture Report

**Generated**: {now.strftime("%Y-%m-%d %H:%M:%S")}
**Output Directory**: `{output_dir}`

## Summary Statistics
- **Total Screenshots**: {summary.total_expected}
- **Successfully Captured**: {summary.successful}
- **Failed**: {summary.failed_count}
- **Retried**: {summary.retried_count}
- **Success Rate**: {summary.success_rate:.1f}%

## By Theme
{themes}

## Captured
{captured}

## Failed
{failed}

## Status
{status}
"""

    report_path = output_dir / f"capture_report_{now.strftime('%Y%m%d_%H%M%S')}.md"
    report_path.write_text(report, encoding="utf-8")
    return report_path
