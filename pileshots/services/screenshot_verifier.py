"""
Checks that every expected themed screenshot exists on disk
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pileshots.data.projects import ProjectRecord
from pileshots.data.themes import Theme
from pileshots.utils.logger import get_logger

logger = get_logger("pileshots.services.screenshot_verifier")


@dataclass
class FileCheck:
    project_name: str
    theme: Theme
    filename: str
    found: bool
    size_kb: Optional[int] = None


@dataclass
class VerificationReport:
    results: List[FileCheck] = field(default_factory=list)
    total_expected: int = 0

    @property
    def total_found(self) -> int:
        return sum(1 for r in self.results if r.found)

    @property
    def success(self) -> bool:
        return self.total_found == self.total_expected

    @property
    def missing(self) -> List[FileCheck]:
        return [r for r in self.results if not r.found]

    def size_comparison(self) -> Dict[str, int]:
        """Dark minus light size (KB) per project where both themes exist"""
        sizes: Dict[str, Dict[Theme, int]] = {}
        for r in self.results:
            if r.found:
                sizes.setdefault(r.project_name, {})[r.theme] = r.size_kb
        return {
            name: by_theme[Theme.DARK] - by_theme[Theme.LIGHT]
            for name, by_theme in sizes.items()
            if Theme.LIGHT in by_theme and Theme.DARK in by_theme
        }

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "total_expected": self.total_expected,
            "total_found": self.total_found,
            "missing": [r.filename for r in self.missing],
        }


def verify_theme_screenshots(
    projects: Sequence[ProjectRecord],
    themes: Sequence[Theme],
    output_dir: Path,
    image_format: str = "png",
) -> VerificationReport:
    """Stat each expected file; a zero-byte file counts as missing"""
    output_dir = Path(output_dir)
    report = VerificationReport(total_expected=len(projects) * len(themes))
    logger.info("🔍 Verifying theme-aware screenshots...")

    for project in projects:
        logger.info(f"📂 Checking {project.name}:")
        for theme in themes:
            filename = project.output_filename(theme, image_format)
            path = output_dir / filename
            try:
                size = path.stat().st_size
            except OSError:
                size = 0

            if size > 0:
                size_kb = round(size / 1024)
                logger.info(f"  ✅ {theme}: {filename} ({size_kb} KB)")
                report.results.append(FileCheck(project.name, theme, filename, True, size_kb))
            else:
                logger.info(f"  ❌ {theme}: {filename} - NOT FOUND")
                report.results.append(FileCheck(project.name, theme, filename, False))

    logger.info(f"✅ Found: {report.total_found}/{report.total_expected} screenshots")

    if report.success:
        logger.info("🎉 All theme-aware screenshots are ready!")
        comparison = report.size_comparison()
        if comparison:
            logger.info("📈 Theme comparison (sizes):")
            for check in report.results:
                if check.theme == Theme.LIGHT and check.project_name in comparison:
                    diff = comparison[check.project_name]
                    dark_kb = check.size_kb + diff
                    logger.info(
                        f"  {check.project_name}: Light {check.size_kb}KB, "
                        f"Dark {dark_kb}KB ({'+' if diff > 0 else ''}{diff}KB)"
                    )
    else:
        logger.warning("❌ Some screenshots are missing. Run: pileshots generate")

    return report
