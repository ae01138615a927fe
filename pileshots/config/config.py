"""
Configuration Management for pileshots

Settings are assembled once at start-up (defaults, then the .env file, then
the process environment) into an immutable ScreenshotConfig that is passed
explicitly to the capture pipeline.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

from pileshots.data.projects import ProjectRecord
from pileshots.data.themes import Theme

DEFAULT_OUTPUT_DIR = Path("public") / "assets"
SUPPORTED_IMAGE_FORMATS = ("png", "jpeg")

BASE_BROWSER_ARGS: Tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
)

# Extra launch flags for CI and deployment builders
RESTRICTED_ENV_BROWSER_ARGS: Tuple[str, ...] = (
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor",
    "--run-all-compositor-stages-before-draw",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--disable-field-trial-config",
    "--disable-ipc-flooding-protection",
)

RESTRICTED_ENV_SIGNALS: Tuple[str, ...] = ("VERCEL", "NETLIFY", "CI")

# Per-project tweaks merged over the base config
PROJECT_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "HyprL": {"wait_after_load": 3000},
}

_FALSE_VALUES = {"", "0", "false", "no", "off"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when screenshot settings are invalid"""

    pass


@dataclass(frozen=True)
class ViewportConfig:
    width: int = 1200
    height: int = 800
    device_scale_factor: float = 2

    def as_playwright(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ThemeSettings:
    """Which themes are captured and how long to pause between them"""

    enabled: bool = True
    capture: Tuple[Theme, ...] = (Theme.LIGHT, Theme.DARK)
    default_theme: Theme = Theme.LIGHT
    theme_wait_delay: int = 1000  # ms


@dataclass(frozen=True)
class ScreenshotConfig:
    """Immutable settings for one screenshot run (all delays in ms)"""

    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    timeout: int = 30000
    wait_after_load: int = 2000
    delay_between_captures: int = 1000
    headless: bool = True
    browser_args: Tuple[str, ...] = BASE_BROWSER_ARGS
    output_dir: Path = DEFAULT_OUTPUT_DIR
    image_format: str = "png"
    full_page: bool = False
    max_retries: int = 3
    retry_delay: int = 5000
    themes: ThemeSettings = field(default_factory=ThemeSettings)

    def __post_init__(self):
        validate_config(self)

    @property
    def enabled_themes(self) -> Tuple[Theme, ...]:
        if self.themes.enabled:
            return self.themes.capture
        return (self.themes.default_theme,)

    def for_project(self, project: ProjectRecord) -> "ScreenshotConfig":
        """Return this config with the project's overrides applied"""
        overrides = dict(PROJECT_OVERRIDES.get(project.name, {}))
        if not overrides:
            return self

        viewport_overrides = overrides.pop("viewport", None)
        if viewport_overrides:
            overrides["viewport"] = replace(self.viewport, **viewport_overrides)
        return replace(self, **overrides)

    def output_path(self, project: ProjectRecord, theme: Theme) -> Path:
        return self.output_dir / project.output_filename(theme, self.image_format)


def validate_config(config: ScreenshotConfig) -> None:
    """Validate the settings the pipeline relies on"""
    if config.max_retries < 1:
        raise ConfigError("max_retries must be at least 1")
    if config.timeout <= 0:
        raise ConfigError("timeout must be positive")
    for name in ("wait_after_load", "delay_between_captures", "retry_delay"):
        if getattr(config, name) < 0:
            raise ConfigError(f"{name} must not be negative")
    if config.themes.theme_wait_delay < 0:
        raise ConfigError("themes.theme_wait_delay must not be negative")
    if config.viewport.width <= 0 or config.viewport.height <= 0:
        raise ConfigError("viewport width and height must be positive")
    if config.image_format not in SUPPORTED_IMAGE_FORMATS:
        raise ConfigError(
            f"image_format must be one of {', '.join(SUPPORTED_IMAGE_FORMATS)}"
        )
    if not config.themes.capture:
        raise ConfigError("at least one theme must be captured")
    if len(set(config.themes.capture)) != len(config.themes.capture):
        raise ConfigError("themes.capture must not repeat a theme")
    if not isinstance(config.themes.default_theme, Theme):
        raise ConfigError("themes.default_theme must be a Theme")


def is_restricted_environment(environ: Mapping[str, str]) -> bool:
    """True when running on a CI or deployment builder"""
    return any(
        environ.get(name, "").strip().lower() not in _FALSE_VALUES
        for name in RESTRICTED_ENV_SIGNALS
    )


def build_browser_args(environ: Mapping[str, str]) -> Tuple[str, ...]:
    if is_restricted_environment(environ):
        return BASE_BROWSER_ARGS + RESTRICTED_ENV_BROWSER_ARGS
    return BASE_BROWSER_ARGS


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'")


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{raw}'")


def _env_themes(environ: Mapping[str, str], name: str) -> Optional[Tuple[Theme, ...]]:
    raw = environ.get(name)
    if not raw:
        return None
    try:
        themes = (Theme.parse(item) for item in raw.split(",") if item.strip())
        return tuple(dict.fromkeys(themes))
    except ValueError as e:
        raise ConfigError(str(e))


class Config:
    """Application configuration"""

    def __init__(self, base_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self.BASE_DIR = Path(base_dir) if base_dir else Path.cwd()
        if environ is None:
            # Load environment variables from .env before reading os.environ
            self.load_env()
            environ = os.environ
        self._environ = environ
        self._load_env_vars()

    def load_env(self):
        """Load environment variables from .env file"""
        env_file = self.BASE_DIR / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    def _load_env_vars(self):
        env = self._environ

        output_dir = Path(env.get("SCREENSHOT_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR)
        if not output_dir.is_absolute():
            output_dir = self.BASE_DIR / output_dir
        self.OUTPUT_DIR = output_dir

        self.IMAGE_FORMAT = env.get("SCREENSHOT_IMAGE_FORMAT", "png").strip().lower()
        self.FULL_PAGE = _env_bool(env, "SCREENSHOT_FULL_PAGE", False)
        self.HEADLESS = _env_bool(env, "SCREENSHOT_HEADLESS", True)
        self.TIMEOUT = _env_int(env, "SCREENSHOT_TIMEOUT", 30000)
        self.WAIT_AFTER_LOAD = _env_int(env, "SCREENSHOT_WAIT_AFTER_LOAD", 2000)
        self.DELAY_BETWEEN_CAPTURES = _env_int(env, "SCREENSHOT_DELAY_BETWEEN_CAPTURES", 1000)
        self.THEME_DELAY = _env_int(env, "SCREENSHOT_THEME_DELAY", 1000)
        self.MAX_RETRIES = _env_int(env, "SCREENSHOT_MAX_RETRIES", 3)
        self.RETRY_DELAY = _env_int(env, "SCREENSHOT_RETRY_DELAY", 5000)

        self.THEMES_ENABLED = _env_bool(env, "SCREENSHOT_THEMES_ENABLED", True)
        self.THEMES = _env_themes(env, "SCREENSHOT_THEMES") or ThemeSettings().capture
        default_theme = env.get("SCREENSHOT_DEFAULT_THEME")
        try:
            self.DEFAULT_THEME = Theme.parse(default_theme) if default_theme else Theme.LIGHT
        except ValueError as e:
            raise ConfigError(str(e))

        self.IS_RESTRICTED_ENV = is_restricted_environment(env)
        self.BROWSER_ARGS = build_browser_args(env)

        # Logging configuration
        self.LOG_LEVEL = env.get("LOG_LEVEL", "INFO")
        log_file = env.get("LOG_FILE")
        self.LOG_FILE = Path(log_file) if log_file else None
        self.LOG_MAX_SIZE = _env_int(env, "LOG_MAX_SIZE", 10485760)  # 10MB
        self.LOG_BACKUP_COUNT = _env_int(env, "LOG_BACKUP_COUNT", 5)

    def screenshot_config(self) -> ScreenshotConfig:
        """Assemble the immutable config for a capture run"""
        return ScreenshotConfig(
            timeout=self.TIMEOUT,
            wait_after_load=self.WAIT_AFTER_LOAD,
            delay_between_captures=self.DELAY_BETWEEN_CAPTURES,
            headless=self.HEADLESS,
            browser_args=self.BROWSER_ARGS,
            output_dir=self.OUTPUT_DIR,
            image_format=self.IMAGE_FORMAT,
            full_page=self.FULL_PAGE,
            max_retries=self.MAX_RETRIES,
            retry_delay=self.RETRY_DELAY,
            themes=ThemeSettings(
                enabled=self.THEMES_ENABLED,
                capture=self.THEMES,
                default_theme=self.DEFAULT_THEME,
                theme_wait_delay=self.THEME_DELAY,
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "OUTPUT_DIR": str(self.OUTPUT_DIR),
            "IMAGE_FORMAT": self.IMAGE_FORMAT,
            "MAX_RETRIES": self.MAX_RETRIES,
            "RETRY_DELAY": self.RETRY_DELAY,
            "THEMES": [theme.value for theme in self.THEMES],
            "IS_RESTRICTED_ENV": self.IS_RESTRICTED_ENV,
            "LOG_LEVEL": self.LOG_LEVEL,
        }


def load_screenshot_config(
    environ: Optional[Mapping[str, str]] = None, base_dir: Optional[Path] = None
) -> ScreenshotConfig:
    return Config(base_dir=base_dir, environ=environ).screenshot_config()
