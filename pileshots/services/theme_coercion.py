"""
Best-effort techniques for forcing a third-party page into a colour theme.

None of the strategies is expected to work on every site: each one is run
independently and its failure never blocks the others. Whether the page
actually changed appearance is not checked.
"""

from typing import Any, Awaitable, Callable, Dict, List, Tuple

from playwright.async_api import Error as PlaywrightError

from pileshots.data.themes import Theme
from pileshots.utils.logger import get_logger

logger = get_logger("pileshots.services.theme_coercion")

THEME_TOGGLE_SELECTORS: Tuple[str, ...] = (
    '[data-theme="{theme}"]',
    "[data-theme-toggle]",
    ".theme-toggle",
    'button[aria-label*="theme"]',
    'button[aria-label*="{theme}"]',
    ".dark-mode-toggle",
    ".theme-switcher",
)

THEME_STORAGE_KEYS: Tuple[str, ...] = ("theme", "darkMode", "colorScheme", "preferred-theme")

TOGGLE_CLICK_TIMEOUT = 3000
TOGGLE_SETTLE_MS = 500

_CURRENT_THEME_JS = """() => {
    const root = document.documentElement;
    const attr = root.getAttribute('data-theme');
    if (attr === 'light' || attr === 'dark') return attr;
    if (root.classList.contains('dark')) return 'dark';
    if (root.classList.contains('light')) return 'light';
    return null;
}"""

_PERSIST_THEME_JS = """([theme, keys]) => {
    keys.forEach(key => localStorage.setItem(key, theme));
}"""

_APPLY_ATTRIBUTES_JS = """(theme) => {
    const root = document.documentElement;
    root.classList.remove('light', 'dark');
    root.classList.add(theme);
    root.setAttribute('data-theme', theme);
    if (document.body) {
        document.body.classList.remove('light', 'dark');
        document.body.classList.add(theme);
        document.body.setAttribute('data-theme', theme);
    }
}"""

_DISPATCH_EVENTS_JS = """(theme) => {
    window.dispatchEvent(new CustomEvent('themechange', { detail: { theme } }));
    window.dispatchEvent(new StorageEvent('storage', {
        key: 'theme',
        newValue: theme,
        storageArea: localStorage
    }));
}"""


def context_theme_options(theme: Theme) -> Dict[str, Any]:
    """Browsing-context options that set the system colour-scheme preference"""
    return {"color_scheme": Theme.parse(theme).value, "reduced_motion": "reduce"}


async def click_theme_toggle(page, theme: Theme) -> bool:
    """Click the first theme toggle found, unless the page already shows the theme"""
    current = await page.evaluate(_CURRENT_THEME_JS)
    if current == theme.value:
        logger.debug(f"Page already advertises the {theme} theme, not clicking a toggle")
        return False

    for template in THEME_TOGGLE_SELECTORS:
        selector = template.format(theme=theme.value)
        try:
            element = await page.query_selector(selector)
            if element:
                await element.click(timeout=TOGGLE_CLICK_TIMEOUT)
                await page.wait_for_timeout(TOGGLE_SETTLE_MS)
                logger.debug(f"Clicked theme toggle: {selector}")
                return True
        except PlaywrightError as e:
            logger.debug(f"Theme toggle {selector} not usable: {e}")
            continue

    return False


async def persist_theme_preference(page, theme: Theme) -> bool:
    await page.evaluate(_PERSIST_THEME_JS, [theme.value, list(THEME_STORAGE_KEYS)])
    return True


async def apply_theme_attributes(page, theme: Theme) -> bool:
    await page.evaluate(_APPLY_ATTRIBUTES_JS, theme.value)
    return True


async def dispatch_theme_events(page, theme: Theme) -> bool:
    await page.evaluate(_DISPATCH_EVENTS_JS, theme.value)
    return True


ThemeStrategy = Callable[[Any, Theme], Awaitable[bool]]

THEME_STRATEGIES: List[Tuple[str, ThemeStrategy]] = [
    ("toggle_click", click_theme_toggle),
    ("local_storage", persist_theme_preference),
    ("root_attributes", apply_theme_attributes),
    ("theme_events", dispatch_theme_events),
]


async def apply_theme(page, theme: Theme, strategies=None) -> List[str]:
    """
    Run every coercion strategy against a loaded page.

    Returns the names of the strategies that took effect. Never raises.
    """
    theme = Theme.parse(theme)
    applied = []

    for name, strategy in strategies or THEME_STRATEGIES:
        try:
            if await strategy(page, theme):
                applied.append(name)
        except Exception as e:
            logger.debug(f"Theme strategy '{name}' failed for {theme}: {e}")

    if not applied:
        logger.warning(
            f"⚠️ Could not set {theme} theme on page, relying on browser preference"
        )
    return applied
