"""
Theme identifiers for pileshots
"""

from enum import Enum


class Theme(str, Enum):
    """Visual variants a project page is captured in"""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value) -> "Theme":
        """Resolve a theme from a (case-insensitive) name"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(theme.value for theme in cls)
            raise ValueError(f"Unknown theme '{value}' (expected one of: {valid})")

    def __str__(self) -> str:
        return self.value
