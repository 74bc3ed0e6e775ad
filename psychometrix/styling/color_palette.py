"""Color palette for the admin console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#1F2937", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#6B7280", dark="#AAAAAA")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#EFF6FF", dark="#2D2D2D")

    # Gate status
    GATE_OPEN = ThemeColors(light="#15803D", dark="#6FCF6F")
    GATE_RESTRICTED = ThemeColors(light="#B45309", dark="#FFC83D")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#2563EB", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F3F4F6", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E5E7EB", dark="#505050")
