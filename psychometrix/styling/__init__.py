"""Styling module for the PsychoMetrix admin console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
