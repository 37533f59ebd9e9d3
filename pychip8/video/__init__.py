"""Video helpers for the CHIP-8 machine."""

from __future__ import annotations

from .font import FONTSET, FONTSET_SIZE, GLYPH_BYTES, glyph_address
from .framebuffer import SCREEN_HEIGHT, SCREEN_WIDTH, FrameBuffer
from .palette import AMBER, MONOCHROME, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "FONTSET",
    "FONTSET_SIZE",
    "GLYPH_BYTES",
    "glyph_address",
    "FrameBuffer",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MONOCHROME",
    "AMBER",
    "validate_palette",
    "Renderer",
    "RenderResult",
]
