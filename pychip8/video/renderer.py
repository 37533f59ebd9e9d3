"""Convert display snapshots into RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import SCREEN_HEIGHT, SCREEN_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB pixels for one frame."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale the 64x32 boolean grid into an RGB buffer."""

    def __init__(
        self,
        palette: Sequence[RGBColor] = MONOCHROME,
        *,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
    ) -> None:
        self._background, self._foreground = validate_palette(palette)
        self._width = width
        self._height = height

    def render(self, display: Sequence[bool], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(display) != self._width * self._height:
            raise ValueError(
                f"display must contain {self._width * self._height} cells, got {len(display)}"
            )

        on = bytes(self._foreground) * scale
        off = bytes(self._background) * scale
        out = bytearray()
        for y in range(self._height):
            row = display[y * self._width:(y + 1) * self._width]
            line = b"".join(on if lit else off for lit in row)
            out += line * scale
        return RenderResult(self._width * scale, self._height * scale, bytes(out))
