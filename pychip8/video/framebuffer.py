"""Monochrome 64x32 display buffer."""

from __future__ import annotations

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


class FrameBuffer:
    """Row-major grid of on/off pixels mutated by clear and sprite draws."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        self.width = width
        self.height = height
        self._pixels = [False] * (width * height)

    def clear(self) -> None:
        self._pixels = [False] * (self.width * self.height)

    def draw_row(self, x: int, y: int, bits: int) -> bool:
        """XOR one sprite byte (MSB first) at ``(x, y)``.

        Coordinates wrap around the screen edges. Returns True when a lit
        pixel was turned off.
        """

        collided = False
        row = (y % self.height) * self.width
        for column in range(8):
            if bits & (0x80 >> column):
                index = row + (x + column) % self.width
                collided |= self._pixels[index]
                self._pixels[index] = not self._pixels[index]
        return collided

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._pixels)
