"""Sixteen-key hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pychip8.bus import AddressOutOfRangeError
from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# Conventional layout:   1 2 3 C      1 2 3 4
#                        4 5 6 D  ->  q w e r
#                        7 8 9 E      a s d f
#                        A 0 B F      z x c v
DEFAULT_KEYMAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


@dataclass
class Keypad:
    """Pressed/released flags for keys 0x0-0xF."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def set(self, index: int, pressed: bool) -> None:
        self._check(index)
        self._keys[index] = bool(pressed)
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)

    def is_pressed(self, index: int) -> bool:
        self._check(index)
        return self._keys[index]

    def first_pressed(self) -> int | None:
        """Return the lowest-indexed pressed key, if any."""

        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def _check(self, index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise AddressOutOfRangeError(f"key index {index:#x} outside 0x0-0xF")


def lookup_key(name: str, keymap: Mapping[str, int] = DEFAULT_KEYMAP) -> int | None:
    """Translate a host key name into a keypad index."""

    return keymap.get(name.lower())
