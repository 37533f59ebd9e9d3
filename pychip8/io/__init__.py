"""Input helpers for the CHIP-8 machine."""

from .keypad import DEFAULT_KEYMAP, KEY_COUNT, Keypad, lookup_key

__all__ = [
    "DEFAULT_KEYMAP",
    "KEY_COUNT",
    "Keypad",
    "lookup_key",
]
