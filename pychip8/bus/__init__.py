"""Bus-related helpers for the CHIP-8 machine."""

from .memory import MEMORY_SIZE, AddressOutOfRangeError, Memory

__all__ = [
    "MEMORY_SIZE",
    "AddressOutOfRangeError",
    "Memory",
]
