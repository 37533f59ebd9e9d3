"""Program memory for the CHIP-8 machine.

The address space is a flat 4 KiB byte array. Unlike the original hardware,
every access is range checked: stray reads and writes surface as
``AddressOutOfRangeError`` instead of silently touching unrelated state.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000


class AddressOutOfRangeError(IndexError):
    """Raised when an access falls outside the addressable range."""


class Memory:
    """Simple byte-addressable memory region starting at address zero."""

    def __init__(self, length: int = MEMORY_SIZE) -> None:
        if length <= 0:
            raise ValueError("memory must have a positive length")
        self._data = bytearray(length)

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > len(self._data):
            end = address + max(length, 1) - 1
            raise AddressOutOfRangeError(
                f"access {address:#05x}-{end:#05x} outside memory 0x000-{len(self._data) - 1:#05x}"
            )

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word."""

        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def load_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address:address + length])

    def store_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        self._check(address, len(payload))
        self._data[address:address + len(payload)] = payload

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def snapshot(self) -> bytes:
        return bytes(self._data)
