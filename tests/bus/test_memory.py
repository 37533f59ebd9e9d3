"""Tests for the CHIP-8 program memory."""

from __future__ import annotations

import pytest

from pychip8.bus import MEMORY_SIZE, AddressOutOfRangeError, Memory


def test_default_size_is_four_kilobytes() -> None:
    assert len(Memory()) == MEMORY_SIZE == 4096


def test_store_masks_to_byte() -> None:
    mem = Memory()
    mem.store8(0x10, 0x1FF)

    assert mem.load8(0x10) == 0xFF


def test_load16_is_big_endian() -> None:
    mem = Memory()
    mem.store_block(0x200, b"\xA2\xF0")

    assert mem.load16(0x200) == 0xA2F0


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, MEMORY_SIZE + 10])
def test_out_of_range_access_raises(address: int) -> None:
    mem = Memory()

    with pytest.raises(AddressOutOfRangeError):
        mem.load8(address)
    with pytest.raises(AddressOutOfRangeError):
        mem.store8(address, 0)


def test_block_write_is_all_or_nothing() -> None:
    mem = Memory()

    with pytest.raises(AddressOutOfRangeError):
        mem.store_block(MEMORY_SIZE - 2, b"\x01\x02\x03")

    assert mem.load_block(MEMORY_SIZE - 2, 2) == b"\x00\x00"


def test_address_error_is_an_index_error() -> None:
    assert issubclass(AddressOutOfRangeError, IndexError)


def test_clear_zeroes_memory() -> None:
    mem = Memory(16)
    mem.store_block(0, range(16))
    mem.clear()

    assert mem.snapshot() == bytes(16)
