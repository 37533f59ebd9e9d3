"""Tests for the CHIP-8 opcode table."""

from __future__ import annotations

import pytest

from pychip8.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    OPCODE_TABLE,
    Instruction,
    OpcodeTable,
    decode,
)
from pychip8.cpu import Machine


def test_table_has_one_group_per_leading_nibble() -> None:
    assert len(OPCODE_TABLE) == 16
    for group, instructions in enumerate(OPCODE_TABLE):
        assert all(instruction.group == group for instruction in instructions)


@pytest.mark.parametrize(
    ("opcode", "mnemonic"),
    [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1234, "JP addr"),
        (0x8AB4, "ADD Vx, Vy"),
        (0x8ABE, "SHL Vx"),
        (0xE39E, "SKP Vx"),
        (0xE3A1, "SKNP Vx"),
        (0xF70A, "LD Vx, K"),
        (0xFF65, "LD Vx, [I]"),
    ],
)
def test_decode_matches_patterns(opcode: int, mnemonic: str) -> None:
    instruction = decode(opcode)

    assert instruction is not None
    assert instruction.mnemonic == mnemonic


@pytest.mark.parametrize("opcode", [0x0000, 0x0FFF, 0x5AB1, 0x8AB8, 0x9AB1, 0xE3A2, 0xF3FF])
def test_decode_unknown_returns_none(opcode: int) -> None:
    assert decode(opcode) is None


def test_every_handler_exists_on_machine() -> None:
    for instruction in DEFAULT_INSTRUCTIONS:
        assert callable(getattr(Machine, instruction.handler, None)), instruction.handler


def test_duplicate_registration_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0xF000, 0x1000, "JP addr", "op_jp"))

    with pytest.raises(ValueError):
        table.register(Instruction(0xF000, 0x1000, "JUMP", "op_jp"))


def test_pattern_outside_mask_rejected() -> None:
    with pytest.raises(ValueError):
        Instruction(0xF000, 0x1001, "bad", "op_jp")
