"""Opcode metadata for the CHIP-8 instruction set.

Instructions are grouped by their leading nibble. Within a group the first
entry whose ``mask`` selects ``pattern`` wins; the remaining bits are operand
fields (register indices, immediates, addresses). Opcodes that match nothing
decode to ``None`` and are executed as no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 opcode family."""

    mask: int
    pattern: int
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF or not 0 <= self.pattern <= 0xFFFF:
            raise ValueError(f"pattern out of range: {self.pattern:#x}/{self.mask:#x}")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")
        if not self.mask & 0xF000:
            raise ValueError("mask must cover the leading nibble")

    @property
    def group(self) -> int:
        return (self.pattern >> 12) & 0xF

    def matches(self, opcode: int) -> bool:
        return (opcode & self.mask) == self.pattern


class OpcodeTable:
    """Mutable builder for the 16-group instruction table."""

    _GROUPS: Final[int] = 0x10

    def __init__(self) -> None:
        self._groups: List[List[Instruction]] = [[] for _ in range(self._GROUPS)]

    def register(self, instruction: Instruction) -> None:
        group = self._groups[instruction.group]
        for existing in group:
            if existing.mask == instruction.mask and existing.pattern == instruction.pattern:
                raise ValueError(
                    f"pattern {instruction.pattern:#06x} already registered as {existing.mnemonic}"
                )
        group.append(instruction)

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[tuple[Instruction, ...]]:
        return tuple(tuple(group) for group in self._groups)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[tuple[Instruction, ...]]:
    """Build the lookup table indexed by leading nibble."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0xFFFF, 0x00E0, "CLS", "op_cls"),
    Instruction(0xFFFF, 0x00EE, "RET", "op_ret"),
    Instruction(0xF000, 0x1000, "JP addr", "op_jp"),
    Instruction(0xF000, 0x2000, "CALL addr", "op_call"),
    Instruction(0xF000, 0x3000, "SE Vx, byte", "op_se_byte"),
    Instruction(0xF000, 0x4000, "SNE Vx, byte", "op_sne_byte"),
    Instruction(0xF00F, 0x5000, "SE Vx, Vy", "op_se_reg"),
    Instruction(0xF000, 0x6000, "LD Vx, byte", "op_ld_byte"),
    Instruction(0xF000, 0x7000, "ADD Vx, byte", "op_add_byte"),
    Instruction(0xF00F, 0x8000, "LD Vx, Vy", "op_ld_reg"),
    Instruction(0xF00F, 0x8001, "OR Vx, Vy", "op_or"),
    Instruction(0xF00F, 0x8002, "AND Vx, Vy", "op_and"),
    Instruction(0xF00F, 0x8003, "XOR Vx, Vy", "op_xor"),
    Instruction(0xF00F, 0x8004, "ADD Vx, Vy", "op_add_reg"),
    Instruction(0xF00F, 0x8005, "SUB Vx, Vy", "op_sub"),
    Instruction(0xF00F, 0x8006, "SHR Vx", "op_shr"),
    Instruction(0xF00F, 0x8007, "SUBN Vx, Vy", "op_subn"),
    Instruction(0xF00F, 0x800E, "SHL Vx", "op_shl"),
    Instruction(0xF00F, 0x9000, "SNE Vx, Vy", "op_sne_reg"),
    Instruction(0xF000, 0xA000, "LD I, addr", "op_ld_index"),
    Instruction(0xF000, 0xB000, "JP V0, addr", "op_jp_offset"),
    Instruction(0xF000, 0xC000, "RND Vx, byte", "op_rnd"),
    Instruction(0xF000, 0xD000, "DRW Vx, Vy, n", "op_drw"),
    Instruction(0xF0FF, 0xE09E, "SKP Vx", "op_skp"),
    Instruction(0xF0FF, 0xE0A1, "SKNP Vx", "op_sknp"),
    Instruction(0xF0FF, 0xF007, "LD Vx, DT", "op_ld_from_delay"),
    Instruction(0xF0FF, 0xF00A, "LD Vx, K", "op_wait_key"),
    Instruction(0xF0FF, 0xF015, "LD DT, Vx", "op_ld_delay"),
    Instruction(0xF0FF, 0xF018, "LD ST, Vx", "op_ld_sound"),
    Instruction(0xF0FF, 0xF01E, "ADD I, Vx", "op_add_index"),
    Instruction(0xF0FF, 0xF029, "LD F, Vx", "op_ld_glyph"),
    Instruction(0xF0FF, 0xF033, "LD B, Vx", "op_bcd"),
    Instruction(0xF0FF, 0xF055, "LD [I], Vx", "op_store_registers"),
    Instruction(0xF0FF, 0xF065, "LD Vx, [I]", "op_load_registers"),
)


OPCODE_TABLE: Sequence[tuple[Instruction, ...]] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def decode(opcode: int, table: Sequence[tuple[Instruction, ...]] = OPCODE_TABLE) -> Instruction | None:
    """Return the instruction matching ``opcode`` or ``None`` when unrecognised."""

    for instruction in table[(opcode >> 12) & 0xF]:
        if instruction.matches(opcode):
            return instruction
    return None


__all__ = [
    "Instruction",
    "OpcodeTable",
    "build_instruction_table",
    "decode",
    "DEFAULT_INSTRUCTIONS",
    "OPCODE_TABLE",
]
