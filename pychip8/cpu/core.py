"""CHIP-8 machine state and the fetch/decode/execute cycle."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from pychip8.bus import MEMORY_SIZE, AddressOutOfRangeError, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONTSET, FrameBuffer, glyph_address

from .opcodes import OPCODE_TABLE, Instruction, decode

START_ADDRESS = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - START_ADDRESS
REGISTER_COUNT = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF


class CPUError(Exception):
    """Base error for CPU-related failures."""


class StackUnderflowError(CPUError):
    """Raised when a return executes with an empty call stack."""


class StackOverflowError(CPUError):
    """Raised when a call would nest deeper than the stack allows."""


def default_random_byte() -> int:
    return random.getrandbits(8)


def _x(opcode: int) -> int:
    return (opcode >> 8) & 0xF


def _y(opcode: int) -> int:
    return (opcode >> 4) & 0xF


def _kk(opcode: int) -> int:
    return opcode & 0xFF


def _nnn(opcode: int) -> int:
    return opcode & 0xFFF


@dataclass
class CPUState:
    """Snapshot of the machine's register file."""

    pc: int = START_ADDRESS
    registers: tuple[int, ...] = (0,) * REGISTER_COUNT
    index: int = 0x000
    stack: tuple[int, ...] = ()
    delay_timer: int = 0
    sound_timer: int = 0


@dataclass
class Machine:
    """Complete CHIP-8 machine: memory, registers, stack, display, keys, timers.

    The machine only reacts to calls. ``tick`` runs one instruction and
    ``tick_timers`` decrements both timers once; the caller owns the pacing
    between the two.
    """

    random_byte: Callable[[], int] = field(default=default_random_byte)
    instruction_table: Sequence[tuple[Instruction, ...]] = field(default=OPCODE_TABLE)

    memory: Memory = field(init=False)
    display: FrameBuffer = field(init=False)
    keypad: Keypad = field(init=False, default_factory=Keypad)
    pc: int = field(init=False, default=START_ADDRESS)
    v: list[int] = field(init=False)
    index: int = field(init=False, default=0)
    stack: list[int] = field(init=False)
    delay_timer: int = field(init=False, default=0)
    sound_timer: int = field(init=False, default=0)
    instruction_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle

    def reset(self) -> None:
        """Return every piece of state to its power-on value.

        Any loaded program is discarded and the glyph table is reinstalled.
        """

        self.memory = Memory(MEMORY_SIZE)
        self.memory.store_block(0x000, FONTSET)
        self.display = FrameBuffer()
        self.keypad.reset()
        self.pc = START_ADDRESS
        self.v = [0] * REGISTER_COUNT
        self.index = 0
        self.stack = []
        self.delay_timer = 0
        self.sound_timer = 0
        self.instruction_count = 0

    def load(self, data: bytes) -> None:
        """Copy a program image into memory at the start address."""

        if len(data) > MAX_PROGRAM_SIZE:
            raise AddressOutOfRangeError(
                f"program of {len(data)} bytes exceeds the {MAX_PROGRAM_SIZE} bytes available"
            )
        self.memory.store_block(START_ADDRESS, data)
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded %d bytes at %03x", len(data), START_ADDRESS)

    # ------------------------------------------------------------------
    # External surface

    def tick(self) -> Instruction | None:
        """Execute a single instruction.

        Returns the decoded instruction, or ``None`` when the opcode is not
        part of the instruction set (which executes as a no-op). If the
        instruction faults, the program counter is restored to the faulting
        opcode before the error propagates.
        """

        pc_before = self.pc
        try:
            opcode = self._fetch()
            instruction = decode(opcode, self.instruction_table)
            if debug_enabled("cpu"):
                debug_log(
                    "cpu",
                    "pc=%03x opcode=%04x %s",
                    pc_before,
                    opcode,
                    instruction.mnemonic if instruction is not None else "(ignored)",
                )
            if instruction is not None:
                handler = getattr(self, instruction.handler, None)
                if handler is None:
                    raise CPUError(f"handler '{instruction.handler}' not implemented")
                handler(opcode)
        except (CPUError, AddressOutOfRangeError):
            self.pc = pc_before
            raise
        self.instruction_count += 1
        return instruction

    def tick_timers(self) -> None:
        """Decrement the delay and sound timers, stopping at zero."""

        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            if self.sound_timer == 1 and debug_enabled("audio"):
                debug_log("audio", "sound timer expired")
            self.sound_timer -= 1

    def keypress(self, index: int, pressed: bool) -> None:
        self.keypad.set(index, pressed)

    def get_display(self) -> tuple[bool, ...]:
        return self.display.snapshot()

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(self.v)

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    def state(self) -> CPUState:
        return CPUState(
            pc=self.pc,
            registers=tuple(self.v),
            index=self.index,
            stack=tuple(self.stack),
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
        )

    def peek_opcode(self) -> int | None:
        """Return the opcode at ``pc`` without executing it."""

        try:
            return self.memory.load16(self.pc)
        except AddressOutOfRangeError:
            return None

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_cls(self, _: int) -> None:
        self.display.clear()

    def op_ret(self, _: int) -> None:
        self.pc = self._pop()

    def op_jp(self, opcode: int) -> None:
        self.pc = _nnn(opcode)

    def op_call(self, opcode: int) -> None:
        self._push(self.pc)
        self.pc = _nnn(opcode)

    def op_se_byte(self, opcode: int) -> None:
        if self.v[_x(opcode)] == _kk(opcode):
            self._skip()

    def op_sne_byte(self, opcode: int) -> None:
        if self.v[_x(opcode)] != _kk(opcode):
            self._skip()

    def op_se_reg(self, opcode: int) -> None:
        if self.v[_x(opcode)] == self.v[_y(opcode)]:
            self._skip()

    def op_ld_byte(self, opcode: int) -> None:
        self.v[_x(opcode)] = _kk(opcode)

    def op_add_byte(self, opcode: int) -> None:
        x = _x(opcode)
        self.v[x] = (self.v[x] + _kk(opcode)) & 0xFF

    def op_ld_reg(self, opcode: int) -> None:
        self.v[_x(opcode)] = self.v[_y(opcode)]

    def op_or(self, opcode: int) -> None:
        self.v[_x(opcode)] |= self.v[_y(opcode)]

    def op_and(self, opcode: int) -> None:
        self.v[_x(opcode)] &= self.v[_y(opcode)]

    def op_xor(self, opcode: int) -> None:
        self.v[_x(opcode)] ^= self.v[_y(opcode)]

    # The flag is written after the result, so VF as destination ends up
    # holding the flag.
    def op_add_reg(self, opcode: int) -> None:
        x = _x(opcode)
        total = self.v[x] + self.v[_y(opcode)]
        self.v[x] = total & 0xFF
        self.v[FLAG_REGISTER] = 1 if total > 0xFF else 0

    def op_sub(self, opcode: int) -> None:
        x = _x(opcode)
        minuend, subtrahend = self.v[x], self.v[_y(opcode)]
        self.v[x] = (minuend - subtrahend) & 0xFF
        self.v[FLAG_REGISTER] = 0 if minuend < subtrahend else 1

    def op_subn(self, opcode: int) -> None:
        x = _x(opcode)
        minuend, subtrahend = self.v[_y(opcode)], self.v[x]
        self.v[x] = (minuend - subtrahend) & 0xFF
        self.v[FLAG_REGISTER] = 1 if minuend < subtrahend else 0

    # Shifts write the flag first, then the shifted register.
    def op_shr(self, opcode: int) -> None:
        x = _x(opcode)
        self.v[FLAG_REGISTER] = self.v[x] & 0x01
        self.v[x] >>= 1

    def op_shl(self, opcode: int) -> None:
        x = _x(opcode)
        self.v[FLAG_REGISTER] = (self.v[x] >> 7) & 0x01
        self.v[x] = (self.v[x] << 1) & 0xFF

    def op_sne_reg(self, opcode: int) -> None:
        if self.v[_x(opcode)] != self.v[_y(opcode)]:
            self._skip()

    def op_ld_index(self, opcode: int) -> None:
        self.index = _nnn(opcode)

    def op_jp_offset(self, opcode: int) -> None:
        self.pc = self.v[0] + _nnn(opcode)

    def op_rnd(self, opcode: int) -> None:
        self.v[_x(opcode)] = (self.random_byte() & 0xFF) & _kk(opcode)

    def op_drw(self, opcode: int) -> None:
        rows = opcode & 0xF
        if rows == 0:
            self.v[FLAG_REGISTER] = 0
            return
        origin_x = self.v[_x(opcode)]
        origin_y = self.v[_y(opcode)]
        sprite = self.memory.load_block(self.index, rows)
        collided = False
        for row, bits in enumerate(sprite):
            collided |= self.display.draw_row(origin_x, origin_y + row, bits)
        self.v[FLAG_REGISTER] = 1 if collided else 0

    def op_skp(self, opcode: int) -> None:
        if self.keypad.is_pressed(self.v[_x(opcode)]):
            self._skip()

    def op_sknp(self, opcode: int) -> None:
        if not self.keypad.is_pressed(self.v[_x(opcode)]):
            self._skip()

    def op_ld_from_delay(self, opcode: int) -> None:
        self.v[_x(opcode)] = self.delay_timer

    def op_wait_key(self, opcode: int) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            self.pc = (self.pc - 2) & 0xFFFF
            return
        self.v[_x(opcode)] = key

    def op_ld_delay(self, opcode: int) -> None:
        self.delay_timer = self.v[_x(opcode)]

    def op_ld_sound(self, opcode: int) -> None:
        self.sound_timer = self.v[_x(opcode)]

    def op_add_index(self, opcode: int) -> None:
        self.index = (self.index + self.v[_x(opcode)]) & 0xFFFF

    def op_ld_glyph(self, opcode: int) -> None:
        self.index = glyph_address(self.v[_x(opcode)])

    def op_bcd(self, opcode: int) -> None:
        value = self.v[_x(opcode)]
        self.memory.store_block(self.index, (value // 100, (value // 10) % 10, value % 10))

    def op_store_registers(self, opcode: int) -> None:
        self.memory.store_block(self.index, self.v[:_x(opcode) + 1])

    def op_load_registers(self, opcode: int) -> None:
        count = _x(opcode) + 1
        self.v[:count] = self.memory.load_block(self.index, count)

    # ------------------------------------------------------------------
    # Helpers

    def _fetch(self) -> int:
        opcode = self.memory.load16(self.pc)
        self.pc = (self.pc + 2) & 0xFFFF
        return opcode

    def _skip(self) -> None:
        self.pc = (self.pc + 2) & 0xFFFF

    def _push(self, address: int) -> None:
        if len(self.stack) >= STACK_SIZE:
            raise StackOverflowError(f"call stack full ({STACK_SIZE} frames) at pc={self.pc:03x}")
        self.stack.append(address & 0xFFFF)

    def _pop(self) -> int:
        if not self.stack:
            raise StackUnderflowError("return with empty call stack")
        return self.stack.pop()
