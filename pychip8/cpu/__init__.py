"""CPU package for the CHIP-8 machine."""

from .core import (
    MAX_PROGRAM_SIZE,
    START_ADDRESS,
    STACK_SIZE,
    CPUError,
    CPUState,
    Machine,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "Machine",
    "CPUState",
    "CPUError",
    "StackUnderflowError",
    "StackOverflowError",
    "START_ADDRESS",
    "STACK_SIZE",
    "MAX_PROGRAM_SIZE",
    "opcodes",
]
