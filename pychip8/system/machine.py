"""CHIP-8 machine assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from pychip8.cpu import Machine
from pychip8.cpu.core import default_random_byte
from pychip8.utils import debug_enabled, debug_log

DEFAULT_INSTRUCTIONS_PER_FRAME = 10
DEFAULT_TIMER_HZ = 60


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    program_image: Optional[bytes] = None
    random_byte: Callable[[], int] = default_random_byte
    instructions_per_frame: int = DEFAULT_INSTRUCTIONS_PER_FRAME
    timer_hz: int = DEFAULT_TIMER_HZ

    def __post_init__(self) -> None:
        if self.instructions_per_frame <= 0:
            raise ValueError("instructions_per_frame must be positive")
        if self.timer_hz <= 0:
            raise ValueError("timer_hz must be positive")

    @property
    def instructions_per_second(self) -> int:
        return self.instructions_per_frame * self.timer_hz


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine and install the configured program."""

    machine = Machine(random_byte=config.random_byte)
    if config.program_image:
        machine.load(config.program_image)
    if debug_enabled("cpu"):
        debug_log(
            "cpu",
            "machine ready program=%d bytes speed=%d ips",
            len(config.program_image or b""),
            config.instructions_per_second,
        )
    return machine
