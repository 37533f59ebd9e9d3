"""Program image loading for the CHIP-8 machine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.cpu import MAX_PROGRAM_SIZE
from pychip8.utils import debug_enabled, debug_log


class ProgramFormatError(Exception):
    """Raised when a program image cannot be installed."""


@dataclass
class ProgramImage:
    """Raw instruction bytes destined for the start address."""

    name: str
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


def load_program(stream: BinaryIO, *, name: str = "") -> ProgramImage:
    data = stream.read()
    if not data:
        raise ProgramFormatError("program image is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        raise ProgramFormatError(
            f"program image is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit in memory"
        )
    if debug_enabled("loader"):
        debug_log("loader", "program=%s size=%d", name or "<stream>", len(data))
    return ProgramImage(name=name, data=bytes(data))


def load_program_from_path(path: Path | str) -> ProgramImage:
    path = Path(path)
    with path.open("rb") as stream:
        return load_program(stream, name=path.stem)
