"""CHIP-8 virtual machine with a pygame front end.

The ``cpu`` package holds the machine core; the remaining packages provide
memory, video, input, audio, program loading and the front end that drive it.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
