"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import ProgramFormatError, ProgramImage, load_program, load_program_from_path

__all__ = [
    "ProgramImage",
    "ProgramFormatError",
    "load_program",
    "load_program_from_path",
]
