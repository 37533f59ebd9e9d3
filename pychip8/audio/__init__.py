"""Audio helpers for the CHIP-8 machine."""

from .beeper import SquareWaveBeeper

__all__ = ["SquareWaveBeeper"]
