"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.system import DEFAULT_INSTRUCTIONS_PER_FRAME, DEFAULT_TIMER_HZ
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import AMBER, MONOCHROME

PALETTES = {
    "mono": MONOCHROME,
    "amber": AMBER,
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 emulator",
    )
    parser.add_argument(
        "--rom",
        type=Path,
        required=True,
        help="Path to the program image to run",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_FRAME,
        help=f"Instructions executed per {DEFAULT_TIMER_HZ} Hz frame "
        f"(default: {DEFAULT_INSTRUCTIONS_PER_FRAME})",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the sound timer beeper",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        fullscreen=args.fullscreen,
        instructions_per_frame=args.speed,
        enable_audio=not args.mute,
        palette=PALETTES[args.palette],
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
