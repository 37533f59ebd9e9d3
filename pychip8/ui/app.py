"""Pygame front end for the CHIP-8 machine."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import AddressOutOfRangeError
from pychip8.cpu import CPUError, Machine
from pychip8.io import DEFAULT_KEYMAP, lookup_key
from pychip8.loader import ProgramFormatError, ProgramImage, load_program_from_path
from pychip8.system import (
    DEFAULT_INSTRUCTIONS_PER_FRAME,
    DEFAULT_TIMER_HZ,
    MachineConfig,
    create_machine,
)
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, SCREEN_HEIGHT, SCREEN_WIDTH, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    instructions_per_frame: int = DEFAULT_INSTRUCTIONS_PER_FRAME
    timer_hz: int = DEFAULT_TIMER_HZ
    enable_audio: bool = True
    palette: Sequence[RGBColor] = MONOCHROME
    keymap: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))


class Chip8App:
    """Thin wrapper around the Pygame event loop.

    Each frame executes ``instructions_per_frame`` instructions followed by a
    single timer tick, then presents the display and updates the beeper.
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._machine_config = MachineConfig(
            instructions_per_frame=config.instructions_per_frame,
            timer_hz=config.timer_hz,
        )
        self._running = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._renderer = Renderer(config.palette)
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        if not self._config.rom_path:
            raise RuntimeError("program image is required; pass --rom <path>")

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")

        if self._config.enable_audio:
            self._initialise_audio(pygame)

        scale = self._config.scale
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale), flags)
        clock = pygame.time.Clock()
        self._running = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_BACKSPACE:
                        self._restart(machine)
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key_name(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self.handle_key_name(pygame.key.name(event.key), pressed=False)

                frame_start = time.perf_counter()
                self.run_frame()

                frame = self._renderer.render(machine.get_display(), scale=scale)
                screen.blit(frame.to_surface(), (0, 0))
                pygame.display.flip()

                if self._beeper is not None:
                    self._beeper.set_state(machine.sound_active)

                if self._perf_enabled:
                    debug_log(
                        "perf",
                        "frame=%d instructions=%d frame_ms=%.3f",
                        self._frame_counter,
                        machine.instruction_count,
                        (time.perf_counter() - frame_start) * 1000.0,
                    )
                clock.tick(self._machine_config.timer_hz)
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def run_frame(self) -> None:
        """Execute one frame's worth of instructions and one timer tick."""

        machine = self._machine
        if machine is None:
            raise RuntimeError("no machine loaded")
        trace = self._trace_recorder

        try:
            for _ in range(self._machine_config.instructions_per_frame):
                if trace is not None:
                    state_before = machine.state()
                    opcode = machine.peek_opcode()
                    instruction = machine.tick()
                    trace.record_step(
                        state_before,
                        opcode,
                        mnemonic=instruction.mnemonic if instruction is not None else "",
                        note="" if instruction is not None else "ignored",
                    )
                else:
                    machine.tick()
        except (CPUError, AddressOutOfRangeError) as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=64)
            raise RuntimeError(f"machine fault at pc={machine.pc:03X}: {exc}") from exc

        machine.tick_timers()

    def handle_key_name(self, name: str, *, pressed: bool) -> bool:
        """Forward a host key to the keypad; returns False for unmapped keys."""

        machine = self._machine
        index = lookup_key(name, self._config.keymap)
        if debug_enabled("input"):
            debug_log("input", "event=%s key=%s pressed=%s", name, index, pressed)
        if machine is None or index is None:
            return False
        machine.keypress(index, pressed)
        return True

    def _read_program(self, rom_path: Path) -> ProgramImage:
        try:
            return load_program_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Program file not found: {rom_path}") from exc
        except ProgramFormatError as exc:
            raise RuntimeError(f"Failed to load program {rom_path}: {exc}") from exc

    def _create_machine(self, rom_path: Path) -> Machine:
        image = self._read_program(rom_path)
        machine = create_machine(replace(self._machine_config, program_image=image.data))
        self._machine = machine
        return machine

    def _restart(self, machine: Machine) -> None:
        if self._config.rom_path is None:
            return
        image = self._read_program(self._config.rom_path)
        machine.reset()
        machine.load(image.data)
        if self._trace_recorder is not None:
            self._trace_recorder.clear()
        if debug_enabled("cpu"):
            debug_log("cpu", "restarted program=%s", image.name)

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)
