"""Chip8App frame stepping and input routing (no window required)."""

from __future__ import annotations

import pytest

from pychip8.cpu import StackUnderflowError
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils import reload_categories


def _write_program(tmp_path, *words: int):
    path = tmp_path / "test.ch8"
    path.write_bytes(b"".join(word.to_bytes(2, "big") for word in words))
    return path


def test_create_machine_loads_program(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x00E0, 0x1200)
    app = Chip8App(AppConfig(rom_path=rom_path))

    machine = app._create_machine(rom_path)

    assert app.machine is machine
    assert machine.memory.load16(0x200) == 0x00E0
    assert machine.memory.load16(0x202) == 0x1200


def test_create_machine_reports_missing_program(tmp_path) -> None:
    app = Chip8App(AppConfig())

    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "missing.ch8")


def test_create_machine_reports_empty_program(tmp_path) -> None:
    rom_path = tmp_path / "empty.ch8"
    rom_path.write_bytes(b"")
    app = Chip8App(AppConfig())

    with pytest.raises(RuntimeError, match="Failed to load"):
        app._create_machine(rom_path)


def test_run_frame_executes_instructions_then_timers(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x6005, 0xF018, 0x1204)
    app = Chip8App(AppConfig(rom_path=rom_path, instructions_per_frame=10))
    machine = app._create_machine(rom_path)

    app.run_frame()

    assert machine.instruction_count == 10
    assert machine.pc == 0x204
    assert machine.sound_timer == 4
    assert machine.sound_active


def test_run_frame_converts_machine_fault(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x00EE)
    app = Chip8App(AppConfig(rom_path=rom_path))
    app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="pc=200") as excinfo:
        app.run_frame()

    assert isinstance(excinfo.value.__cause__, StackUnderflowError)


def test_run_frame_dumps_trace_on_fault(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    reload_categories()
    try:
        rom_path = _write_program(tmp_path, 0x6A01, 0x0000, 0x00EE)
        app = Chip8App(AppConfig(rom_path=rom_path))
        app._create_machine(rom_path)

        with pytest.raises(RuntimeError):
            app.run_frame()
    finally:
        reload_categories()

    out = capsys.readouterr().out
    assert "[CHIP8][trace] pc=0200 opcode=6A01" in out
    assert "note=ignored" in out


def test_run_frame_requires_machine() -> None:
    with pytest.raises(RuntimeError):
        Chip8App(AppConfig()).run_frame()


def test_handle_key_name_routes_to_keypad(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    assert app.handle_key_name("X", pressed=True)
    assert machine.keypad.is_pressed(0x0)

    assert app.handle_key_name("x", pressed=False)
    assert not machine.keypad.is_pressed(0x0)

    assert not app.handle_key_name("space", pressed=True)


def test_run_requires_program() -> None:
    with pytest.raises(RuntimeError, match="--rom"):
        Chip8App(AppConfig()).run()


def test_restart_reloads_program(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x6A07, 0x1202)
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    app.run_frame()
    assert machine.v[0xA] == 0x07

    rom_path.write_bytes(bytes((0x6B, 0x09)))
    app._restart(machine)

    assert machine.pc == 0x200
    assert machine.v[0xA] == 0
    assert machine.memory.load16(0x200) == 0x6B09
    assert machine.memory.load16(0x202) == 0x0000


def test_restart_reports_emptied_program(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    rom_path.write_bytes(b"")

    with pytest.raises(RuntimeError, match="Failed to load"):
        app._restart(machine)

    assert machine.memory.load16(0x200) == 0x1200


def test_restart_reports_removed_program(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    rom_path.unlink()

    with pytest.raises(RuntimeError, match="not found"):
        app._restart(machine)


def test_frame_speed_comes_from_machine_config(tmp_path) -> None:
    rom_path = _write_program(tmp_path, 0x1200)
    app = Chip8App(AppConfig(rom_path=rom_path, instructions_per_frame=3))
    machine = app._create_machine(rom_path)

    app.run_frame()
    app.run_frame()

    assert machine.instruction_count == 6


def test_invalid_frame_speed_rejected() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(instructions_per_frame=0))
