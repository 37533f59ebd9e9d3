"""Tests for category-gated debug logging."""

from __future__ import annotations

import pytest

from pychip8.utils import debug_enabled, debug_log, reload_categories


@pytest.fixture(autouse=True)
def _fresh_categories():
    reload_categories()
    yield
    reload_categories()


def test_disabled_without_environment(monkeypatch, capsys) -> None:
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)

    debug_log("cpu", "pc=%03x", 0x200)

    assert not debug_enabled("cpu")
    assert capsys.readouterr().out == ""


def test_selected_categories(monkeypatch, capsys) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "CPU, input")

    debug_log("cpu", "pc=%03x", 0x200)
    debug_log("audio", "ignored")

    assert debug_enabled("input")
    assert not debug_enabled("audio")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_every_category(monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "all")

    assert debug_enabled("perf")
    assert debug_enabled()


def test_bad_format_arguments_are_appended(monkeypatch, capsys) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "cpu")

    debug_log("cpu", "value=%d", "text")

    assert capsys.readouterr().out == "[CHIP8][cpu] value=%d ('text',)\n"


def test_loader_category_reports_program_size(monkeypatch, capsys) -> None:
    import io

    from pychip8.loader import load_program

    monkeypatch.setenv("CHIP8_DEBUG", "loader")

    load_program(io.BytesIO(b"\x12\x00"), name="loop.ch8")

    assert capsys.readouterr().out == "[CHIP8][loader] program=loop.ch8 size=2\n"
