from pychip8.cpu import CPUState
from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs) -> CPUState:
    return CPUState(pc=pc, **kwargs)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6A02, mnemonic="LD Vx, byte")
    recorder.record_step(_state(0x202, index=0x300), 0xA300, mnemonic="LD I, addr")
    recorder.record_step(_state(0x204, stack=(0x206,)), 0x00EE, mnemonic="RET")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=0204" in lines[1]
    assert "SP=01" in lines[1]


def test_trace_recorder_handles_unknown_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0xFFF), None, note="ignored")

    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "note=ignored" in lines[0]
    assert recorder.last_entry().pc == 0xFFF


def test_trace_recorder_clear():
    recorder = TraceRecorder(4)
    recorder.record_step(_state(0x200), 0x00E0)
    recorder.clear()

    assert recorder.last_entry() is None
    assert list(recorder.entries()) == []
