# tests/debugger/test_debugger.py
"""
chip8_core_tracer.debugger.debugger モジュールの単体テスト。
"""
import pytest

from chip8_core_tracer.core.loop import ExecutionLoop
from chip8_core_tracer.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType
from tests.helpers import FakeClock, program

# @intent:test_suite ブレークポイントの管理、ヒット時の一時停止、実行履歴を検証します。

# 0x200: LD V1, 5
# 0x202: LD I, $300
# 0x204: LD [I], V1
# 0x206: ADD V1, 1
# 0x208: JP $206
PROGRAM = program(0x6105, 0xA300, 0xF155, 0x7101, 0x1206)


@pytest.fixture
def debugger(emulator):
    emulator.load_bytes(PROGRAM)
    loop = ExecutionLoop(emulator.cpu, emulator.display, clock=FakeClock(2_000_000))
    return Debugger(loop)


def test_manage_breakpoints(debugger):
    bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204)
    bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300)
    debugger.add_breakpoint(bp1)
    debugger.add_breakpoint(bp1)
    debugger.add_breakpoint(bp2)
    assert debugger.get_breakpoints() == [bp1, bp2]

    disabled = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204, enabled=False)
    debugger.update_breakpoint(bp1, disabled)
    assert debugger.get_breakpoints() == [disabled, bp2]

    debugger.remove_breakpoint(bp2)
    assert debugger.get_breakpoints() == [disabled]


def test_step_instruction_records_history(debugger):
    snapshot = debugger.step_instruction()
    assert snapshot.metadata.address == 0x200
    assert debugger.get_last_snapshot() is snapshot
    assert debugger.get_history() == [snapshot]


def test_run_stops_before_pc_breakpoint(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))
    hit = debugger.run(max_cycles=100)
    assert hit is not None and hit.condition_type == BreakpointConditionType.PC_MATCH
    assert debugger.loop.cpu.state.pc == 0x204
    assert debugger.loop.is_paused
    assert debugger.get_last_hit().snapshot.metadata.address == 0x202


def test_run_resumes_after_hit(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x206))
    debugger.run(max_cycles=100)
    assert debugger.loop.cpu.state.pc == 0x206
    # 0x206 -> 0x208 -> 0x206 で再びヒット
    hit = debugger.run(max_cycles=100)
    assert hit is not None
    assert debugger.loop.cycle_count == 5


def test_memory_write_breakpoint(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x300))
    debugger.run(max_cycles=100)
    assert debugger.get_last_hit().snapshot.metadata.address == 0x204


def test_memory_read_breakpoint(debugger):
    # 命令フェッチもREADとして記録される
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x207))
    debugger.run(max_cycles=100)
    assert debugger.get_last_hit().snapshot.metadata.address == 0x206


def test_register_value_breakpoint(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.REGISTER_VALUE,
                                                register_name="V1", value=8))
    debugger.run(max_cycles=100)
    assert debugger.loop.cpu.state.v[1] == 8


def test_register_change_breakpoint(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.REGISTER_CHANGE, register_name="I"))
    debugger.run(max_cycles=100)
    assert debugger.get_last_hit().snapshot.registers["I"] == 0x300


def test_disabled_breakpoint_is_ignored(debugger):
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204, enabled=False))
    assert debugger.run(max_cycles=20) is None
    assert debugger.loop.cycle_count == 20
    assert not debugger.loop.is_paused


def test_history_is_bounded(emulator):
    emulator.load_bytes(PROGRAM)
    loop = ExecutionLoop(emulator.cpu, emulator.display, clock=FakeClock(2_000_000))
    debugger = Debugger(loop, history_limit=4)
    debugger.run(max_cycles=10)
    history = debugger.get_history()
    assert len(history) == 4
    assert history[-1].metadata.cycle_count == 10


def test_loop_run_is_paused_by_breakpoint(debugger):
    """ExecutionLoop.run() 経由でもブレークポイントがループを一時停止させます。"""
    loop = debugger.loop
    debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))

    def stop_when_paused(snapshot):
        debugger._on_cycle(snapshot)
        if loop.is_paused:
            loop.stop()

    loop.on_cycle = stop_when_paused
    assert loop.run(max_cycles=100) == 2
    assert loop.is_paused


def test_reset_clears_history(debugger):
    debugger.step_instruction()
    debugger.reset()
    assert debugger.get_history() == []
    assert debugger.get_last_snapshot() is None
