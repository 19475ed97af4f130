# tests/core/test_snapshot.py
"""
chip8_core_tracer.core.snapshot モジュールの単体テスト。
"""
import dataclasses

import pytest

from chip8_core_tracer.core.snapshot import Metadata, Operation, Snapshot
from chip8_core_tracer.transport.bus import BusAccess, BusAccessType


def test_operation_text():
    assert Operation("00E0", "CLS").text == "CLS"
    assert Operation("6A02", "LD", ["VA", "#$02"]).text == "LD VA, #$02"


def test_snapshot_is_immutable():
    snapshot = Snapshot(
        registers={"PC": 0x202},
        operation=Operation("6A02", "LD", ["VA", "#$02"]),
        metadata=Metadata(cycle_count=1, address=0x200),
        bus_activity=[BusAccess(0x200, 0x6A, BusAccessType.READ)],
    )
    assert snapshot.pc == 0x202
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.metadata = Metadata(cycle_count=2)
