import threading

import pytest

from SurfaceLogic import (
    EngineFailure,
    Pauli,
    RoundCursor,
    StabilizerType,
    SyndromeHistory,
    SyndromeSchedule,
    build_lattice,
    run_rounds,
)
from SurfaceLogic.core.round_driver import decode_operations, encode_syndrome, normalize_operations


class Recorder:
    """Fake engine that logs every call and measures zeros."""

    def __init__(self, bits=None):
        self.events = []
        self.bits = bits

    def measure(self, kind, data_ids):
        self.events.append(("measure", kind, tuple(data_ids)))
        if self.bits is None:
            return 0
        return self.bits[len([e for e in self.events if e[0] == "measure"]) - 1]

    def apply_ops(self):
        self.events.append(("apply_ops",))
        return []


@pytest.mark.parametrize("rounds", [1, 3])
def test_call_count_and_order(rounds):
    lat = build_lattice(3, 3)
    eng = Recorder()
    result = run_rounds(lat, rounds, eng.measure, eng.apply_ops)

    measures = [e for e in eng.events if e[0] == "measure"]
    polls = [e for e in eng.events if e[0] == "apply_ops"]
    assert len(measures) == len(polls) == rounds * lat.syndrome_count
    expected = [("measure", s.kind, tuple(s.data_ids)) for _ in range(rounds) for s in lat.syndromes]
    assert measures == expected
    # strictly alternating: measure, apply_ops, measure, ...
    assert [e[0] for e in eng.events] == ["measure", "apply_ops"] * (rounds * lat.syndrome_count)

    assert result.steps == rounds * lat.syndrome_count
    assert result.rounds_completed == rounds
    assert result.reports == []
    assert not result.cancelled


def test_reports_come_from_history():
    lat = build_lattice(2, 2)
    bits = [0, 0, 0, 0, 0, 1, 0, 0]
    eng = Recorder(bits)
    result = run_rounds(lat, 2, eng.measure, eng.apply_ops)
    assert len(result.reports) == 1
    assert result.reports[0].changed_indices == [1]
    assert list(result.history.bits) == bits


def test_operations_forwarded_and_logged():
    lat = build_lattice(2, 2)
    polls = iter([[(Pauli.X, 0)], [], [1, 2, 3, 4], []] * 2)
    applied = []
    result = run_rounds(lat, 2, lambda k, ids: 0, lambda: next(polls), apply=applied.append)
    assert applied == [[(Pauli.X, 0)], [(Pauli.X, 2), (Pauli.Z, 4)]] * 2
    assert result.operations[:3] == [(0, Pauli.X, 0), (2, Pauli.X, 2), (2, Pauli.Z, 4)]
    assert len(result.operations) == 6


def test_operations_logged_without_sink():
    lat = build_lattice(2, 2)
    result = run_rounds(lat, 1, lambda k, ids: 0, lambda: [("Y", 1)])
    assert [op[1:] for op in result.operations] == [(Pauli.Y, 1)] * 4


def test_engine_errors_propagate_unchanged():
    lat = build_lattice(2, 2)
    err = EngineFailure("engine down")

    def measure(kind, ids):
        raise err

    with pytest.raises(EngineFailure) as info:
        run_rounds(lat, 1, measure, lambda: [])
    assert info.value is err

    calls = []

    def apply_ops():
        calls.append(1)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        run_rounds(lat, 1, lambda k, ids: 0, apply_ops)
    assert len(calls) == 1


def test_cooperative_cancel():
    lat = build_lattice(3, 3)
    stop = threading.Event()
    seen = []

    def measure(kind, ids):
        seen.append(ids)
        if len(seen) == 5:
            stop.set()
        return 0

    result = run_rounds(lat, 4, measure, lambda: [], cancel=stop)
    assert result.cancelled
    assert result.steps == 5
    assert len(seen) == 5
    assert result.history.count == 5


def test_validation():
    lat = build_lattice(2, 2)
    with pytest.raises(ValueError):
        run_rounds(lat, 0, lambda k, ids: 0, lambda: [])
    with pytest.raises(ValueError):
        run_rounds(lat, 1, lambda k, ids: 0, lambda: [], history=SyndromeHistory(7))


def test_shared_history_continues():
    lat = build_lattice(2, 2)
    history = SyndromeHistory(lat.syndrome_count)
    run_rounds(lat, 1, lambda k, ids: 0, lambda: [], history=history)
    result = run_rounds(lat, 1, lambda k, ids: 1, lambda: [], history=history)
    assert len(result.reports) == 1
    assert result.reports[0].round_index == 1


def test_lattice_shared_between_runs():
    lat = build_lattice(3, 2)
    before = lat.get_stabilizers()
    a = run_rounds(lat, 2, lambda k, ids: len(ids) % 2, lambda: [])
    b = run_rounds(lat, 2, lambda k, ids: len(ids) % 2, lambda: [])
    assert list(a.history.bits) == list(b.history.bits)
    assert lat.get_stabilizers() == before


def test_cursor():
    c = RoundCursor(total_rounds=2, syndrome_count=3)
    assert c.total_steps == 6
    for _ in range(4):
        c.advance()
    assert (c.round_index, c.syndrome_index) == (1, 1)
    assert not c.exhausted
    c.advance(); c.advance()
    assert c.exhausted
    c.reset()
    assert c.step == 0
    with pytest.raises(ValueError):
        RoundCursor(total_rounds=0, syndrome_count=3)


def test_schedule_wire_protocol():
    lat = build_lattice(3, 3)
    schedule = SyndromeSchedule(lat, 2)
    groups = []
    while True:
        group = schedule.next_syndrome()
        if not group:
            break
        groups.append(group)
        schedule.report(0)
    assert len(groups) == 2 * lat.syndrome_count
    assert groups[0] == [1, 0, 1, 3]
    assert groups[2] == [3, 3, 0, 5]
    assert groups[lat.syndrome_count] == groups[0]
    assert schedule.next_syndrome() == []
    assert schedule.history.rounds_completed == 2
    assert schedule.reports == []


def test_encoding_helpers():
    lat = build_lattice(2, 2)
    z = next(s for s in lat.syndromes if s.kind is StabilizerType.Z)
    assert encode_syndrome(z)[0] == 3
    assert decode_operations([1, 0, 3, 2]) == [(Pauli.X, 0), (Pauli.Z, 2)]
    with pytest.raises(ValueError):
        decode_operations([1])
    assert normalize_operations(None) == []
    assert normalize_operations([]) == []
    assert normalize_operations([(2, 5)]) == [(Pauli.Y, 5)]
    with pytest.raises(ValueError):
        normalize_operations([("I", 0)])
