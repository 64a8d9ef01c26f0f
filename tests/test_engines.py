import numpy as np
import pytest

from SurfaceLogic import EngineFailure, FrameEngine, Pauli, StabilizerType, StimEngine, build_lattice, run_rounds
from SurfaceLogic.engines.injectors import (
    NoOperations,
    RandomPauliInjector,
    ScheduledInjector,
    logical_operation,
)

ENGINES = [
    lambda lat: FrameEngine(lat),
    lambda lat: StimEngine(lat, seed=11),
]


def _run(lat, engine, rounds, injector):
    return run_rounds(lat, rounds, engine.measure, injector, apply=engine.apply)


@pytest.mark.parametrize("make", ENGINES)
def test_clean_run_has_no_reports(make):
    lat = build_lattice(3, 3)
    result = _run(lat, make(lat), 5, NoOperations())
    assert result.reports == []
    m = result.history.as_matrix()
    assert (m == m[0]).all()


@pytest.mark.parametrize("make", ENGINES)
@pytest.mark.parametrize("pauli,site,expected", [
    (Pauli.X, 0, [2]),
    (Pauli.Z, 6, [5, 6]),
    (Pauli.Y, 4, [1, 3, 4, 6]),
])
def test_single_error_flips_neighbouring_checks(make, pauli, site, expected):
    lat = build_lattice(3, 3)
    n = lat.syndrome_count
    # Inject right after the last syndrome of round 0.
    injector = ScheduledInjector({n - 1: [(pauli, site)]})
    result = _run(lat, make(lat), 3, injector)
    assert len(result.reports) == 1
    report = result.reports[0]
    assert report.round_index == 1
    assert report.changed_indices == expected


@pytest.mark.parametrize("make", ENGINES)
@pytest.mark.parametrize("logical", ["X", "Z"])
def test_logical_operators_are_invisible(make, logical):
    lat = build_lattice(3, 4)
    ops = logical_operation(lat, logical)
    injector = ScheduledInjector({lat.syndrome_count + 3: ops})
    result = _run(lat, make(lat), 4, injector)
    assert result.reports == []
    assert len(result.operations) == len(ops)


def test_frame_engine_measurement_error():
    lat = build_lattice(2, 2)
    always = FrameEngine(lat, measurement_error=1.0)
    assert always.measure(StabilizerType.Z, [0, 2, 3]) == 1
    a = _run(lat, FrameEngine(lat, measurement_error=0.3, seed=5), 10, NoOperations())
    b = _run(lat, FrameEngine(lat, measurement_error=0.3, seed=5), 10, NoOperations())
    assert np.array_equal(a.history.bits, b.history.bits)
    with pytest.raises(ValueError):
        FrameEngine(lat, measurement_error=1.5)


def test_frame_engine_state():
    lat = build_lattice(2, 2)
    eng = FrameEngine(lat)
    eng.apply([(Pauli.X, 1), (Pauli.Z, 1), (Pauli.Z, 4)])
    assert eng.errors() == ["I", "Y", "I", "I", "Z"]
    eng.reset()
    assert eng.errors() == ["I"] * 5


@pytest.mark.parametrize("make", ENGINES)
def test_engine_failures(make):
    lat = build_lattice(2, 2)
    eng = make(lat)
    with pytest.raises(EngineFailure):
        eng.apply([(Pauli.X, 99)])
    with pytest.raises(EngineFailure):
        eng.measure(StabilizerType.Z, [0, 99])
    with pytest.raises(EngineFailure):
        eng.measure("Y", [0, 1])


def test_stim_engine_reproducible_with_noise():
    lat = build_lattice(3, 3)
    runs = [_run(lat, StimEngine(lat, flip_probability=0.05, seed=3), 6, NoOperations()) for _ in range(2)]
    assert np.array_equal(runs[0].history.bits, runs[1].history.bits)
    with pytest.raises(ValueError):
        StimEngine(lat, flip_probability=-0.1)


def test_random_injector():
    never = RandomPauliInjector(13, error_probability=0.0, seed=1)
    assert all(never() == [] for _ in range(100))
    always = RandomPauliInjector(13, error_probability=1.0, seed=1)
    for _ in range(50):
        ((pauli, site),) = always()
        assert pauli in (Pauli.X, Pauli.Y, Pauli.Z)
        assert 0 <= site < 13
    a = RandomPauliInjector(13, 0.5, seed=9)
    b = RandomPauliInjector(13, 0.5, seed=9)
    assert [a() for _ in range(30)] == [b() for _ in range(30)]
    with pytest.raises(ValueError):
        RandomPauliInjector(13, error_probability=2.0)


def test_scheduled_injector_and_logical_ops():
    inj = ScheduledInjector({1: [("X", 2)]})
    assert inj() == []
    assert inj() == [(Pauli.X, 2)]
    assert inj() == []
    assert inj.calls == 3
    lat = build_lattice(3, 3)
    assert logical_operation(lat, Pauli.X) == [(Pauli.X, 0), (Pauli.X, 5), (Pauli.X, 10)]
    assert logical_operation(lat, "Z") == [(Pauli.Z, 0), (Pauli.Z, 1), (Pauli.Z, 2)]
    with pytest.raises(ValueError):
        logical_operation(lat, Pauli.Y)
