"""
run_memory_experiment.py
========================
Runs repeated syndrome-measurement rounds on a surface-code lattice with
random single-qubit errors injected between measurements, and reports every
round whose parity pattern changed.

Workflow
--------
1. Build the lattice (default 3 x 3 data qubits)
2. Create a reference engine (Pauli frame or stim tableau)
3. Drive ``rounds`` rounds, polling a random Pauli injector after each measure
4. Print every parity-change report
5. Optionally append the run to an HDF5 file

Functions
---------
def run_experiment(config, progress=False, lattice=None) -> RunResult
def save_results(path, config, result) -> str
def main(config=None, out_path=None) -> RunResult
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
import json
import logging
from pathlib import Path
from typing import Literal, Optional

import h5py
import numpy as np

from ..core.lattice import Lattice
from ..core.round_driver import RunResult, run_rounds
from ..engines.frame_engine import FrameEngine
from ..engines.injectors import DEFAULT_ERROR_PROBABILITY, RandomPauliInjector
from ..engines.stim_engine import StimEngine

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 50
ENGINES = ("frame", "stim")


@dataclass
class ExperimentConfig:
    """Parameters of one memory experiment."""

    width: int = 3
    height: int = 3
    rounds: int = DEFAULT_ROUNDS
    error_probability: float = DEFAULT_ERROR_PROBABILITY
    measurement_error: float = 0.0
    flip_probability: float = 0.0
    engine: Literal["frame", "stim"] = "frame"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rounds < 1:
            raise ValueError("rounds must be >= 1.")
        if not (0.0 <= self.error_probability <= 1.0):
            raise ValueError("error_probability must be in [0,1].")
        if not (0.0 <= self.measurement_error <= 1.0):
            raise ValueError("measurement_error must be in [0,1].")
        if not (0.0 <= self.flip_probability <= 1.0):
            raise ValueError("flip_probability must be in [0,1].")
        if self.engine not in ENGINES:
            raise ValueError(f"Unknown engine '{self.engine}'. Use one of {ENGINES}.")


def now():
    # Time stamp
    return datetime.now().isoformat()


def next_dataset_name(h5grp):
    """Get the next name for hdf5 saving"""
    nums = [int(n) for n in h5grp.keys() if n.isdigit()]
    nxt = (max(nums) + 1) if nums else 1
    return f"{nxt:04d}"


def _make_engine(config: ExperimentConfig, lattice: Lattice):
    if config.engine == "stim":
        # flip_probability is the gate-level rate for every H, CNOT and M.
        return StimEngine(lattice, flip_probability=config.flip_probability, seed=config.seed)
    return FrameEngine(lattice, measurement_error=config.measurement_error, seed=config.seed)


def run_experiment(config: ExperimentConfig, progress: bool = False,
                   lattice: Optional[Lattice] = None) -> RunResult:
    if lattice is None:
        lattice = Lattice.build(config.width, config.height)
    elif (lattice.width, lattice.height) != (config.width, config.height):
        raise ValueError(
            f"Lattice is {lattice.width}x{lattice.height} but config asks for {config.width}x{config.height}."
        )
    engine = _make_engine(config, lattice)
    # Offset the injector seed so it does not replay the engine's stream.
    injector_seed = None if config.seed is None else config.seed + 1
    injector = RandomPauliInjector(lattice.data_count, config.error_probability, seed=injector_seed)

    logger.info("Running %d rounds on %r with %r", config.rounds, lattice, engine)
    result = run_rounds(lattice, config.rounds, engine.measure, injector, apply=engine.apply, progress=progress)
    logger.info("Finished: %d reports, %d injected operations", len(result.reports), len(result.operations))
    return result


def save_results(path: str | Path, config: ExperimentConfig, result: RunResult) -> str:
    """
    Append one run to an HDF5 file, laid out as:
    Lattice/
        - 3x3/
             - 0001/
             - 0002/
             ...

    Each dataset group stores the raw syndrome bits, the round-by-round
    matrix, the injected operations and the rounds that reported a change;
    the config goes into the group attributes. Returns the group path.
    """
    matrix = result.history.as_matrix()
    ops = np.asarray(
        [[step, pauli.value, site] for step, pauli, site in result.operations], dtype=np.int64
    ).reshape(-1, 3)
    report_rounds = np.asarray([r.round_index for r in result.reports], dtype=np.int64)

    with h5py.File(path, "a") as f:
        root = f.require_group("Lattice")
        grp_l = root.require_group(f"{config.width}x{config.height}")
        name = next_dataset_name(grp_l)
        grp = grp_l.create_group(name)

        grp.create_dataset("bits", data=result.history.bits)
        grp.create_dataset("syndromes", data=matrix)
        grp.create_dataset("operations", data=ops)
        grp.create_dataset("report_rounds", data=report_rounds)

        for k, v in asdict(config).items():
            try:
                grp.attrs[k] = v
            except (TypeError, ValueError):
                grp.attrs[k] = json.dumps(v)

        grp.attrs["steps"] = result.steps
        grp.attrs["saved_at"] = now()
        f.flush()
        return grp.name


def main(config: Optional[ExperimentConfig] = None, out_path: str | Path | None = None) -> RunResult:
    config = config or ExperimentConfig()
    lattice = Lattice.build(config.width, config.height)
    print(f"Number of required qubits = {lattice.data_count}")

    result = run_experiment(config, progress=True, lattice=lattice)
    for report in result.reports:
        print(report.summary())
    print(result.summary().splitlines()[0])

    if out_path is not None:
        print(f"Saved to {save_results(out_path, config, result)}")
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    OUT_DIR = Path("./simulation_data")
    OUT_DIR.mkdir(exist_ok=True, parents=True)
    H5_PATH = OUT_DIR / "memory_experiment.h5"

    main(ExperimentConfig(width=3, height=3, rounds=DEFAULT_ROUNDS, seed=7), out_path=H5_PATH)
