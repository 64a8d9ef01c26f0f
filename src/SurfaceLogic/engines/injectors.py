"""injectors.py
===============
``apply_ops`` capabilities: sources of physical operations that the round
driver polls after every syndrome measurement.

Core API
--------
class RandomPauliInjector(data_count, error_probability=0.005, seed=None)
    One random single-site X/Y/Z with the given probability per poll.
class ScheduledInjector(schedule: dict[int, list[(pauli, site)]])
    Preset operations at given poll numbers (0-based), nothing otherwise.
class NoOperations()
    Never returns anything.
def logical_operation(lattice, pauli) -> list[(Pauli, int)]
    Physical operations implementing a logical X or Z on the lattice.
"""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..core.lattice import Lattice
from ..pauli import Pauli

DEFAULT_ERROR_PROBABILITY = 0.005

Operation = Tuple[Pauli, int]


class RandomPauliInjector:
    """Inject a random single-qubit Pauli error with a fixed probability.

    Randomness comes only from the injector's own seeded ``random.Random``.
    """

    def __init__(self, data_count: int, error_probability: float = DEFAULT_ERROR_PROBABILITY,
                 seed: Optional[int] = None) -> None:
        if data_count < 1:
            raise ValueError("data_count must be >= 1.")
        if not (0.0 <= error_probability <= 1.0):
            raise ValueError("error_probability must be in [0,1].")
        self.data_count = data_count
        self.error_probability = error_probability
        self._rng = random.Random(seed)

    def __call__(self) -> List[Operation]:
        if self._rng.random() >= self.error_probability:
            return []
        pauli = Pauli.from_tag(self._rng.randint(1, 3))
        site = self._rng.randrange(self.data_count)
        return [(pauli, site)]


class ScheduledInjector:
    """Return preset operations on specific polls."""

    def __init__(self, schedule: Dict[int, Iterable[Tuple[Union[Pauli, str, int], int]]]) -> None:
        self.schedule: Dict[int, List[Operation]] = {
            int(step): [(Pauli.coerce(p), int(site)) for p, site in ops]
            for step, ops in schedule.items()
        }
        self.calls = 0

    def __call__(self) -> List[Operation]:
        ops = self.schedule.get(self.calls, [])
        self.calls += 1
        return list(ops)


class NoOperations:
    def __call__(self) -> List[Operation]:
        return []


def logical_operation(lattice: Lattice, pauli: Union[Pauli, str]) -> List[Operation]:
    """Logical X or Z as a sequence of physical operations.

    Both strings commute with every stabilizer, so applying one never changes
    a syndrome outcome.
    """
    p = Pauli.coerce(pauli)
    if p is Pauli.X:
        return [(Pauli.X, q) for q in lattice.logical_x_sites()]
    if p is Pauli.Z:
        return [(Pauli.Z, q) for q in lattice.logical_z_sites()]
    raise ValueError("Only logical X and Z are supported.")


__all__ = [
    "DEFAULT_ERROR_PROBABILITY",
    "RandomPauliInjector",
    "ScheduledInjector",
    "NoOperations",
    "logical_operation",
]
