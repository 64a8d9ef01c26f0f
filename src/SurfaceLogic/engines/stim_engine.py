"""stim_engine.py
=================
Tableau-simulator reference measurement engine built on ``stim``.

The simulator holds ``data_count`` data qubits plus a single ancilla (index
``data_count``). Every ``measure`` call resets the ancilla and runs the usual
extraction circuit:

    Z-type:  CX data -> anc for every checked site, M anc
    X-type:  H anc, CX anc -> data for every checked site, H anc, M anc

Only one ancilla exists, so syndromes are extracted strictly one at a time.

Noise (``flip_probability > 0``) follows a bit-flip-only fault model:
    • each CNOT is, with probability p, replaced by X on the control, the
      target, or both (uniformly);
    • each H and each M is preceded, with probability p, by an X on its qubit.

X-type outcomes of the very first round are random (the data starts in
|0...0>); after that the state is projected and outcomes repeat until an
error occurs.
"""

from __future__ import annotations

import random
from typing import Iterable, Optional, Sequence, Tuple

import stim

from ..core.lattice import Lattice, StabilizerType
from ..errors import EngineFailure
from ..pauli import Pauli


class StimEngine:
    """Measure / apply capabilities backed by ``stim.TableauSimulator``."""

    def __init__(self, lattice: Lattice, flip_probability: float = 0.0, seed: Optional[int] = None) -> None:
        if not (0.0 <= flip_probability <= 1.0):
            raise ValueError("flip_probability must be in [0,1].")
        self.lattice = lattice
        self.flip_probability = flip_probability
        self.ancilla = lattice.data_count
        self._rng = random.Random(seed)
        self._sim = stim.TableauSimulator(seed=seed)
        self._sim.set_num_qubits(lattice.data_count + 1)

    # ------------------------------------------------------------------
    # Noisy primitives
    # ------------------------------------------------------------------
    def _flip(self) -> bool:
        return self.flip_probability > 0 and self._rng.random() < self.flip_probability

    def _h(self, q: int) -> None:
        if self._flip():
            self._sim.x(q)
        self._sim.h(q)

    def _cx(self, control: int, target: int) -> None:
        if not self._flip():
            self._sim.cx(control, target)
            return
        selector = self._rng.randint(1, 3)
        if selector in (1, 3):
            self._sim.x(control)
        if selector in (2, 3):
            self._sim.x(target)

    def _m(self, q: int) -> int:
        if self._flip():
            self._sim.x(q)
        return int(self._sim.measure(q))

    def _check_site(self, site_id: int) -> int:
        if not 0 <= site_id < self.lattice.data_count:
            raise EngineFailure(f"Unknown data site {site_id} (lattice has {self.lattice.data_count}).")
        return site_id

    # ------------------------------------------------------------------
    # Engine capabilities
    # ------------------------------------------------------------------
    def measure(self, kind: StabilizerType, data_ids: Sequence[int]) -> int:
        targets = [self._check_site(q) for q in data_ids]
        anc = self.ancilla
        self._sim.reset(anc)
        if kind is StabilizerType.Z:
            for q in targets:
                self._cx(q, anc)
        elif kind is StabilizerType.X:
            self._h(anc)
            for q in targets:
                self._cx(anc, q)
            self._h(anc)
        else:
            raise EngineFailure(f"Unsupported stabilizer kind {kind!r}.")
        return self._m(anc)

    def apply(self, ops: Iterable[Tuple[Pauli, int]]) -> None:
        for pauli, site_id in ops:
            q = self._check_site(site_id)
            match Pauli.coerce(pauli):
                case Pauli.X:
                    self._sim.x(q)
                case Pauli.Y:
                    self._sim.y(q)
                case Pauli.Z:
                    self._sim.z(q)
                case Pauli.I:
                    pass

    def __repr__(self) -> str:
        return f"StimEngine(qubits={self.lattice.data_count + 1}, flip_probability={self.flip_probability})"


__all__ = ["StimEngine"]
