"""frame_engine.py
==================
Pauli-frame reference measurement engine.

Each data site carries a :class:`FrameQubit`. A stabilizer outcome is the
parity of the data-site errors that anticommute with the stabilizer's Pauli
type:
    Z-stabilizer anticommutes with X or Y errors.
    X-stabilizer anticommutes with Z or Y errors.
The outcome is then flipped with probability ``measurement_error``.

Starting from a clean frame every stabilizer reads 0, so an error-free run
produces identical rounds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.lattice import Lattice, StabilizerType
from ..errors import EngineFailure
from ..pauli import Pauli
from .frame_qubit import FrameQubit


@dataclass
class FrameEngine:
    """Measure / apply capabilities backed by a Pauli frame over the lattice."""

    lattice: Lattice
    measurement_error: float = 0.0
    seed: Optional[int] = None
    keep_history: bool = False
    qubits: List[FrameQubit] = field(init=False, repr=False, default_factory=list)
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not (0.0 <= self.measurement_error <= 1.0):
            raise ValueError("measurement_error must be in [0,1].")
        self._rng = random.Random(self.seed)
        self.qubits = [
            FrameQubit(site_id=i, keep_history=self.keep_history)
            for i in range(self.lattice.data_count)
        ]

    def _qubit(self, site_id: int) -> FrameQubit:
        if not 0 <= site_id < len(self.qubits):
            raise EngineFailure(f"Unknown data site {site_id} (lattice has {len(self.qubits)}).")
        return self.qubits[site_id]

    # ------------------------------------------------------------------
    # Engine capabilities
    # ------------------------------------------------------------------
    def measure(self, kind: StabilizerType, data_ids: Sequence[int]) -> int:
        if not isinstance(kind, StabilizerType):
            raise EngineFailure(f"Unsupported stabilizer kind {kind!r}.")
        pauli = kind.pauli
        parity = 0
        for site_id in data_ids:
            if self._qubit(site_id).anticommutes_with(pauli):
                parity ^= 1
        if self.measurement_error > 0 and self._rng.random() < self.measurement_error:
            parity ^= 1
        return parity

    def apply(self, ops: Iterable[Tuple[Pauli, int]]) -> None:
        for pauli, site_id in ops:
            self._qubit(site_id).apply_pauli(pauli)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def reset(self) -> None:
        for q in self.qubits:
            q.reset_error()

    def errors(self) -> List[str]:
        """Current error label on every data site."""
        return [str(q.current_error) for q in self.qubits]

    def __repr__(self) -> str:
        dirty = sum(q.has_error() for q in self.qubits)
        return f"FrameEngine(data={len(self.qubits)}, errors={dirty}, measurement_error={self.measurement_error})"


__all__ = ["FrameEngine"]
