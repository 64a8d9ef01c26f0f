"""frame_qubit.py
=================
Implements :class:`FrameQubit`, the per-data-site state of the Pauli-frame
reference engine.

A frame qubit stores the accumulated Pauli error on one data site as two
parity bits ``(x_bit, z_bit)``. Composing a new Pauli is an XOR; global
phases are dropped because they never change a stabilizer outcome.

Public API
----------
class FrameQubit(site_id: int, keep_history: bool = False):
    .apply_pauli(pauli: str | int | Pauli) -> Pauli
    .reset_error() -> None
    .current_error -> Pauli
    .has_error() -> bool
    .anticommutes_with(pauli) -> bool
    .history -> list[Pauli]   (only if keep_history=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from ..pauli import Pauli


@dataclass(slots=True)
class FrameQubit:
    """Accumulated Pauli error of one data site."""

    site_id: int
    keep_history: bool = False
    _x_bit: int = field(init=False, repr=False, default=0)
    _z_bit: int = field(init=False, repr=False, default=0)
    _history: List[Pauli] = field(init=False, repr=False, default_factory=list)

    # ------------------------------------------------------------------
    # Core state helpers
    # ------------------------------------------------------------------
    @property
    def current_error(self) -> Pauli:
        return Pauli.from_bits(self._x_bit, self._z_bit)

    def has_error(self) -> bool:
        """True iff current error isn't identity."""
        return (self._x_bit | self._z_bit) != 0

    def anticommutes_with(self, pauli: Pauli) -> bool:
        """True if the stored error flips a measurement of ``pauli``.

        Z checks see X/Y errors, X checks see Z/Y errors.
        """
        return not self.current_error.commutes_with(pauli)

    @property
    def history(self) -> List[Pauli]:
        return list(self._history)

    # ------------------------------------------------------------------
    # Mutation operations
    # ------------------------------------------------------------------
    def reset_error(self) -> None:
        self._x_bit = 0
        self._z_bit = 0
        if self.keep_history:
            self._history.append(self.current_error)

    def apply_pauli(self, pauli: Union[str, int, Pauli]) -> Pauli:
        """Compose a Pauli onto this site and return the new error."""
        x_new, z_new = Pauli.coerce(pauli).bits
        self._x_bit ^= x_new
        self._z_bit ^= z_new
        if self.keep_history:
            self._history.append(self.current_error)
        return self.current_error

    def __repr__(self) -> str:
        return f"FrameQubit[{self.site_id}](error={self.current_error})"


__all__ = ["FrameQubit"]
