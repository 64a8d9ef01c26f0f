"""Single-qubit Pauli operators as they travel across the engine boundary.

The integer value of every member is the tag used by the round protocol:
    I = 0  (identity, never sent)
    X = 1
    Y = 2
    Z = 3

Phases are ignored throughout the package - only commutation parity matters
for stabilizer outcomes, so the enum carries no phase bookkeeping.

Examples:
    >>> from SurfaceLogic import Pauli
    >>> Pauli.from_tag(3)
    Z
    >>> Pauli.X.commutes_with(Pauli.Z)
    False
    >>> Pauli.X.bits
    (1, 0)

Commutation:
Two single-qubit Paulis (excluding identity) anticommute iff they are distinct.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple, Union


class Pauli(Enum):
    I = 0
    X = 1
    Y = 2
    Z = 3

    # --- Construction ---------------------------------------------------
    @classmethod
    def from_tag(cls, tag: int) -> "Pauli":
        """Decode a protocol tag (1, 2, 3) into a non-identity Pauli."""
        try:
            pauli = cls(int(tag))
        except ValueError:
            raise ValueError(f"Invalid Pauli tag {tag!r}. Expected 1 (X), 2 (Y) or 3 (Z).") from None
        if pauli is cls.I:
            raise ValueError("Pauli tag 0 (identity) is not a valid operation.")
        return pauli

    @classmethod
    def coerce(cls, value: Union["Pauli", str, int]) -> "Pauli":
        """Accept a Pauli, a label ('X') or a protocol tag (1)."""
        if isinstance(value, Pauli):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Invalid Pauli label '{value}'. Expected one of I, X, Y, Z.") from None
        return cls.from_tag(value)

    # --- Public API -----------------------------------------------------
    @property
    def tag(self) -> int:
        return self.value

    @property
    def bits(self) -> Tuple[int, int]:
        """Symplectic (x_bit, z_bit) encoding, phase dropped."""
        match self:
            case Pauli.I:
                return 0, 0
            case Pauli.X:
                return 1, 0
            case Pauli.Y:
                return 1, 1
            case Pauli.Z:
                return 0, 1

    @classmethod
    def from_bits(cls, x_bit: int, z_bit: int) -> "Pauli":
        """Inverse of :attr:`bits`."""
        table = {(0, 0): cls.I, (1, 0): cls.X, (1, 1): cls.Y, (0, 1): cls.Z}
        return table[(x_bit & 1, z_bit & 1)]

    def commutes_with(self, other: "Pauli") -> bool:
        """Return True if single-qubit Paulis commute.

        Identity commutes with everything; distinct non-identity Paulis anticommute.
        """
        if self == Pauli.I or other == Pauli.I:
            return True
        return self == other

    # --- Representation --------------------------------------------------
    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


__all__ = ["Pauli"]
