"""lattice.py
==============
Implements the :class:`Lattice` class: the static topology of a rectangular
planar surface code with ``width x height`` data qubits along the primary
rows/columns.

Data sites are laid out in ``2 * height - 1`` *bands*: full rows of ``width``
sites interleaved with offset rows of ``width - 1`` sites, numbered
row-by-row. Syndrome (ancilla) sites are created band by band and check the
data sites around them. The stabilizer type alternates X / Z from one band to
the next, starting with X, which gives the usual checkerboard.

Simplifications
---------------
• No (x, y) coordinates. Positions are implied by contiguous ids, so syndrome
  index ``k`` is also slot ``k`` of a measurement round.
• Rectangular layout only - no lattice surgery, no custom shapes.
• ``SyndromeSite.enabled`` is stored for hole punching / defect braiding but
  nothing in this package switches it off.

Adjacency
---------
Full-row bands measure ``[row[i], row[i+1], before[i], after[i]]`` (the first
and last band have no ``before`` / ``after`` and check 3 sites). Offset-row
bands measure ``[row[i-1], row[i], before[i], after[i]]``; their two end
positions sit on the left / right edge and check 3 sites.

Public API
----------
class Lattice:
    def __init__(width: int, height: int)
    Lattice.build(width, height) -> Lattice
    .data_count / .syndrome_count
    .syndrome(index) -> SyndromeSite
    .get_stabilizers() -> list[dict]
    .logical_x_sites() / .logical_z_sites() -> list[int]

def build_lattice(width: int, height: int) -> Lattice

Edge Cases & Validation
-----------------------
• width >= 2 and height >= 2 required; anything else raises InvalidDimension.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
from typing import Dict, List, Tuple

from ..errors import InvalidDimension
from ..pauli import Pauli


class StabilizerType(Enum):
    """Stabilizer kind measured by a syndrome site. Values are protocol tags."""

    X = 1
    Z = 3

    @property
    def pauli(self) -> Pauli:
        return Pauli(self.value)

    def toggled(self) -> "StabilizerType":
        return StabilizerType.Z if self is StabilizerType.X else StabilizerType.X

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class DataSite:
    """One data qubit location."""

    id: int


@dataclass(slots=True)
class SyndromeSite:
    """One stabilizer measurement location.

    ``data_sites`` are references into the owning lattice, in the order the
    builder added them. Only ``enabled`` is meant to change after creation.
    """

    id: int
    kind: StabilizerType
    data_sites: Tuple[DataSite, ...]
    enabled: bool = True

    @property
    def data_ids(self) -> List[int]:
        """Ids of the data qubits whose X or Z parity this site measures."""
        return [site.id for site in self.data_sites]

    def __repr__(self) -> str:
        return f"SyndromeSite(id={self.id}, kind={self.kind}, data={self.data_ids})"


def _band_lengths(width: int, height: int) -> List[int]:
    lengths: List[int] = []
    for r in range(height):
        lengths.append(width)
        if r != height - 1:
            lengths.append(width - 1)
    return lengths


@dataclass(slots=True)
class Lattice:
    """Rectangular planar surface-code lattice.

    ``width`` and ``height`` count *data* qubits along the primary rows and
    columns. Built once in ``__post_init__`` and never mutated afterwards, so
    one instance can be shared by any number of round drivers.
    """

    width: int
    height: int
    bands: Tuple[Tuple[DataSite, ...], ...] = field(init=False, default=())
    syndromes: Tuple[SyndromeSite, ...] = field(init=False, default=())
    data_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        for dim in (self.width, self.height):
            if isinstance(dim, bool) or not isinstance(dim, Integral) or dim < 2:
                raise InvalidDimension(self.width, self.height)
        self.width, self.height = int(self.width), int(self.height)
        self._build_data_sites()
        self._build_syndromes()

    @classmethod
    def build(cls, width: int, height: int) -> "Lattice":
        return cls(width=width, height=height)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def _build_data_sites(self) -> None:
        # Qubits are numbered row-by-row: full row, offset row, full row, ...
        next_id = 0
        bands: List[Tuple[DataSite, ...]] = []
        for length in _band_lengths(self.width, self.height):
            bands.append(tuple(DataSite(next_id + j) for j in range(length)))
            next_id += length
        self.bands = tuple(bands)
        self.data_count = next_id

    def _build_syndromes(self) -> None:
        next_id = self.data_count
        kind = StabilizerType.X
        last = len(self.bands) - 1
        syndromes: List[SyndromeSite] = []

        for i in range(len(self.bands)):
            for sites in self._band_footprints(i, last):
                syndromes.append(SyndromeSite(id=next_id, kind=kind, data_sites=sites))
                next_id += 1
            kind = kind.toggled()

        self.syndromes = tuple(syndromes)

    def _band_footprints(self, i: int, last: int) -> List[Tuple[DataSite, ...]]:
        row = self.bands[i]
        if i == 0:
            # First band is always a full row; no band before it.
            after = self.bands[i + 1]
            return [(row[j], row[j + 1], after[j]) for j in range(len(after))]
        if i == last:
            before = self.bands[i - 1]
            return [(row[j], row[j + 1], before[j]) for j in range(len(before))]

        before, after = self.bands[i - 1], self.bands[i + 1]
        n = len(before)
        if len(row) > n:
            return [(row[j], row[j + 1], before[j], after[j]) for j in range(n)]

        footprints: List[Tuple[DataSite, ...]] = []
        for j in range(n):
            if j == 0:
                footprints.append((row[j], before[j], after[j]))
            elif j == n - 1:
                footprints.append((row[j - 1], before[j], after[j]))
            else:
                footprints.append((row[j - 1], row[j], before[j], after[j]))
        return footprints

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def syndrome_count(self) -> int:
        return len(self.syndromes)

    @property
    def qubit_count(self) -> int:
        """Data plus syndrome sites, i.e. the size of the id space."""
        return self.data_count + self.syndrome_count

    def syndrome(self, index: int) -> SyndromeSite:
        """Return the syndrome site at position ``index`` of a round."""
        return self.syndromes[index]

    def data_sites(self) -> List[DataSite]:
        return [site for band in self.bands for site in band]

    def get_stabilizers(self) -> List[Dict]:
        """Return list of stabilizer definitions."""
        return [
            {"id": s.id, "type": s.kind.name, "qubits": s.data_ids}
            for s in self.syndromes
        ]

    def logical_x_sites(self) -> List[int]:
        # Left column of the full rows: crosses every Z check an even number of times.
        return [band[0].id for band in self.bands[::2]]

    def logical_z_sites(self) -> List[int]:
        # First full row.
        return [site.id for site in self.bands[0]]

    # ------------------------------------------------------------------
    # Convenience / representation
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"Lattice(width={self.width}, height={self.height}, "
            f"data={self.data_count}, syndromes={self.syndrome_count})"
        )

    def summary(self) -> str:
        lines = [repr(self), "Syndromes:"]
        for s in self.syndromes:
            lines.append(f"  Id: {s.id} Type: {s.kind} Qubits: {s.data_ids}")
        lines.append("Logical X sites: " + str(self.logical_x_sites()))
        lines.append("Logical Z sites: " + str(self.logical_z_sites()))
        return "\n".join(lines)


def build_lattice(width: int, height: int) -> Lattice:
    """Build the lattice for ``width x height`` data qubits."""
    return Lattice.build(width, height)


__all__ = ["StabilizerType", "DataSite", "SyndromeSite", "Lattice", "build_lattice"]
