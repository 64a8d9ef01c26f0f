"""round_driver.py
=================
Drives repeated rounds of syndrome extraction against an external
measurement engine.

The engine is reached through two callables only:

    measure(kind, data_ids) -> bit
        Measure one stabilizer (``StabilizerType.X`` or ``.Z``) over the
        given data sites. May block for as long as the engine needs.
    apply_ops() -> [(pauli, data_site_id), ...]
        Polled once after every measurement. Returns physical operations to
        apply before the next syndrome (error injection, or a logical gate
        broken into physical ones). May be empty.

``run_rounds`` performs ``total_rounds * syndrome_count`` steps, strictly one
after the other, visiting syndromes in index order within each round. Every
result goes into a :class:`SyndromeHistory`; every operation is logged and,
when an ``apply`` sink is given, forwarded to it. Nothing raised by the
engine callables is caught here.

For engines that prefer to pull work, :class:`SyndromeSchedule` exposes the
same sequence in wire form: ``[tag, id, id, ...]`` per syndrome with
``X = 1`` and ``Z = 3``, then ``[]`` once the run is exhausted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from numbers import Integral
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from tqdm import tqdm

from ..pauli import Pauli
from .lattice import Lattice, StabilizerType, SyndromeSite
from .syndrome_history import ParityChangeReport, SyndromeHistory

logger = logging.getLogger(__name__)

Operation = Tuple[Pauli, int]
MeasureFn = Callable[[StabilizerType, List[int]], int]
ApplyOpsFn = Callable[[], Iterable]
ApplyFn = Callable[[List[Operation]], None]


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


# ---------------------------------------------------------------------------
# Wire encoding
# ---------------------------------------------------------------------------
def encode_syndrome(site: SyndromeSite) -> List[int]:
    """``[kind tag, data ids...]`` for one syndrome site."""
    return [site.kind.value, *site.data_ids]


def decode_operations(flat: Sequence[int]) -> List[Operation]:
    """Decode a flat ``[tag, site, tag, site, ...]`` array into operations."""
    if len(flat) % 2 != 0:
        raise ValueError(f"Operation array must hold (tag, site) pairs, got {len(flat)} items.")
    return [(Pauli.from_tag(flat[i]), int(flat[i + 1])) for i in range(0, len(flat), 2)]


def normalize_operations(ops: Optional[Iterable]) -> List[Operation]:
    """Accept pairs with Pauli/tag/label kinds, or a flat tag array."""
    if ops is None:
        return []
    items = list(ops)
    if not items:
        return []
    if all(isinstance(item, (Integral, Pauli)) for item in items):
        return decode_operations([p.value if isinstance(p, Pauli) else p for p in items])
    normalized: List[Operation] = []
    for kind, site in items:
        pauli = Pauli.coerce(kind)
        if pauli is Pauli.I:
            raise ValueError("Identity is not a valid operation.")
        normalized.append((pauli, int(site)))
    return normalized


# ---------------------------------------------------------------------------
# Cursor / schedule
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class RoundCursor:
    """Position of the next syndrome to query within a run."""

    total_rounds: int
    syndrome_count: int
    step: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.total_rounds, bool) or not isinstance(self.total_rounds, Integral) or self.total_rounds < 1:
            raise ValueError("total_rounds must be a positive integer.")
        if self.syndrome_count < 1:
            raise ValueError("syndrome_count must be >= 1.")

    @property
    def total_steps(self) -> int:
        return self.total_rounds * self.syndrome_count

    @property
    def syndrome_index(self) -> int:
        return self.step % self.syndrome_count

    @property
    def round_index(self) -> int:
        return self.step // self.syndrome_count

    @property
    def exhausted(self) -> bool:
        return self.step >= self.total_steps

    def advance(self) -> None:
        self.step += 1

    def reset(self) -> None:
        self.step = 0


class SyndromeSchedule:
    """Pull-based view of a run.

    The engine calls :meth:`next_syndrome` for the next group to measure and
    :meth:`report` with its outcome. An empty group means the run is over.
    """

    def __init__(self, lattice: Lattice, total_rounds: int, history: Optional[SyndromeHistory] = None) -> None:
        self.lattice = lattice
        self.cursor = RoundCursor(total_rounds=total_rounds, syndrome_count=lattice.syndrome_count)
        self.history = history if history is not None else SyndromeHistory(lattice.syndrome_count)
        self.reports: List[ParityChangeReport] = []

    def next_syndrome(self) -> List[int]:
        if self.cursor.exhausted:
            return []
        site = self.lattice.syndrome(self.cursor.syndrome_index)
        self.cursor.advance()
        return encode_syndrome(site)

    def report(self, bit: int) -> Optional[ParityChangeReport]:
        report = self.history.record(bit)
        if report is not None:
            self.reports.append(report)
        return report


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------
@dataclass
class RunResult:
    """Everything a run produced."""

    history: SyndromeHistory
    reports: List[ParityChangeReport] = field(default_factory=list)
    operations: List[Tuple[int, Pauli, int]] = field(default_factory=list)
    steps: int = 0
    cancelled: bool = False

    @property
    def rounds_completed(self) -> int:
        return self.history.rounds_completed

    def summary(self) -> str:
        lines = [
            f"RunResult(steps={self.steps}, rounds={self.rounds_completed}, "
            f"reports={len(self.reports)}, operations={len(self.operations)}, cancelled={self.cancelled})"
        ]
        lines.extend(r.summary() for r in self.reports)
        return "\n".join(lines)


def run_rounds(
    lattice: Lattice,
    total_rounds: int,
    measure: MeasureFn,
    apply_ops: ApplyOpsFn,
    *,
    apply: Optional[ApplyFn] = None,
    history: Optional[SyndromeHistory] = None,
    cancel: Optional[CancelToken] = None,
    progress: bool = False,
) -> RunResult:
    """Run ``total_rounds`` full rounds of syndrome measurement.

    Parameters
    ----------
    lattice : Lattice
        Topology to measure. Never modified.
    total_rounds : int
        Number of complete rounds, >= 1.
    measure : callable
        ``measure(kind, data_ids) -> 0/1``.
    apply_ops : callable
        ``apply_ops() -> [(pauli, site_id), ...]``; polled after every measure.
    apply : callable, optional
        Receives each non-empty operation list, e.g. ``engine.apply``.
    history : SyndromeHistory, optional
        Record to append to; a fresh one is created otherwise.
    cancel : object with ``is_set()``, optional
        Checked before every step; the run stops early once it is set.
    progress : bool
        Show a tqdm progress bar over steps.
    """
    cursor = RoundCursor(total_rounds=total_rounds, syndrome_count=lattice.syndrome_count)
    if history is None:
        history = SyndromeHistory(lattice.syndrome_count)
    elif history.syndrome_count != lattice.syndrome_count:
        raise ValueError(
            f"History expects {history.syndrome_count} syndromes per round, lattice has {lattice.syndrome_count}."
        )
    result = RunResult(history=history)

    with tqdm(total=cursor.total_steps, desc="Syndrome steps", disable=not progress) as pbar:
        while not cursor.exhausted:
            if cancel is not None and cancel.is_set():
                logger.debug("Run cancelled at step %d of %d", cursor.step, cursor.total_steps)
                result.cancelled = True
                break

            site = lattice.syndrome(cursor.syndrome_index)
            bit = measure(site.kind, site.data_ids)
            report = history.record(bit)
            if report is not None:
                result.reports.append(report)

            ops = normalize_operations(apply_ops())
            if ops:
                result.operations.extend((cursor.step, pauli, target) for pauli, target in ops)
                if apply is not None:
                    apply(ops)

            cursor.advance()
            result.steps = cursor.step
            pbar.update(1)

    return result


__all__ = [
    "Operation",
    "MeasureFn",
    "ApplyOpsFn",
    "ApplyFn",
    "encode_syndrome",
    "decode_operations",
    "normalize_operations",
    "RoundCursor",
    "SyndromeSchedule",
    "RunResult",
    "run_rounds",
]
