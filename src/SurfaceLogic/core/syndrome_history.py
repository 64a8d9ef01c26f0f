"""syndrome_history.py
=====================
Implements :class:`SyndromeHistory`, the record of syndrome measurement
results, and the round-over-round parity-change detector built on top of it.

Every reported bit is appended in arrival order. Whenever a round completes
(the number of bits becomes a multiple of ``syndrome_count``) the round just
finished is compared slot by slot with the previous round:

    first round      -> becomes the baseline, nothing reported
    identical round  -> nothing reported
    any slot differs -> ParityChangeReport(before, after)

In all cases the finished round replaces the baseline, so the comparison is
always against the immediately preceding round. A pattern that changes once
and then stays put is therefore reported once.

This is a change detector, not a decoder. It never tries to locate the
physical error behind a report.

Memory
------
With ``keep_history=True`` (default) every bit is kept for later analysis.
With ``keep_history=False`` only the round in progress and the baseline are
held, so memory stays constant however many rounds are run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from numbers import Integral
from typing import List, Optional

import numpy as np

from ..utils.measurements import format_syndrome, syndrome_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ParityChangeReport:
    """Round ``round_index`` differs from the round before it.

    Attributes:
        round_index: zero-based index of the round that just completed.
        before:      syndrome window of round ``round_index - 1``.
        after:       syndrome window of round ``round_index``.
    """

    round_index: int
    before: np.ndarray
    after: np.ndarray

    @property
    def changed_indices(self) -> List[int]:
        """Syndrome indices whose outcome flipped."""
        return [int(i) for i in np.flatnonzero(self.before != self.after)]

    def summary(self) -> str:
        return "\n".join([
            f"Parity changes detected (round {self.round_index}):",
            "======= BEFORE ========",
            format_syndrome(self.before),
            "======= AFTER ========",
            format_syndrome(self.after),
            f"Changed syndromes: {self.changed_indices}",
        ])

    def __repr__(self) -> str:
        return f"ParityChangeReport(round={self.round_index}, changed={self.changed_indices})"


@dataclass(eq=False)
class SyndromeHistory:
    """Append-only syndrome record with a last-round comparison baseline."""

    syndrome_count: int
    keep_history: bool = True
    _bits: List[int] = field(init=False, repr=False, default_factory=list)
    _window: np.ndarray = field(init=False, repr=False)
    _baseline: Optional[np.ndarray] = field(init=False, repr=False, default=None)
    _count: int = field(init=False, repr=False, default=0)

    def __post_init__(self) -> None:
        if isinstance(self.syndrome_count, bool) or not isinstance(self.syndrome_count, Integral) or self.syndrome_count < 1:
            raise ValueError("syndrome_count must be a positive integer.")
        self._window = np.zeros(self.syndrome_count, dtype=np.uint8)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record(self, bit) -> Optional[ParityChangeReport]:
        """Append one measurement result; return a report if a round just changed."""
        if not isinstance(bit, (Integral, np.bool_)) or int(bit) not in (0, 1):
            raise ValueError(f"Syndrome result must be 0 or 1, got {bit!r}.")
        value = int(bit)

        self._window[self._count % self.syndrome_count] = value
        self._count += 1
        if self.keep_history:
            self._bits.append(value)

        if self._count % self.syndrome_count != 0:
            return None
        return self._close_round()

    def _close_round(self) -> Optional[ParityChangeReport]:
        current = self._window.copy()
        round_index = self.rounds_completed - 1
        previous, self._baseline = self._baseline, current

        if previous is None:
            logger.debug("Round %d stored as baseline", round_index)
            return None
        if np.array_equal(previous, current):
            logger.debug("Round %d: no parity change", round_index)
            return None

        # The report gets its own arrays so callers cannot reach the baseline.
        report = ParityChangeReport(round_index=round_index, before=previous.copy(), after=current.copy())
        logger.debug("Round %d: parity changed at %s", round_index, report.changed_indices)
        return report

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def count(self) -> int:
        """Number of bits recorded so far."""
        return self._count

    @property
    def rounds_completed(self) -> int:
        return self._count // self.syndrome_count

    @property
    def baseline(self) -> Optional[np.ndarray]:
        """Copy of the last completed round, or None before the first one."""
        return None if self._baseline is None else self._baseline.copy()

    @property
    def bits(self) -> np.ndarray:
        if not self.keep_history:
            raise RuntimeError("History not kept; construct with keep_history=True.")
        return np.asarray(self._bits, dtype=np.uint8)

    def as_matrix(self) -> np.ndarray:
        """Completed rounds as a ``rounds x syndrome_count`` array."""
        return syndrome_matrix(self.bits, self.syndrome_count)

    def __len__(self) -> int:
        return self._count


__all__ = ["ParityChangeReport", "SyndromeHistory"]
