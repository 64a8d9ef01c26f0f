"""
measurements.py
===============
Utility functions for looking at syndrome measurement streams.

Responsibilities
----------------
• Reshape a flat measurement stream into complete rounds
• Compute round-over-round detection events (slot-wise XOR)
• Render a syndrome window for diagnostics

Core API
--------
def syndrome_matrix(bits, syndrome_count) -> np.ndarray
def detection_events(matrix) -> np.ndarray
def format_syndrome(window) -> str

Used By
-------
`core/syndrome_history.py` and the `experiments/` scripts.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def syndrome_matrix(bits: Sequence[int] | np.ndarray, syndrome_count: int) -> np.ndarray:
    """Return complete rounds as a ``(rounds, syndrome_count)`` uint8 array.

    A trailing partial round is dropped.
    """
    if syndrome_count < 1:
        raise ValueError("syndrome_count must be >= 1.")
    flat = np.asarray(bits, dtype=np.uint8).ravel()
    rounds = flat.size // syndrome_count
    return flat[: rounds * syndrome_count].reshape(rounds, syndrome_count)


def detection_events(matrix: np.ndarray) -> np.ndarray:
    """Slot-wise XOR of each round with the round before it.

    Row ``k`` of the result compares round ``k + 1`` against round ``k``; an
    all-zero row means that round reproduced its predecessor exactly.
    """
    m = np.asarray(matrix, dtype=np.uint8)
    if m.ndim != 2:
        raise ValueError("detection_events expects a 2D (rounds, syndromes) array.")
    if m.shape[0] < 2:
        return np.zeros((0, m.shape[1]), dtype=np.uint8)
    return m[1:] ^ m[:-1]


def format_syndrome(window: Sequence[int] | np.ndarray) -> str:
    """One-line rendering: ``+`` for a 0 outcome, ``-`` for a 1 outcome."""
    return " ".join("+" if int(b) == 0 else "-" for b in np.asarray(window).ravel())


__all__ = ["syndrome_matrix", "detection_events", "format_syndrome"]
