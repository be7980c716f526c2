"""Martin metrics as pure functions.

- Abstractness (A): abstract units / units with known abstractness
- Instability (I): FanOut / (FanIn + FanOut)
- Main Sequence Distance (D): |A + I - 1|
- Distance overage: D above the allowed maximum

All values are rounded to 3 decimal places.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

PRECISION = 3


def compute_abstractness(num_abstract: int, num_concrete: int) -> float:
    """Compute abstractness A = Na / (Na + Nc).

    Units with unknown abstractness are not counted on either side.

    Returns:
        Abstractness in [0, 1], 0.0 when no unit has a known status
    """
    total = num_abstract + num_concrete
    if total == 0:
        return 0.0
    return round(num_abstract / total, PRECISION)


def compute_instability(fan_in: int, fan_out: int) -> float:
    """Compute instability I = FanOut / (FanIn + FanOut).

    Args:
        fan_in: Distinct external units depending on the module
        fan_out: Distinct external units the module depends on

    Returns:
        Instability in [0, 1], 0.0 for an isolated module
    """
    total = fan_in + fan_out
    if total == 0:
        return 0.0
    return round(fan_out / total, PRECISION)


def compute_main_seq_distance(abstractness: float, instability: float) -> float:
    """Compute main sequence distance D = |A + I - 1|.

    The main sequence is the line from (0, 1) to (1, 0) in the A-I plane:
    - D ≈ 0: balanced module
    - D ≈ 1 with A=0, I=0: Zone of Pain (stable but concrete)
    - D ≈ 1 with A=1, I=1: Zone of Uselessness (abstract but unstable)
    """
    return round(abs(abstractness + instability - 1.0), PRECISION)


def compute_overage(distance: float, max_allowable_distance: Optional[float]) -> float:
    """How far D exceeds the allowed maximum; 0.0 when within bounds or unset."""
    if max_allowable_distance is None:
        return 0.0
    return round(max(0.0, distance - max_allowable_distance), PRECISION)


def compute_mean(values: Iterable[float]) -> float:
    """Mean of the values, 0.0 for an empty input."""
    arr = np.fromiter(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return round(float(arr.mean()), PRECISION)


@dataclass(frozen=True)
class MetricSummary:
    """Distribution of one metric across modules."""

    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    maximum: float = 0.0
    p90: float = 0.0


def summarize(values: Iterable[float]) -> MetricSummary:
    """Summary statistics for a metric across modules."""
    arr = np.fromiter(values, dtype=float)
    if arr.size == 0:
        return MetricSummary()
    return MetricSummary(
        count=int(arr.size),
        mean=round(float(arr.mean()), PRECISION),
        median=round(float(np.median(arr)), PRECISION),
        maximum=round(float(arr.max()), PRECISION),
        p90=round(float(np.percentile(arr, 90)), PRECISION),
    )
