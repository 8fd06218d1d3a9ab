"""
Reduction of raw trial data to percentile bands and a success rate.

Percentiles use linear interpolation between order statistics
(numpy's "linear" method): the q-th percentile of n sorted values sits at
index q/100 * (n - 1).
"""

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from .engine import RawTrialData

PERCENTILES: Sequence[int] = (10, 20, 50, 80, 90)


@dataclass(frozen=True)
class PercentileSeries:
    """Cross-trial percentiles per age plus the success rate (percent)."""
    ages: np.ndarray
    assets: Dict[str, np.ndarray]
    spending: Dict[str, np.ndarray]
    success_rate: float
    trials: int


def calculate_percentile(values: Sequence[float], percentile: float) -> float:
    """Single percentile of a 1-D sample."""
    return float(np.percentile(np.asarray(values, dtype=float), percentile, method="linear"))


def calculate_percentiles(data: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Percentiles across trials for each age.

    Args:
        data: Array of shape (n_ages, n_trials)

    Returns:
        {"p10": (n_ages,), "p20": ..., "p50": ..., "p80": ..., "p90": ...}
    """
    bands = np.percentile(data, PERCENTILES, axis=1, method="linear")
    out = {}
    for q, row in zip(PERCENTILES, bands):
        row = np.array(row, dtype=float)
        row.setflags(write=False)
        out[f"p{q}"] = row
    return out


def success_rate(failed: np.ndarray) -> float:
    """Share of trials that never exhausted their assets, in percent."""
    n = failed.shape[0]
    if n == 0:
        return 0.0
    return float((n - int(failed.sum())) / n * 100.0)


def aggregate(raw: RawTrialData) -> PercentileSeries:
    ages = np.array(raw.ages, dtype=int)
    ages.setflags(write=False)
    return PercentileSeries(
        ages=ages,
        assets=calculate_percentiles(raw.assets),
        spending=calculate_percentiles(raw.spending),
        success_rate=success_rate(raw.failed),
        trials=raw.trials,
    )
