from .engine import Engine, RawTrialData, simulate
from .percentiles import PercentileSeries, aggregate, calculate_percentile, calculate_percentiles
from .random_paths import RandomPathGenerator, lognormal_params_from_arithmetic

__all__ = [
    "Engine",
    "RawTrialData",
    "simulate",
    "PercentileSeries",
    "aggregate",
    "calculate_percentile",
    "calculate_percentiles",
    "RandomPathGenerator",
    "lognormal_params_from_arithmetic",
]
