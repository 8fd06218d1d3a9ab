"""
Call contracts for collaborators: run a simulation, derive report metrics.
"""

from typing import Any, Mapping, Optional, Union

from .analytics import derive_metrics
from .config import AnalyticsConfig
from .models import DerivedMetrics, PercentileBands, SimulationOutcome, SimulationParameters
from .monte_carlo import Engine, PercentileSeries, aggregate
from .validation import check_parameters, coerce_parameters

ParamsLike = Union[SimulationParameters, Mapping[str, Any]]


def _bands(series) -> PercentileBands:
    return PercentileBands(**{name: values.tolist() for name, values in series.items()})


def to_outcome(params: SimulationParameters, series: PercentileSeries) -> SimulationOutcome:
    return SimulationOutcome(
        ages=[int(a) for a in series.ages],
        asset_percentiles=_bands(series.assets),
        spending_percentiles=_bands(series.spending),
        success_rate=series.success_rate,
        params=params,
    )


def run_simulation(params: ParamsLike, parallel: Optional[bool] = None) -> SimulationOutcome:
    """
    Validate, simulate and aggregate.

    Raises:
        InvalidParameterError: before any trial runs, naming the offending field
    """
    params = check_parameters(coerce_parameters(params))
    raw = Engine(params, parallel=parallel).run()
    return to_outcome(params, aggregate(raw))


def derive_report_metrics(
    params: ParamsLike,
    outcome: SimulationOutcome,
    config: Optional[AnalyticsConfig] = None,
) -> DerivedMetrics:
    params = check_parameters(coerce_parameters(params))
    return derive_metrics(params, outcome, config)
