"""
Boundary checks for simulation inputs.
"""

import math
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .config import MAX_SIMULATIONS, MIN_SIMULATIONS, TAX_RATE_CAP
from .errors import InvalidParameterError
from .models import SimulationParameters

MONETARY_FIELDS = ("current_assets", "annual_savings", "monthly_pension")
VOLATILITY_FIELDS = ("roi_volatility", "inflation_volatility")
RATE_FIELDS = ("average_roi", "average_inflation")


def _check_amount(field: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidParameterError(field, "must be a finite number")
    if value < 0:
        raise InvalidParameterError(field, "must be non-negative")


def coerce_parameters(params: Union[SimulationParameters, Mapping[str, Any]]) -> SimulationParameters:
    """Build SimulationParameters from a mapping, reporting the first bad field."""
    if isinstance(params, SimulationParameters):
        return params
    try:
        return SimulationParameters(**params)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidParameterError(field, first.get("msg", "invalid value")) from exc


def check_parameters(params: SimulationParameters) -> SimulationParameters:
    """Reject out-of-domain inputs before any trial is simulated."""
    if params.end_age < params.current_age:
        raise InvalidParameterError(
            "end_age", f"horizon {params.end_age} is before current age {params.current_age}"
        )
    if params.retirement_age < params.current_age:
        raise InvalidParameterError(
            "retirement_age",
            f"retirement age {params.retirement_age} is before current age {params.current_age}",
        )
    if not MIN_SIMULATIONS <= params.simulation_runs <= MAX_SIMULATIONS:
        raise InvalidParameterError(
            "simulation_runs",
            f"must be between {MIN_SIMULATIONS} and {MAX_SIMULATIONS}, got {params.simulation_runs}",
        )

    for name in MONETARY_FIELDS + VOLATILITY_FIELDS:
        _check_amount(name, getattr(params, name))
    for name in RATE_FIELDS:
        if not math.isfinite(getattr(params, name)):
            raise InvalidParameterError(name, "must be a finite number")
    _check_amount("capital_gains_tax", params.capital_gains_tax)
    if params.capital_gains_tax > TAX_RATE_CAP:
        raise InvalidParameterError("capital_gains_tax", f"must not exceed {TAX_RATE_CAP:g}%")
    if params.average_roi <= -1:
        raise InvalidParameterError("average_roi", "must be above -100%")

    for category, amount in params.monthly_expenses.items():
        _check_amount(f"monthly_expenses.{category}", amount)
    for category, amount in params.annual_expenses.items():
        _check_amount(f"annual_expenses.{category}", amount)
    for i, expense in enumerate(params.custom_expenses):
        _check_amount(f"custom_expenses.{i}.amount", expense.amount)
    for i, income in enumerate(params.one_time_incomes):
        _check_amount(f"one_time_incomes.{i}.amount", income.amount)

    return params
