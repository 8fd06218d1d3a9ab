"""
Strict schema for the combined report payload handed to renderers.

Every field carries its documented range; the capital gains tax passes
through the same correction as the simulation input.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .config import API_VERSION, MAX_SIMULATIONS, MIN_SIMULATIONS
from .corrections import normalize_tax_rate
from .models import BridgeFinancing, DerivedMetrics, Recommendation, SimulationOutcome, SimulationParameters

MIN_AGE = 18
MAX_AGE = 120


# ============================
# Section Models
# ============================
class Person(BaseModel):
    current_age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    retire_age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    pension_age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    horizon_age: int = Field(ge=MIN_AGE, le=MAX_AGE)


class Finances(BaseModel):
    current_assets: float = Field(ge=0, le=100_000_000)
    annual_savings: float = Field(ge=0, le=1_000_000)
    expected_monthly_pension: float = Field(ge=0, le=50_000)


class SpendingBreakdown(BaseModel):
    monthly: Dict[str, float]
    annual: Dict[str, float]

    @field_validator("monthly")
    @classmethod
    def _monthly_range(cls, value):
        for name, amount in value.items():
            if not 0 <= amount <= 10_000:
                raise ValueError(f"monthly expense {name}={amount} outside [0, 10000]")
        return value

    @field_validator("annual")
    @classmethod
    def _annual_range(cls, value):
        for name, amount in value.items():
            if not 0 <= amount <= 100_000:
                raise ValueError(f"annual expense {name}={amount} outside [0, 100000]")
        return value


class Assumptions(BaseModel):
    roi_mean: float = Field(ge=-0.2, le=0.3)
    roi_stdev: float = Field(ge=0, le=0.5)
    inflation_mean: float = Field(ge=-0.05, le=0.15)
    inflation_stdev: float = Field(ge=0, le=0.1)
    cap_gains_tax_rate_pct: float = Field(ge=0)
    mc_runs: int = Field(ge=MIN_SIMULATIONS, le=MAX_SIMULATIONS)

    @field_validator("cap_gains_tax_rate_pct")
    @classmethod
    def _correct_tax(cls, value: float) -> float:
        return normalize_tax_rate(value)


class Milestone(BaseModel):
    age: int
    p10: float
    p50: float
    p90: float


class Projections(BaseModel):
    milestones: List[Milestone]
    success_rate_pct: float = Field(ge=0, le=100)


class Summary(BaseModel):
    plan_health_score: float = Field(ge=0, le=100)
    plan_health_label: str
    plan_health_reasons: List[str] = Field(default_factory=list)
    success_probability_pct: float = Field(ge=0, le=100)
    success_count: int = Field(ge=0)
    bridge: Optional[BridgeFinancing] = None
    top_actions: List[str] = Field(default_factory=list)


class Metadata(BaseModel):
    report_id: str = Field(default_factory=lambda: f"RPT-{uuid.uuid4().hex[:12].upper()}")
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = API_VERSION


class ReportData(BaseModel):
    person: Person
    finances: Finances
    spending: SpendingBreakdown
    assumptions: Assumptions
    projections: Projections
    summary: Summary
    recommendations: List[Recommendation]
    metadata: Metadata = Field(default_factory=Metadata)
    locale: Literal["de", "en"] = "en"


def build_report_data(
    params: SimulationParameters,
    outcome: SimulationOutcome,
    metrics: DerivedMetrics,
    locale: str = "en",
) -> ReportData:
    """
    Assemble and validate the payload for report rendering.

    Raises:
        pydantic.ValidationError: when a field is outside its documented range
    """
    bands = outcome.asset_percentiles
    monthly = dict(params.monthly_expenses)
    annual = dict(params.annual_expenses)
    for expense in params.custom_expenses:
        target = monthly if expense.interval == "monthly" else annual
        target[expense.name] = target.get(expense.name, 0.0) + expense.amount

    return ReportData(
        person=Person(
            current_age=params.current_age,
            retire_age=params.retirement_age,
            pension_age=params.legal_retirement_age,
            horizon_age=params.end_age,
        ),
        finances=Finances(
            current_assets=params.current_assets,
            annual_savings=params.annual_savings,
            expected_monthly_pension=params.monthly_pension,
        ),
        spending=SpendingBreakdown(monthly=monthly, annual=annual),
        assumptions=Assumptions(
            roi_mean=params.average_roi,
            roi_stdev=params.roi_volatility,
            inflation_mean=params.average_inflation,
            inflation_stdev=params.inflation_volatility,
            cap_gains_tax_rate_pct=params.capital_gains_tax,
            mc_runs=params.simulation_runs,
        ),
        projections=Projections(
            milestones=[
                Milestone(age=age, p10=bands.p10[i], p50=bands.p50[i], p90=bands.p90[i])
                for i, age in enumerate(outcome.ages)
            ],
            success_rate_pct=outcome.success_rate,
        ),
        summary=Summary(
            plan_health_score=metrics.score,
            plan_health_label=metrics.label,
            plan_health_reasons=metrics.reasons,
            success_probability_pct=metrics.success_rate,
            success_count=metrics.success_count,
            bridge=metrics.bridge,
            top_actions=metrics.highlights,
        ),
        recommendations=metrics.recommendations,
        locale=locale,
    )
