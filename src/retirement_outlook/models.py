"""
Pydantic models for the retirement outlook engine.
All input, output and report data models.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_SIMULATIONS
from .corrections import normalize_tax_rate


# ============================
# Input Models
# ============================
class OneTimeIncome(BaseModel):
    """Lump-sum inflow credited at the start of the given age (inheritance, home sale, etc.)"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    age: int
    amount: float
    description: str = ""


class CustomExpense(BaseModel):
    """Named recurring expense, either monthly or once a year"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: str
    amount: float
    interval: Literal["monthly", "annual"] = "monthly"


def _default_monthly_expenses() -> Dict[str, float]:
    return {
        "health": 1100.0,
        "food": 1200.0,
        "entertainment": 600.0,
        "shopping": 480.0,
        "utilities": 800.0,
    }


def _default_annual_expenses() -> Dict[str, float]:
    return {
        "vacations": 6000.0,
        "repairs": 4000.0,
        "carMaintenance": 2000.0,
    }


class SimulationParameters(BaseModel):
    """Complete household profile and market assumptions for one simulation run"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    # Personal information
    current_age: int = 54
    retirement_age: int = 60
    legal_retirement_age: int = 67  # statutory pension start
    end_age: int = 90

    # Assets & income
    current_assets: float = 600_000
    annual_savings: float = 18_000  # accumulation phase only
    monthly_pension: float = 5_000
    one_time_incomes: List[OneTimeIncome] = Field(default_factory=list)

    # Market assumptions (decimals)
    average_roi: float = 0.07
    roi_volatility: float = 0.02
    average_inflation: float = 0.03
    inflation_volatility: float = 0.005
    capital_gains_tax: float = 26.25  # percent

    # Expenses
    monthly_expenses: Dict[str, float] = Field(default_factory=_default_monthly_expenses)
    annual_expenses: Dict[str, float] = Field(default_factory=_default_annual_expenses)
    custom_expenses: List[CustomExpense] = Field(default_factory=list)

    # Simulation settings
    simulation_runs: int = DEFAULT_SIMULATIONS
    seed: Optional[int] = None

    @field_validator("capital_gains_tax")
    @classmethod
    def _normalize_tax(cls, value: float) -> float:
        return normalize_tax_rate(value)

    @property
    def tax_fraction(self) -> float:
        """Capital gains tax as a decimal in [0, 1]."""
        return max(0.0, self.capital_gains_tax / 100.0)

    @property
    def effective_retirement_age(self) -> int:
        return max(self.retirement_age, self.current_age)

    @property
    def total_monthly_expenses(self) -> float:
        custom = sum(e.amount for e in self.custom_expenses if e.interval == "monthly")
        return sum(self.monthly_expenses.values()) + custom

    @property
    def total_annual_expenses(self) -> float:
        custom = sum(e.amount for e in self.custom_expenses if e.interval == "annual")
        return sum(self.annual_expenses.values()) + custom

    @property
    def combined_annual_expenses(self) -> float:
        """Yearly spending in today's money: monthly total x 12 plus annual total."""
        return self.total_monthly_expenses * 12.0 + self.total_annual_expenses

    @property
    def combined_monthly_expenses(self) -> float:
        return self.total_monthly_expenses + self.total_annual_expenses / 12.0

    @property
    def annual_pension(self) -> float:
        return self.monthly_pension * 12.0


# ============================
# Response Models
# ============================
class PercentileBands(BaseModel):
    """Percentile series aligned to SimulationOutcome.ages"""
    p10: List[float]
    p20: List[float]
    p50: List[float]
    p80: List[float]
    p90: List[float]


class SimulationOutcome(BaseModel):
    """Results from a Monte Carlo simulation"""
    ages: List[int]
    asset_percentiles: PercentileBands
    spending_percentiles: PercentileBands
    success_rate: float  # percent, 0-100
    params: SimulationParameters

    def index_of_age(self, age: int) -> Optional[int]:
        idx = age - self.ages[0] if self.ages else -1
        if 0 <= idx < len(self.ages):
            return idx
        return None


class BridgeFinancing(BaseModel):
    """Cash needed between early retirement and the start of the statutory pension"""
    start_age: int
    end_age: int
    years: int
    annual_need: float
    cash_need: float
    cash_bucket_years: int
    cash_bucket_share_pct: float
    portfolio_share_pct: float


class Recommendation(BaseModel):
    """One prioritized action for the household"""
    key: str
    title: str
    category: str
    body: str
    impact: Literal["High", "Medium", "Low"]


class DerivedMetrics(BaseModel):
    """Report-ready analytics derived from a simulation outcome"""
    trials: int
    success_rate: float  # percent
    success_count: int
    withdrawal_rate: Optional[float]  # None when the need is positive but no assets remain
    savings_rate: float
    score: float
    label: str
    reasons: List[str]
    bridge: Optional[BridgeFinancing] = None
    highlights: List[str] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
