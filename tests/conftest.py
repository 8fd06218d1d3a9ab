"""
Shared fixtures for engine and analytics testing.
"""

import pytest

from retirement_outlook.config import AnalyticsConfig
from retirement_outlook.models import SimulationParameters


@pytest.fixture
def default_profile():
    """Reference household: retires at 60, pension from 67, horizon 90."""
    return {
        "current_age": 54,
        "retirement_age": 60,
        "legal_retirement_age": 67,
        "end_age": 90,
        "current_assets": 600_000,
        "annual_savings": 18_000,
        "monthly_pension": 5_000,
        "average_roi": 0.07,
        "roi_volatility": 0.02,
        "average_inflation": 0.03,
        "inflation_volatility": 0.005,
        "capital_gains_tax": 26.25,
        "simulation_runs": 1000,
    }


@pytest.fixture
def deterministic_profile(default_profile):
    """Zero-volatility variant of the reference household."""
    profile = dict(default_profile)
    profile.update({"roi_volatility": 0.0, "inflation_volatility": 0.0, "simulation_runs": 50})
    return profile


@pytest.fixture
def flat_market():
    """No growth, no inflation, no tax: every cash flow is visible as-is."""
    return {
        "average_roi": 0.0,
        "roi_volatility": 0.0,
        "average_inflation": 0.0,
        "inflation_volatility": 0.0,
        "capital_gains_tax": 0.0,
        "annual_savings": 0,
        "monthly_pension": 0,
        "monthly_expenses": {},
        "annual_expenses": {},
        "simulation_runs": 1,
    }


@pytest.fixture
def bridge_profile():
    """Retire at 60, pension at 67, 30,000 yearly expenses, no inflation."""
    return SimulationParameters(
        current_age=55,
        retirement_age=60,
        legal_retirement_age=67,
        end_age=90,
        current_assets=500_000,
        annual_savings=20_000,
        monthly_pension=2_000,
        average_inflation=0.0,
        inflation_volatility=0.0,
        monthly_expenses={"living": 2_500},
        annual_expenses={},
        simulation_runs=200,
        seed=11,
    )


@pytest.fixture
def analytics_config():
    return AnalyticsConfig()


@pytest.fixture
def tolerance():
    """Tolerances for statistical tests."""
    return {
        "mean": 0.002,  # absolute, on annual rates
        "std": 0.003,
        "success_pct": 10.0,  # percentage points between independent 1000-run simulations
        "ks_pvalue": 0.001,
    }
