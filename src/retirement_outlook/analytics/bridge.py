"""
Bridge financing between early retirement and the statutory pension.
"""

from typing import Optional

from ..config import AnalyticsConfig
from ..models import BridgeFinancing, SimulationParameters


def annual_need_at_retirement(params: SimulationParameters) -> float:
    """
    Yearly living expenses at the retirement age.

    Today's expenses compounded at the mean inflation rate for every year
    until retirement, the same schedule the engine applies in expectation.
    """
    years = params.effective_retirement_age - params.current_age
    return params.combined_annual_expenses * (1.0 + params.average_inflation) ** years


def compute_bridge(params: SimulationParameters, config: AnalyticsConfig) -> Optional[BridgeFinancing]:
    """Cash needed until the pension starts, or None when there is no gap."""
    start = params.effective_retirement_age
    end = params.legal_retirement_age
    if end <= start:
        return None

    years = end - start
    annual_need = annual_need_at_retirement(params)
    bucket_years = min(years, config.bridge_cash_bucket_years)
    bucket_share = bucket_years / years * 100.0

    return BridgeFinancing(
        start_age=start,
        end_age=end,
        years=years,
        annual_need=annual_need,
        cash_need=years * annual_need,
        cash_bucket_years=bucket_years,
        cash_bucket_share_pct=bucket_share,
        portfolio_share_pct=100.0 - bucket_share,
    )
