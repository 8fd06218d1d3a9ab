"""
Planning score: a 0-100 blend of success rate, withdrawal sustainability
and bridge liquidity, bucketed into qualitative labels.
"""

import math
from typing import List, Optional

from ..config import AnalyticsConfig, ScoreWeights
from ..models import BridgeFinancing, SimulationOutcome, SimulationParameters
from .bridge import annual_need_at_retirement


def assets_entering_retirement(params: SimulationParameters, outcome: SimulationOutcome) -> float:
    """Median assets at the end of the last working year (current assets if already retired)."""
    idx = outcome.index_of_age(params.effective_retirement_age - 1)
    if params.effective_retirement_age <= params.current_age or idx is None:
        return float(params.current_assets)
    return float(outcome.asset_percentiles.p50[idx])


def withdrawal_rate(params: SimulationParameters, outcome: SimulationOutcome) -> Optional[float]:
    """
    First retirement year's net portfolio need over assets entering retirement.

    Returns 0.0 when income covers expenses and None when there is a need
    but nothing to draw from.
    """
    need = annual_need_at_retirement(params)
    if params.effective_retirement_age >= params.legal_retirement_age:
        need -= params.annual_pension
    if need <= 0:
        return 0.0
    assets = assets_entering_retirement(params, outcome)
    if assets <= 0:
        return None
    return need / assets


def savings_rate(params: SimulationParameters) -> float:
    """Savings over savings plus yearly expenses."""
    total = params.annual_savings + params.combined_annual_expenses
    if total <= 0:
        return 0.0
    return params.annual_savings / total


def spend_rate_subscore(rate: Optional[float], config: AnalyticsConfig) -> float:
    if rate is None:
        return 0.0
    floor, ceiling = config.withdrawal_rate_floor, config.withdrawal_rate_ceiling
    scaled = (ceiling - rate) / (ceiling - floor)
    return 100.0 * min(1.0, max(0.0, scaled))


def liquidity_subscore(bridge: Optional[BridgeFinancing], assets_at_retirement: float) -> float:
    if bridge is None or bridge.cash_need <= 0:
        return 100.0
    return 100.0 * min(1.0, max(0.0, assets_at_retirement / bridge.cash_need))


def composite_score(success_pct: float, spend_sub: float, liquidity_sub: float,
                    weights: ScoreWeights) -> float:
    score = (
        weights.success_pct * success_pct
        + weights.spend_rate * spend_sub
        + weights.liquidity * liquidity_sub
    )
    return min(100.0, max(0.0, score))


def round_score(score: float) -> int:
    """Half-up rounding of a clamped score."""
    return int(math.floor(min(100.0, max(0.0, score)) + 0.5))


def label_for_score(score: float, config: AnalyticsConfig) -> str:
    """
    Label of the band containing the rounded score.

    Bands are scanned from the highest down, so a score on a shared
    boundary belongs to the higher band.
    """
    rounded = round_score(score)
    for label, low, high in config.ordered_bands():
        if low <= rounded <= high:
            return label
    raise ValueError(f"no label band contains score {rounded}")


def plan_health_reasons(success_pct: float, savings: float, bridge: Optional[BridgeFinancing],
                        liquidity_sub: float, config: AnalyticsConfig) -> List[str]:
    reasons = []
    if success_pct >= config.target_success_pct:
        reasons.append("high success probability")
    if savings >= config.min_savings_rate:
        reasons.append("solid savings rate")
    if bridge is not None and liquidity_sub >= 50.0:
        reasons.append("moderate bridge drawdown")
    if not reasons:
        reasons.append("balanced assumptions")
    return reasons
