"""
Derived report metrics from a simulation outcome.
"""

import logging
from typing import Optional

from ..config import AnalyticsConfig, get_analytics_config
from ..models import DerivedMetrics, SimulationOutcome, SimulationParameters
from .bridge import compute_bridge
from .recommendations import RecommendationContext, recommend, top_actions
from .scoring import (
    assets_entering_retirement,
    composite_score,
    label_for_score,
    liquidity_subscore,
    plan_health_reasons,
    savings_rate,
    spend_rate_subscore,
    withdrawal_rate,
)

logger = logging.getLogger(__name__)


def success_count(success_rate_pct: float, trials: int) -> int:
    """Number of successful trials implied by a success rate in percent."""
    return int(round(success_rate_pct / 100.0 * trials))


def derive_metrics(
    params: SimulationParameters,
    outcome: SimulationOutcome,
    config: Optional[AnalyticsConfig] = None,
) -> DerivedMetrics:
    """
    Compute score, label, bridge, highlights and recommendations.

    Pure function of its arguments; nothing in `outcome` is modified.
    """
    config = config or get_analytics_config()
    trials = params.simulation_runs
    success_pct = outcome.success_rate

    bridge = compute_bridge(params, config)
    start_assets = assets_entering_retirement(params, outcome)
    wr = withdrawal_rate(params, outcome)
    sr = savings_rate(params)

    spend_sub = spend_rate_subscore(wr, config)
    liquidity_sub = liquidity_subscore(bridge, start_assets)
    score = composite_score(success_pct, spend_sub, liquidity_sub, config.score_weights)
    label = label_for_score(score, config)

    ctx = RecommendationContext(
        success_rate=success_pct,
        withdrawal_rate=wr,
        savings_rate=sr,
        annual_expenses=params.combined_annual_expenses,
        annual_savings=params.annual_savings,
        capital_gains_tax=params.capital_gains_tax,
        roi_volatility=params.roi_volatility,
        years_to_retirement=params.effective_retirement_age - params.current_age,
        bridge=bridge,
    )
    recommendations = recommend(ctx, config)

    logger.debug(
        "Score %.1f (%s): success=%.1f spend=%.1f liquidity=%.1f",
        score, label, success_pct, spend_sub, liquidity_sub,
    )

    return DerivedMetrics(
        trials=trials,
        success_rate=success_pct,
        success_count=success_count(success_pct, trials),
        withdrawal_rate=wr,
        savings_rate=sr,
        score=score,
        label=label,
        reasons=plan_health_reasons(success_pct, sr, bridge, liquidity_sub, config),
        bridge=bridge,
        highlights=top_actions(recommendations),
        recommendations=recommendations,
    )
