"""
Rule-based recommendations ranked by impact.

Rules are declared in priority order. Each rule has a key and a key is
emitted at most once, so two rules describing the same action (for example
a low success rate and a low savings rate both asking for more savings) yield
a single entry. The result is sorted by impact, ties broken by declaration
order.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import AnalyticsConfig
from ..models import BridgeFinancing, Recommendation

IMPACT_ORDER = {"High": 0, "Medium": 1, "Low": 2}


@dataclass(frozen=True)
class RecommendationContext:
    """Inputs the rules look at."""
    success_rate: float  # percent
    withdrawal_rate: Optional[float]  # None = need with no assets
    savings_rate: float
    annual_expenses: float
    annual_savings: float
    capital_gains_tax: float  # percent
    roi_volatility: float
    years_to_retirement: int
    bridge: Optional[BridgeFinancing] = None


Condition = Callable[[RecommendationContext, AnalyticsConfig], bool]


@dataclass(frozen=True)
class Rule:
    key: str
    title: str
    category: str
    body: str
    impact: str
    condition: Condition
    # Optional override of `impact` for the given context
    impact_for: Optional[Callable[[RecommendationContext, AnalyticsConfig], str]] = None

    def evaluate(self, ctx: RecommendationContext, config: AnalyticsConfig) -> Optional[Recommendation]:
        if not self.condition(ctx, config):
            return None
        impact = self.impact_for(ctx, config) if self.impact_for else self.impact
        return Recommendation(
            key=self.key, title=self.title, category=self.category, body=self.body, impact=impact
        )


def _withdrawal_too_high(ctx: RecommendationContext, cfg: AnalyticsConfig) -> bool:
    return ctx.withdrawal_rate is None or ctx.withdrawal_rate > cfg.max_withdrawal_rate


DEFAULT_RULES: Sequence[Rule] = (
    Rule(
        key="increase_savings",
        title="Increase Savings Rate",
        category="Savings Strategy",
        body=(
            "Your current success rate indicates potential challenges. Consider increasing your "
            "annual savings by 10-20% to improve retirement security."
        ),
        impact="High",
        condition=lambda ctx, cfg: ctx.success_rate < cfg.low_success_pct,
    ),
    Rule(
        key="delay_retirement",
        title="Delay Retirement",
        category="Timing",
        body=(
            "Working an additional 2-3 years could significantly improve your success rate by "
            "allowing more time for asset accumulation."
        ),
        impact="High",
        condition=lambda ctx, cfg: ctx.success_rate < cfg.low_success_pct,
    ),
    Rule(
        key="reduce_withdrawal",
        title="Lower the Withdrawal Rate",
        category="Withdrawal Strategy",
        body=(
            "Your planned first-year withdrawal is high relative to your portfolio. Trimming "
            "retirement spending or building a larger buffer keeps withdrawals sustainable."
        ),
        impact="High",
        condition=_withdrawal_too_high,
    ),
    Rule(
        key="fund_bridge",
        title="Build a Bridge Cash Reserve",
        category="Bridge Strategy",
        body=(
            "There is a gap between your retirement and the start of your pension. Hold the first "
            "years of expenses in cash so that market drops do not force sales during the bridge."
        ),
        impact="Medium",
        condition=lambda ctx, cfg: ctx.bridge is not None,
    ),
    Rule(
        key="increase_savings",
        title="Increase Savings Rate",
        category="Savings Strategy",
        body=(
            "Your savings rate is below 15% of your yearly outlays. Automatic increases or "
            "lifestyle adjustments raise both the buffer and the success rate."
        ),
        impact="High",
        condition=lambda ctx, cfg: ctx.years_to_retirement > 0 and ctx.savings_rate < cfg.min_savings_rate,
    ),
    Rule(
        key="optimize_mix",
        title="Optimize Investment Mix",
        category="Investment Strategy",
        body=(
            "Review your asset allocation to ensure appropriate balance between growth and "
            "stability for your risk tolerance."
        ),
        impact="Medium",
        condition=lambda ctx, cfg: cfg.low_success_pct <= ctx.success_rate < cfg.target_success_pct,
    ),
    Rule(
        key="review_spending",
        title="Review Spending Plan",
        category="Expense Management",
        body=(
            "Your expenses are high relative to savings. Consider reviewing discretionary spending "
            "to improve financial flexibility."
        ),
        impact="Medium",
        condition=lambda ctx, cfg: ctx.annual_expenses > ctx.annual_savings * cfg.expense_to_savings_multiple,
    ),
    Rule(
        key="tax_deferred",
        title="Maximize Tax-Deferred Contributions",
        category="Tax Planning",
        body=(
            "Ensure you are taking full advantage of tax-advantaged retirement accounts to reduce "
            "current tax liability and enhance long-term growth."
        ),
        impact="Medium",
        condition=lambda ctx, cfg: ctx.capital_gains_tax > 0,
        impact_for=lambda ctx, cfg: "High" if ctx.capital_gains_tax > cfg.high_tax_pct else "Medium",
    ),
    Rule(
        key="reduce_volatility",
        title="Consider Volatility Reduction",
        category="Risk Management",
        body=(
            "Your portfolio has high volatility. As you approach retirement, consider gradually "
            "shifting to more stable investments."
        ),
        impact="Medium",
        condition=lambda ctx, cfg: ctx.roi_volatility > cfg.high_volatility,
    ),
    Rule(
        key="review_insurance",
        title="Review Insurance Coverage",
        category="Protection",
        body=(
            "Evaluate current insurance policies including health, long-term care, and life "
            "insurance to ensure adequate protection."
        ),
        impact="Low",
        condition=lambda ctx, cfg: True,
    ),
)


def recommend(
    ctx: RecommendationContext,
    config: AnalyticsConfig,
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> List[Recommendation]:
    """Evaluate `rules` and return the triggered ones, highest impact first."""
    seen = set()
    ranked = []
    for priority, rule in enumerate(rules):
        if rule.key in seen:
            continue
        rec = rule.evaluate(ctx, config)
        if rec is None:
            continue
        seen.add(rule.key)
        ranked.append((IMPACT_ORDER[rec.impact], priority, rec))

    ranked.sort(key=lambda item: (item[0], item[1]))
    return [rec for _, _, rec in ranked][: config.max_recommendations]


def top_actions(recommendations: Sequence[Recommendation], n: int = 3) -> List[str]:
    return [rec.title for rec in recommendations[:n]]
