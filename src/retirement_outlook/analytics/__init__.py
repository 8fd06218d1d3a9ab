from .bridge import annual_need_at_retirement, compute_bridge
from .metrics import derive_metrics, success_count
from .recommendations import DEFAULT_RULES, RecommendationContext, Rule, recommend
from .scoring import composite_score, label_for_score

__all__ = [
    "annual_need_at_retirement",
    "compute_bridge",
    "derive_metrics",
    "success_count",
    "DEFAULT_RULES",
    "RecommendationContext",
    "Rule",
    "recommend",
    "composite_score",
    "label_for_score",
]
