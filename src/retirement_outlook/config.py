"""
Application configuration and constants.
"""

import json
import logging
import os
from functools import lru_cache
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

# API configuration
API_VERSION = "1.0.0"
API_TITLE = "Retirement Outlook API"
API_DESCRIPTION = "Monte Carlo retirement projection with planning score, bridge financing and recommendations"

# CORS configuration
CORS_ORIGINS = ["*"]  # In production, replace with specific origins
CORS_CREDENTIALS = True
CORS_METHODS = ["*"]
CORS_HEADERS = ["*"]

# Simulation defaults
DEFAULT_SIMULATIONS = 1000
MIN_SIMULATIONS = 1
MAX_SIMULATIONS = 100000

# Tax correction policy (percent)
TAX_RATE_CAP = 80.0
TAX_RATE_DECIMAL_SHIFT = 100.0

# Performance settings
USE_PARALLEL_PROCESSING = False  # Run trial chunks in a thread pool
CHUNK_SIZE = 1000  # Trials per independent random stream
MAX_WORKERS = 4

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Environment variable naming an optional JSON override for AnalyticsConfig
ANALYTICS_CONFIG_ENV = "RETIREMENT_ANALYTICS_CONFIG"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once using LOG_LEVEL / LOG_FORMAT."""
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", LOG_LEVEL), format=LOG_FORMAT)


# ============================
# Analytics configuration
# ============================
class ScoreWeights(BaseModel):
    """Weights of the three planning-score components (must sum to 1)."""
    model_config = ConfigDict(frozen=True)

    success_pct: float = 0.60
    spend_rate: float = 0.25
    liquidity: float = 0.15

    @model_validator(mode="after")
    def _check_sum(self):
        weights = (self.success_pct, self.spend_rate, self.liquidity)
        if any(w < 0 for w in weights):
            raise ValueError("score weights must be non-negative")
        if abs(sum(weights) - 1.0) > 1e-9:
            raise ValueError(f"score weights must sum to 1, got {sum(weights):.6f}")
        return self


class AnalyticsConfig(BaseModel):
    """Read-only configuration for the derived-analytics layer."""
    model_config = ConfigDict(frozen=True)

    score_weights: ScoreWeights = Field(default_factory=ScoreWeights)
    # label -> (low, high), closed intervals over the rounded score
    label_bands: Dict[str, Tuple[int, int]] = Field(
        default_factory=lambda: {
            "Needs Attention": (0, 59),
            "Moderate": (60, 79),
            "Strong": (80, 100),
        }
    )
    bridge_cash_bucket_years: int = Field(default=2, ge=0)

    # Spend-rate sub-score: 100 at or below the floor, 0 at or above the ceiling
    withdrawal_rate_floor: float = 0.03
    withdrawal_rate_ceiling: float = 0.08

    # Recommendation thresholds
    low_success_pct: float = 70.0
    target_success_pct: float = 85.0
    max_withdrawal_rate: float = 0.04
    min_savings_rate: float = 0.15
    expense_to_savings_multiple: float = 3.0
    high_tax_pct: float = 25.0
    high_volatility: float = 0.18
    max_recommendations: int = Field(default=6, ge=0)

    @model_validator(mode="after")
    def _check_bands(self):
        if self.withdrawal_rate_ceiling <= self.withdrawal_rate_floor:
            raise ValueError("withdrawal_rate_ceiling must exceed withdrawal_rate_floor")

        bands = sorted(self.label_bands.values())
        if not bands:
            raise ValueError("at least one label band is required")
        if bands[0][0] != 0 or bands[-1][1] != 100:
            raise ValueError("label bands must cover [0, 100]")
        for low, high in bands:
            if low > high:
                raise ValueError(f"label band [{low}, {high}] is empty")
        for (prev_low, prev_high), (low, _) in zip(bands, bands[1:]):
            # adjacent integer bands or a single shared boundary
            if low > prev_high + 1:
                raise ValueError(f"label bands leave a gap between {prev_high} and {low}")
            if low < prev_high or low == prev_low:
                raise ValueError(f"label bands overlap at {low}..{prev_high}")
        return self

    def ordered_bands(self):
        """Bands as (label, low, high), highest band first."""
        return sorted(
            ((label, low, high) for label, (low, high) in self.label_bands.items()),
            key=lambda item: item[1],
            reverse=True,
        )


DEFAULT_ANALYTICS_CONFIG = AnalyticsConfig()


@lru_cache(maxsize=None)
def get_analytics_config() -> AnalyticsConfig:
    """
    Load the analytics configuration once per process.

    A JSON file named by RETIREMENT_ANALYTICS_CONFIG (environment or .env)
    overrides the defaults field by field.
    """
    load_dotenv()
    path = os.getenv(ANALYTICS_CONFIG_ENV)
    if not path:
        return DEFAULT_ANALYTICS_CONFIG

    with open(path, "r", encoding="utf-8") as fh:
        overrides = json.load(fh)
    logger.info("Loaded analytics configuration overrides from %s", path)
    return AnalyticsConfig(**overrides)
