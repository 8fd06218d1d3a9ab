"""
Input corrections applied before validation.

The tax-rate rule is a heuristic guess at user intent (a misplaced decimal
point), not a financial transform. It lives here so that it can be changed
without touching the simulation math.
"""

import logging

from .config import TAX_RATE_CAP, TAX_RATE_DECIMAL_SHIFT

logger = logging.getLogger(__name__)


def normalize_tax_rate(value: float) -> float:
    """
    Normalize a capital-gains tax rate given in percent.

    Values above 100 are read as a misplaced decimal point and divided by 100
    (2625 -> 26.25). The result is capped at TAX_RATE_CAP (9999 -> 80).
    Negative values are passed through for validation to reject.
    """
    rate = float(value)
    if rate > 100:
        corrected = rate / TAX_RATE_DECIMAL_SHIFT
        logger.warning("Capital gains tax %.2f%% looks mis-scaled, using %.2f%%", rate, corrected)
        rate = corrected
    if rate > TAX_RATE_CAP:
        logger.warning("Capital gains tax %.2f%% capped at %.2f%%", rate, TAX_RATE_CAP)
        rate = TAX_RATE_CAP
    return rate
