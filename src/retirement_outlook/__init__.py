"""
Monte Carlo retirement outlook: simulation engine and derived analytics.
"""

from .errors import InvalidParameterError
from .models import DerivedMetrics, SimulationOutcome, SimulationParameters
from .service import derive_report_metrics, run_simulation

__all__ = [
    "InvalidParameterError",
    "DerivedMetrics",
    "SimulationOutcome",
    "SimulationParameters",
    "derive_report_metrics",
    "run_simulation",
]
