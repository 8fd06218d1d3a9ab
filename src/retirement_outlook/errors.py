"""
Domain errors.
"""

from typing import Optional


class InvalidParameterError(ValueError):
    """Simulation input rejected before any trial is run."""

    def __init__(self, field: Optional[str], message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}" if field else message)
