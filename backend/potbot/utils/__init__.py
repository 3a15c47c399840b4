"""
Utility modules for the Potbot backend.
"""

from potbot.utils.validation import (
    validate_plant_id,
    validate_log_type,
)

__all__ = [
    "validate_plant_id",
    "validate_log_type",
]
