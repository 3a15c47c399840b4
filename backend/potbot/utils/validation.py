"""
Input Validation Utilities
===========================

Common validation functions for plant data and user inputs.

Author: Potbot Team
"""

import re

from potbot.models import LogType

PLANT_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]{1,64}$')


def validate_plant_id(plant_id: str) -> bool:
    """
    Validate a plant ID (alphanumeric, underscore or dash, at most 64 chars).

    Provisioned IDs look like "plant_00042", but older hardware may carry
    other IDs, so only the character set and length are enforced.

    Args:
        plant_id: Plant ID string

    Returns:
        True if valid, False otherwise
    """
    if not plant_id:
        return False
    return bool(PLANT_ID_PATTERN.match(plant_id))


def validate_log_type(log_type: str) -> bool:
    """
    Check a reported log type against the known sensor kinds.

    Args:
        log_type: Value of "logType" from the plant

    Returns:
        True if it is one of light, temp, moisture
    """
    return log_type in {t.value for t in LogType}
