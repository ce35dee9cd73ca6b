"""Input checks for telemetry payload fields.

Invalid input never raises: the offending value is dropped and a warning
is logged.
"""

from collections.abc import Mapping
from typing import Any, Optional

from utils.logging import get_logger
from .tools import is_number

logger = get_logger(__name__)

# Index in this list is the severity level sent on the wire
SEVERITY_LEVELS = [
    "debug",  # Verbose
    "info",  # Information
    "warn",  # Warning
    "error",  # Error
]


def validate_properties(properties: Any) -> Optional[dict]:
    if properties is None:
        return None

    if not isinstance(properties, Mapping):
        logger.warning("Properties must be a mapping of string/string pairs")
        return None

    validated = {}
    for name, value in properties.items():
        if value is not None and not isinstance(value, (Mapping, list, tuple)):
            validated[name] = value
        else:
            logger.warning("Property value is not a string or number", property=name)
    return validated


def validate_measurements(measurements: Any) -> Optional[dict]:
    if measurements is None:
        return None

    if not isinstance(measurements, Mapping):
        logger.warning("Measurements must be a mapping of string/number pairs")
        return None

    validated = {}
    for name, value in measurements.items():
        if is_number(value):
            validated[name] = value
        else:
            logger.warning("Measurement value is not a number", measurement=name)
    return validated


def validate_duration(duration: Any) -> Optional[float]:
    if duration is None:
        return None

    if not is_number(duration) or float(duration) < 0:
        logger.warning("Duration must be a positive number", duration=duration)
        return None

    return duration


def validate_severity_level(level: Any) -> int:
    if level in SEVERITY_LEVELS:
        return SEVERITY_LEVELS.index(level)
    return 0
