from .envelope import Envelope, TelemetryKind
from .session import IdentityTracker
from .transport import TrackTransport
from .validation import (
    validate_properties, validate_measurements, validate_duration, validate_severity_level
)

__all__ = [
    "Envelope", "TelemetryKind", "IdentityTracker", "TrackTransport",
    "validate_properties", "validate_measurements", "validate_duration",
    "validate_severity_level"
]
