from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from config import AppInsightsOptions
from stack_parser import parse
from storage import FallbackStore, MemoryStore, RedisStore
from telemetry.envelope import (
    Data, Device, Envelope, EventData, ExceptionData, ExceptionDetails, Internal,
    MessageData, Metric, MetricData, Operation, PageViewData, PageViewPerformanceData,
    Session, TelemetryItem, TelemetryKind, User
)
from telemetry.session import IdentityTracker
from telemetry.tools import generate_guid, is_number, ms_to_timespan
from telemetry.transport import TrackTransport
from telemetry.validation import (
    validate_duration, validate_measurements, validate_properties, validate_severity_level
)
from utils.logging import get_logger

logger = get_logger(__name__)

SDK_VERSION = "python:0.3.0"

# Navigation timing fields that must be populated before performance data is usable
PERFORMANCE_TIMING_FIELDS = (
    "domainLookupStart", "navigationStart", "responseStart", "requestStart",
    "loadEventEnd", "responseEnd", "connectEnd", "domLoading",
)


def _duration(timing: Mapping, start: str, end: str) -> float:
    start_value, end_value = timing.get(start), timing.get(end)
    if not (is_number(start_value) and is_number(end_value)):
        return 0
    return max(float(end_value) - float(start_value), 0)


def build_store(options: AppInsightsOptions):
    """Redis-backed store with an in-memory fallback."""
    fallback = MemoryStore(prefix=options.storage_prefix, expiry_days=options.cookie_expiry_days)
    if not options.redis_host:
        return fallback
    primary = RedisStore(host=options.redis_host, port=options.redis_port, prefix=options.storage_prefix)
    return FallbackStore(primary, fallback)


class ApplicationInsights:
    """Builds telemetry envelopes and hands them to the transport."""

    def __init__(
        self,
        options: AppInsightsOptions,
        store=None,
        transport: Optional[TrackTransport] = None,
        device: Optional[Device] = None
    ):
        self.options = options
        self.store = store if store is not None else build_store(options)
        self.identity = IdentityTracker(self.store, options.session_inactivity_timeout)
        self.transport = transport or TrackTransport(options.endpoint_url, options.request_timeout)
        self.device = device or Device()
        self._common_properties: Optional[dict] = None

    def track_page_view(
        self,
        name: Optional[str] = None,
        url: Optional[str] = None,
        properties: Optional[dict] = None,
        measurements: Optional[dict] = None,
        duration: Optional[float] = None
    ) -> Envelope:
        item = PageViewData(
            url=url,
            name=name if name is not None else self.options.application_name,
            properties=validate_properties(properties),
            measurements=validate_measurements(measurements),
            duration=validate_duration(duration)
        )
        return self._send(TelemetryKind.PAGE_VIEW, item)

    def is_performance_timing_ready(self, timing: Optional[dict]) -> bool:
        if not timing:
            return False
        return all(
            is_number(timing.get(field)) and float(timing[field]) > 0
            for field in PERFORMANCE_TIMING_FIELDS
        )

    def track_page_view_performance(
        self,
        timing: dict,
        name: Optional[str] = None,
        url: Optional[str] = None,
        properties: Optional[dict] = None,
        measurements: Optional[dict] = None
    ) -> Optional[Envelope]:
        """
        Send page load timings derived from browser navigation timing data.

        |-navigationStart
        |             |-connectEnd
        |             ||-requestStart
        |             ||             |-responseStart
        |             ||             |              |-responseEnd
        |             ||             |              |         |-loadEventEnd
        |---network---||---request---|---response---|---dom---|
        |--------------------------total----------------------|

        Returns None without sending when the timings are unusable.
        """
        if not timing:
            return None

        network = _duration(timing, "navigationStart", "connectEnd")
        request = _duration(timing, "requestStart", "responseStart")
        response = _duration(timing, "responseStart", "responseEnd")
        dom = _duration(timing, "responseEnd", "loadEventEnd")
        total = _duration(timing, "navigationStart", "loadEventEnd")

        if total == 0:
            logger.debug("Page load total is zero, skipping performance telemetry")
            return None
        # Some browsers report parts that add up to more than the total
        if total < int(network) + int(request) + int(response) + int(dom):
            logger.debug("Page load timings are inconsistent, skipping performance telemetry")
            return None

        item = PageViewPerformanceData(
            url=url,
            name=name if name is not None else self.options.application_name,
            properties=validate_properties(properties),
            measurements=validate_measurements(measurements),
            duration=total,
            network_connect=ms_to_timespan(network),
            sent_request=ms_to_timespan(request),
            received_response=ms_to_timespan(response),
            dom_processing=ms_to_timespan(dom),
            perf_total=ms_to_timespan(total)
        )
        return self._send(TelemetryKind.PAGE_VIEW_PERFORMANCE, item)

    def track_event(
        self,
        name: str,
        properties: Optional[dict] = None,
        measurements: Optional[dict] = None
    ) -> Envelope:
        item = EventData(
            name=name,
            properties=validate_properties(properties),
            measurements=validate_measurements(measurements)
        )
        return self._send(TelemetryKind.EVENT, item)

    def track_trace_message(
        self,
        message: Any,
        level: Optional[str] = None,
        properties: Optional[dict] = None
    ) -> Optional[Envelope]:
        if not isinstance(message, str):
            return None
        item = MessageData(
            message=message,
            severity_level=validate_severity_level(level),
            properties=validate_properties(properties)
        )
        return self._send(TelemetryKind.TRACE_MESSAGE, item)

    def track_metric(self, name: str, value: float, properties: Optional[dict] = None) -> Optional[Envelope]:
        if not is_number(value):
            logger.warning("Metric value must be a finite number", metric=name, value=value)
            return None
        item = MetricData(
            metrics=[Metric(name=name, value=value)],
            properties=validate_properties(properties)
        )
        return self._send(TelemetryKind.METRIC, item)

    def track_exception(self, error: Any) -> Optional[Envelope]:
        """Report an unhandled error, with its stack parsed into frames when possible."""
        if error is None:
            return None

        frames = parse(error)
        parsed_stack = [frame.to_dict() for frame in frames] if frames is not None else None
        details = ExceptionDetails(
            type_name=self._error_field(error, "name"),
            message=self._error_field(error, "message"),
            stack=self._error_field(error, "stack"),
            parsed_stack=parsed_stack,
            has_full_stack=parsed_stack is not None
        )
        return self._send(TelemetryKind.EXCEPTION, ExceptionData(exceptions=[details]))

    def set_common_properties(self, properties: dict) -> None:
        """Merge properties into every payload sent from now on."""
        validated = validate_properties(properties)
        if validated is None:
            return
        self._common_properties = self._common_properties or {}
        self._common_properties.update(validated)

    def _error_field(self, error: Any, name: str) -> Optional[str]:
        if isinstance(error, Mapping):
            value = error.get(name)
        else:
            value = getattr(error, name, None)
        return None if value is None else str(value)

    def _build_envelope(self, kind: TelemetryKind, item: TelemetryItem) -> Envelope:
        if self._common_properties:
            item.properties = {**(item.properties or {}), **self._common_properties}

        return Envelope(
            name=kind.envelope_name,
            time=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            i_key=self.options.instrumentation_key,
            user=User(id=self.identity.get_unique_id()),
            session=Session(id=self.identity.get_session_id()),
            operation=Operation(id=generate_guid()),
            device=self.device,
            internal=Internal(sdk_version=SDK_VERSION),
            data=Data(type=kind.data_type, item=item)
        )

    def _send(self, kind: TelemetryKind, item: TelemetryItem) -> Envelope:
        envelope = self._build_envelope(kind, item)
        if self.options.developer_mode:
            logger.info("Telemetry (developer mode)", envelope=envelope.to_wire())
        else:
            self.transport.send(envelope.to_wire())
        return envelope
