"""Wire schema of the telemetry envelope posted to the collector."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny
from pydantic.alias_generators import to_camel

NAMESPACE = "Microsoft.ApplicationInsights."


class TelemetryKind(Enum):
    """Envelope name and data type for each kind of telemetry."""
    PAGE_VIEW = ("Pageview", "PageViewData")
    PAGE_VIEW_PERFORMANCE = ("PageviewPerformance", "PageviewPerformanceData")
    TRACE_MESSAGE = ("Message", "MessageData")
    EVENT = ("Event", "EventData")
    METRIC = ("Metric", "MetricData")
    EXCEPTION = ("Exception", "ExceptionData")

    @property
    def envelope_name(self) -> str:
        return NAMESPACE + self.value[0]

    @property
    def data_type(self) -> str:
        return NAMESPACE + self.value[1]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TelemetryItem(WireModel):
    ver: int = 1
    properties: Optional[dict[str, Any]] = None


class PageViewData(TelemetryItem):
    url: Optional[str] = None
    name: Optional[str] = None
    measurements: Optional[dict[str, Any]] = None
    duration: Optional[float] = None


class PageViewPerformanceData(PageViewData):
    network_connect: str
    sent_request: str
    received_response: str
    dom_processing: str
    perf_total: str


class EventData(TelemetryItem):
    name: str
    measurements: Optional[dict[str, Any]] = None


class MessageData(TelemetryItem):
    message: str
    severity_level: int = 0


class Metric(WireModel):
    name: str
    value: float


class MetricData(TelemetryItem):
    metrics: list[Metric]


class ExceptionDetails(WireModel):
    type_name: Optional[str] = None
    message: Optional[str] = None
    stack: Optional[str] = None
    parsed_stack: Optional[list[dict[str, Any]]] = None
    has_full_stack: bool = False


class ExceptionData(TelemetryItem):
    handled_at: str = "Unhandled"
    exceptions: list[ExceptionDetails]


class User(WireModel):
    id: str
    type: str = "User"


class Session(WireModel):
    id: str


class Operation(WireModel):
    id: str


class Device(WireModel):
    id: str = "browser"
    type: str = "Browser"
    locale: Optional[str] = None
    resolution: Optional[str] = None


class Internal(WireModel):
    sdk_version: str


class Data(WireModel):
    type: str
    item: SerializeAsAny[TelemetryItem]


class Envelope(WireModel):
    name: str
    time: str
    ver: int = 1
    i_key: str = Field("", alias="iKey")
    user: User
    session: Session
    operation: Operation
    device: Device = Field(default_factory=Device)
    internal: Internal
    data: Data

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
