"""FastAPI relay between browser pages and the telemetry collector."""

from typing import Optional, Any
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from app_insights import ApplicationInsights
from config import AppInsightsOptions
from stack_parser import classify, parse
from utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# Global instances
client: Optional[ApplicationInsights] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the telemetry client on startup."""
    global client

    options = AppInsightsOptions()
    configure_logging(options.log_level, options.log_json)

    if not options.instrumentation_key and not options.developer_mode:
        logger.warning("No instrumentation key configured, telemetry disabled")
        client = None
    else:
        client = ApplicationInsights(options)
        logger.info("Telemetry client ready", storage=client.store.storage_type)

    yield

    if client:
        client.transport.close()


app = FastAPI(title="Browser Telemetry Relay", lifespan=lifespan)


# Request/Response Models
class ErrorReport(BaseModel):
    """Error object as serialized by the page."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    message: Optional[str] = None
    stack: Optional[str] = None
    stacktrace: Optional[str] = None
    opera_sourceloc: Optional[Any] = Field(None, alias="opera#sourceloc")

    def as_error(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ParseResponse(BaseModel):
    format: str
    has_full_stack: bool
    frames: Optional[list[dict]] = None


class PageViewRequest(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    properties: Optional[dict[str, Any]] = None
    measurements: Optional[dict[str, Any]] = None
    duration: Optional[float] = None


class NavigationRequest(BaseModel):
    path: str
    url: Optional[str] = None


class PageViewPerformanceRequest(BaseModel):
    timing: dict[str, Any]
    name: Optional[str] = None
    url: Optional[str] = None
    properties: Optional[dict[str, Any]] = None
    measurements: Optional[dict[str, Any]] = None


class EventRequest(BaseModel):
    name: str
    properties: Optional[dict[str, Any]] = None
    measurements: Optional[dict[str, Any]] = None


class MetricRequest(BaseModel):
    name: str
    value: float
    properties: Optional[dict[str, Any]] = None


class TraceRequest(BaseModel):
    message: str
    level: Optional[str] = None
    properties: Optional[dict[str, Any]] = None


class TrackResponse(BaseModel):
    tracked: bool
    operation_id: Optional[str] = None


def _client() -> ApplicationInsights:
    if not client:
        raise HTTPException(status_code=503, detail="Telemetry client not configured")
    return client


def _tracked(envelope) -> TrackResponse:
    if envelope is None:
        return TrackResponse(tracked=False)
    return TrackResponse(tracked=True, operation_id=envelope.operation.id)


# Endpoints
@app.post("/parse", response_model=ParseResponse)
def parse_stack(report: ErrorReport):
    """Parse an error's stack into frames without sending anything."""
    error = report.as_error()
    frames = parse(error)
    return ParseResponse(
        format=classify(error).value,
        has_full_stack=frames is not None,
        frames=[f.to_dict() for f in frames] if frames is not None else None
    )


@app.post("/track/exception", response_model=TrackResponse)
def track_exception(report: ErrorReport):
    return _tracked(_client().track_exception(report.as_error()))


@app.post("/errors", response_model=TrackResponse)
def report_unhandled_error(report: ErrorReport):
    """Global error hook of the page; honours auto exception tracking."""
    telemetry = _client()
    if not telemetry.options.auto_exception_tracking:
        return TrackResponse(tracked=False)
    return _tracked(telemetry.track_exception(report.as_error()))


@app.post("/track/pageview", response_model=TrackResponse)
def track_page_view(request: PageViewRequest):
    return _tracked(_client().track_page_view(
        request.name, request.url, request.properties, request.measurements, request.duration
    ))


@app.post("/navigation", response_model=TrackResponse)
def track_navigation(request: NavigationRequest):
    """Route change in a single page app; honours auto page view tracking."""
    telemetry = _client()
    if not telemetry.options.auto_page_view_tracking:
        return TrackResponse(tracked=False)
    name = telemetry.options.application_name + request.path
    return _tracked(telemetry.track_page_view(name, request.url))


@app.post("/track/pageview/performance", response_model=TrackResponse)
def track_page_view_performance(request: PageViewPerformanceRequest):
    telemetry = _client()
    if not telemetry.is_performance_timing_ready(request.timing):
        raise HTTPException(status_code=400, detail="Performance timing data is incomplete")
    return _tracked(telemetry.track_page_view_performance(
        request.timing, request.name, request.url, request.properties, request.measurements
    ))


@app.post("/track/event", response_model=TrackResponse)
def track_event(request: EventRequest):
    return _tracked(_client().track_event(request.name, request.properties, request.measurements))


@app.post("/track/metric", response_model=TrackResponse)
def track_metric(request: MetricRequest):
    return _tracked(_client().track_metric(request.name, request.value, request.properties))


@app.post("/track/trace", response_model=TrackResponse)
def track_trace(request: TraceRequest):
    return _tracked(_client().track_trace_message(request.message, request.level, request.properties))


@app.get("/health")
async def health():
    """Health check endpoint."""
    if not client:
        return {"status": "degraded", "telemetry": "disabled", "storage": "none"}

    return {
        "status": "healthy",
        "telemetry": "developer_mode" if client.options.developer_mode else "enabled",
        "storage": client.store.storage_type
    }
