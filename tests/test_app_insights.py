"""Tests for the telemetry client."""

import httpx

from app_insights import ApplicationInsights, SDK_VERSION
from config import AppInsightsOptions
from storage import MemoryStore
from telemetry.envelope import Device
from telemetry.transport import TrackTransport


CHROME_ERROR = {
    "name": "TypeError",
    "message": "user is undefined",
    "stack": """TypeError: user is undefined
    at validateUser (https://shop.example.com/js/checkout.js:120:17)
    at submitOrder (https://shop.example.com/js/checkout.js:88:5)"""
}

TIMING = {
    "navigationStart": 1000,
    "domainLookupStart": 1010,
    "connectEnd": 1100,
    "requestStart": 1100,
    "responseStart": 1300,
    "responseEnd": 1400,
    "domLoading": 1450,
    "loadEventEnd": 2000,
}


class RecordingTransport:
    def __init__(self):
        self.sent = []

    def send(self, envelope: dict) -> bool:
        self.sent.append(envelope)
        return True


def make_client(**overrides) -> tuple[ApplicationInsights, RecordingTransport]:
    options = AppInsightsOptions(instrumentation_key="ikey", application_name="shop", **overrides)
    transport = RecordingTransport()
    return ApplicationInsights(options, store=MemoryStore(), transport=transport), transport


class TestEnvelope:
    def setup_method(self):
        self.client, self.transport = make_client()

    def test_page_view_envelope(self):
        self.client.track_page_view(url="https://shop.example.com/", duration=120)
        wire = self.transport.sent[0]

        assert wire["name"] == "Microsoft.ApplicationInsights.Pageview"
        assert wire["ver"] == 1
        assert wire["iKey"] == "ikey"
        assert wire["time"].endswith("Z")
        assert wire["data"]["type"] == "Microsoft.ApplicationInsights.PageViewData"
        assert wire["data"]["item"]["name"] == "shop"
        assert wire["data"]["item"]["url"] == "https://shop.example.com/"
        assert wire["data"]["item"]["duration"] == 120
        assert wire["device"] == {"id": "browser", "type": "Browser"}
        assert wire["internal"] == {"sdkVersion": SDK_VERSION}
        assert wire["user"]["type"] == "User"

    def test_ids_across_calls(self):
        self.client.track_event("first")
        self.client.track_event("second")
        first, second = self.transport.sent

        assert first["user"]["id"] == second["user"]["id"]
        assert first["session"]["id"] == second["session"]["id"]
        assert first["operation"]["id"] != second["operation"]["id"]

    def test_device_context(self):
        client = ApplicationInsights(
            AppInsightsOptions(instrumentation_key="ikey"),
            store=MemoryStore(),
            transport=self.transport,
            device=Device(locale="en-US", resolution="1280x720")
        )
        client.track_event("click")
        assert self.transport.sent[0]["device"]["resolution"] == "1280x720"
        assert self.transport.sent[0]["device"]["locale"] == "en-US"

    def test_common_properties_are_merged(self):
        self.client.set_common_properties({"release": "1.2", "bad": {"nested": True}})
        self.client.track_event("click", {"button": "buy"})

        item = self.transport.sent[0]["data"]["item"]
        assert item["properties"] == {"button": "buy", "release": "1.2"}

    def test_developer_mode_does_not_send(self):
        client, transport = make_client(developer_mode=True)
        envelope = client.track_event("click")

        assert envelope.data.item.name == "click"
        assert transport.sent == []


class TestTracking:
    def setup_method(self):
        self.client, self.transport = make_client()

    def test_event_with_measurements(self):
        self.client.track_event("checkout", {"step": "pay"}, {"items": 3, "label": "x"})
        item = self.transport.sent[0]["data"]["item"]

        assert self.transport.sent[0]["name"] == "Microsoft.ApplicationInsights.Event"
        assert item["name"] == "checkout"
        assert item["measurements"] == {"items": 3}

    def test_trace_message(self):
        self.client.track_trace_message("cache miss", "error", {"key": "user"})
        item = self.transport.sent[0]["data"]["item"]

        assert item["message"] == "cache miss"
        assert item["severityLevel"] == 3

    def test_trace_message_ignores_non_strings(self):
        assert self.client.track_trace_message(42) is None
        assert self.transport.sent == []

    def test_metric(self):
        self.client.track_metric("latency", 12.5)
        item = self.transport.sent[0]["data"]["item"]
        assert item["metrics"] == [{"name": "latency", "value": 12.5}]

    def test_metric_rejects_non_finite_values(self):
        assert self.client.track_metric("latency", float("nan")) is None
        assert self.client.track_metric("latency", float("inf")) is None
        assert self.client.track_metric("latency", "fast") is None
        assert self.transport.sent == []

    def test_exception_with_parsed_stack(self):
        self.client.track_exception(CHROME_ERROR)
        wire = self.transport.sent[0]
        exception = wire["data"]["item"]["exceptions"][0]

        assert wire["data"]["type"] == "Microsoft.ApplicationInsights.ExceptionData"
        assert wire["data"]["item"]["handledAt"] == "Unhandled"
        assert exception["typeName"] == "TypeError"
        assert exception["message"] == "user is undefined"
        assert exception["hasFullStack"] is True
        assert exception["parsedStack"][0]["functionName"] == "validateUser"
        assert exception["parsedStack"][1]["lineNumber"] == "88"
        assert exception["parsedStack"][1]["frameIndex"] == 1

    def test_exception_without_parseable_stack(self):
        self.client.track_exception({"name": "Error", "message": "boom"})
        exception = self.transport.sent[0]["data"]["item"]["exceptions"][0]

        assert exception["hasFullStack"] is False
        assert "parsedStack" not in exception

    def test_exception_none_is_ignored(self):
        assert self.client.track_exception(None) is None
        assert self.transport.sent == []


class TestPageViewPerformance:
    def setup_method(self):
        self.client, self.transport = make_client()

    def test_timing_ready(self):
        assert self.client.is_performance_timing_ready(TIMING)
        assert not self.client.is_performance_timing_ready(dict(TIMING, loadEventEnd=0))
        assert not self.client.is_performance_timing_ready({})

    def test_sends_timespans(self):
        self.client.track_page_view_performance(TIMING, url="https://shop.example.com/")
        wire = self.transport.sent[0]
        item = wire["data"]["item"]

        assert wire["name"] == "Microsoft.ApplicationInsights.PageviewPerformance"
        assert item["duration"] == 1000
        assert item["perfTotal"] == "00:00:01.000"
        assert item["networkConnect"] == "00:00:00.100"
        assert item["sentRequest"] == "00:00:00.200"
        assert item["receivedResponse"] == "00:00:00.100"
        assert item["domProcessing"] == "00:00:00.600"

    def test_zero_total_is_skipped(self):
        timing = dict(TIMING, loadEventEnd=TIMING["navigationStart"])
        assert self.client.track_page_view_performance(timing) is None
        assert self.transport.sent == []

    def test_inconsistent_parts_are_skipped(self):
        timing = dict(TIMING, connectEnd=1400, loadEventEnd=1500)
        assert self.client.track_page_view_performance(timing) is None
        assert self.transport.sent == []


class TestDeliveryFailures:
    def setup_method(self):
        self.requests = []

        def handler(request):
            self.requests.append(request)
            return httpx.Response(200)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        options = AppInsightsOptions(instrumentation_key="ikey", application_name="shop")
        self.transport = TrackTransport("https://collector.test/v2/track", client=client)
        self.client = ApplicationInsights(options, store=MemoryStore(), transport=self.transport)

    def test_non_finite_metric_is_not_sent(self):
        assert self.client.track_metric("latency", float("nan")) is None
        assert self.requests == []

    def test_unserializable_property_does_not_raise(self):
        envelope = self.client.track_event("checkout", {"tags": {"a", "b"}})

        assert envelope is not None
        assert self.requests == []
