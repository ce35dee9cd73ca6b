"""Tests for telemetry helpers, validation, sessions and transport."""

import json
import time

import httpx
from storage import MemoryStore
from telemetry.session import IdentityTracker, SESSION_KEY
from telemetry.tools import generate_guid, is_number, ms_to_timespan
from telemetry.transport import TrackTransport
from telemetry.validation import (
    validate_duration, validate_measurements, validate_properties, validate_severity_level
)


class TestTools:
    def test_generate_guid(self):
        guid = generate_guid()
        assert len(guid) == 36
        assert guid[14] == "4"
        assert guid != generate_guid()

    def test_is_number(self):
        assert is_number(1)
        assert is_number(2.5)
        assert is_number("3.5")
        assert not is_number(True)
        assert not is_number("abc")
        assert not is_number(None)
        assert not is_number(float("nan"))
        assert not is_number({})

    def test_ms_to_timespan(self):
        assert ms_to_timespan(1500) == "00:00:01.500"
        assert ms_to_timespan(100) == "00:00:00.100"
        assert ms_to_timespan(61000) == "00:01:01.000"
        assert ms_to_timespan(90061001) == "1.01:01:01.001"

    def test_ms_to_timespan_invalid(self):
        assert ms_to_timespan(-5) == "00:00:00.000"
        assert ms_to_timespan("abc") == "00:00:00.000"


class TestValidation:
    def test_properties(self):
        properties = {"page": "home", "count": 1, "empty": None, "nested": {"a": 1}, "list": [1]}
        assert validate_properties(properties) == {"page": "home", "count": 1}

    def test_properties_not_mapping(self):
        assert validate_properties(None) is None
        assert validate_properties("page=home") is None

    def test_measurements(self):
        measurements = {"load": 1.5, "label": "slow", "size": "3"}
        assert validate_measurements(measurements) == {"load": 1.5, "size": "3"}
        assert validate_measurements(["load"]) is None

    def test_duration(self):
        assert validate_duration(None) is None
        assert validate_duration(12) == 12
        assert validate_duration(-1) is None
        assert validate_duration("soon") is None

    def test_severity_level(self):
        assert validate_severity_level("debug") == 0
        assert validate_severity_level("warn") == 2
        assert validate_severity_level("error") == 3
        assert validate_severity_level("critical") == 0
        assert validate_severity_level(None) == 0


class TestIdentityTracker:
    def setup_method(self):
        self.now = 1_000_000
        self.store = MemoryStore()
        self.tracker = IdentityTracker(self.store, session_inactivity_timeout=1000, clock=lambda: self.now)

    def test_unique_id_is_stable(self):
        unique_id = self.tracker.get_unique_id()
        assert unique_id == self.tracker.get_unique_id()
        assert IdentityTracker(self.store).get_unique_id() == unique_id

    def test_session_refreshed_while_active(self):
        session_id = self.tracker.get_session_id()

        self.now += 900
        assert self.tracker.get_session_id() == session_id
        assert self.store.get(SESSION_KEY)["accessed"] == self.now

        self.now += 900
        assert self.tracker.get_session_id() == session_id

    def test_session_expires(self):
        session_id = self.tracker.get_session_id()
        self.now += 1001
        assert self.tracker.get_session_id() != session_id

    def test_corrupt_session_replaced(self):
        self.store.set(SESSION_KEY, "garbage")
        session_id = self.tracker.get_session_id()
        assert self.store.get(SESSION_KEY)["id"] == session_id


class TestTrackTransport:
    def make_transport(self, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return TrackTransport("https://collector.test/v2/track", client=client)

    def test_posts_json(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"itemsAccepted": 1})

        transport = self.make_transport(handler)

        assert transport.send({"name": "event"})
        assert requests[0].method == "POST"
        assert str(requests[0].url) == "https://collector.test/v2/track"
        assert requests[0].headers["Accept"] == "application/json"
        assert requests[0].headers["Content-Type"] == "application/json"
        assert json.loads(requests[0].content) == {"name": "event"}

    def test_error_status_is_reported_not_raised(self):
        transport = self.make_transport(lambda request: httpx.Response(500))
        assert transport.send({"name": "event"}) is False

    def test_connection_errors_are_retried(self, monkeypatch):
        monkeypatch.setattr(time, "sleep", lambda seconds: None)
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        transport = self.make_transport(handler)

        assert transport.send({"name": "event"}) is False
        assert len(calls) == 3

    def test_unserializable_envelope_is_reported_not_raised(self):
        requests = []
        transport = self.make_transport(lambda request: requests.append(request) or httpx.Response(200))

        assert transport.send({"value": float("nan")}) is False
        assert transport.send({"tags": {"a", "b"}}) is False
        assert requests == []
