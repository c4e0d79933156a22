"""Unit tests for the request metrics label."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from starlette.requests import Request

from agenda_service.app.middleware import _endpoint_label


def _request(path: str, *, route_path: str | None = None, root_path: str = "", app_root_path: str = "") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
        "root_path": root_path,
        "app_root_path": app_root_path,
    }
    if route_path is not None:
        scope["route"] = SimpleNamespace(path=route_path)
    return Request(scope)


@pytest.mark.unit
class TestEndpointLabel:
    def test_prefixed_route_path(self):
        request = _request("/api/events/7", route_path="/api/events/{event_id}")

        assert _endpoint_label(request) == "/api/events/{event_id}"

    def test_prefix_recorded_in_root_path(self):
        request = _request("/api/events/7", route_path="/events/{event_id}", root_path="/api")

        assert _endpoint_label(request) == "/api/events/{event_id}"

    def test_server_root_path_is_not_part_of_label(self):
        request = _request(
            "/svc/api/events",
            route_path="/events",
            root_path="/svc/api",
            app_root_path="/svc",
        )

        assert _endpoint_label(request) == "/api/events"

    def test_unrouted_request_uses_raw_path(self):
        assert _endpoint_label(_request("/nowhere")) == "/nowhere"
