# -*- coding: utf-8 -*-

"""Unit tests for the ASGI query transformation middleware."""

import asyncio

from qtransform.middleware import QueryTransformMiddleware, request_from_scope
from qtransform.models import TransformConfig
from qtransform.policy import TransformQueryParametersPolicy


def _http_scope(path="/orders", query_string=b"page=2", headers=None):
    return {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query_string,
        "headers": headers or [],
    }


class RecordingApp:
    """Downstream ASGI app recording the scope it was called with."""

    def __init__(self):
        self.scope = None

    async def __call__(self, scope, receive, send):
        self.scope = scope


def _run(middleware, scope):
    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        pass

    asyncio.run(middleware(scope, receive, send))


class TestRequestFromScope:
    """Tests for request_from_scope()."""

    def test_repeated_headers_are_joined_in_order(self):
        """
        What it does: Builds a request from a scope repeating one header.
        Purpose: Ensure templates see every value, not only the last one.
        """
        scope = _http_scope(
            headers=[
                (b"X-Forwarded-For", b"10.0.0.1"),
                (b"accept", b"*/*"),
                (b"x-forwarded-for", b"10.0.0.2"),
            ]
        )

        request = request_from_scope(scope)

        print(f"Headers: {request.headers}")
        assert request.headers == {
            "x-forwarded-for": "10.0.0.1, 10.0.0.2",
            "accept": "*/*",
        }

    def test_query_string_is_parsed_in_wire_form(self):
        request = request_from_scope(_http_scope(query_string=b"q=a%20b&tag=x&tag=y"))

        assert request.params.to_dict() == {"q": ["a%20b"], "tag": ["x", "y"]}
        assert request.path == "/orders"


class TestQueryTransformMiddleware:
    """Tests for QueryTransformMiddleware path selection."""

    def _middleware(self, app, **kwargs):
        policy = TransformQueryParametersPolicy(TransformConfig(clear_all=True))
        return QueryTransformMiddleware(app, policies=[policy], enabled=True, **kwargs)

    def test_excluded_path_is_forwarded_untouched(self):
        """
        What it does: Sends a request to an excluded path.
        Purpose: Ensure policies do not run on gateway-internal endpoints.
        """
        app = RecordingApp()
        middleware = self._middleware(app, excluded_paths=["/health"])

        _run(middleware, _http_scope(path="/health", query_string=b"keep=me"))

        assert app.scope["query_string"] == b"keep=me"

    def test_other_paths_are_transformed(self):
        app = RecordingApp()
        middleware = self._middleware(app, excluded_paths=["/health"])

        _run(middleware, _http_scope(path="/orders", query_string=b"drop=me"))

        assert app.scope["query_string"] == b""

    def test_exclusion_is_exact_match(self):
        """
        What it does: Sends a request to a sub-path of an excluded path.
        Purpose: Ensure exclusion does not behave as a prefix match.
        """
        app = RecordingApp()
        middleware = self._middleware(app, excluded_paths=["/health"])

        _run(middleware, _http_scope(path="/health/deep", query_string=b"drop=me"))

        assert app.scope["query_string"] == b""

    def test_default_excludes_health(self):
        middleware = QueryTransformMiddleware(RecordingApp(), policies=[])

        assert "/health" in middleware.excluded_paths
