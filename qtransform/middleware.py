# -*- coding: utf-8 -*-

# Query Transform Gateway
# Copyright (C) 2025 Jwadow
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.


"""
ASGI middleware applying request policies to inbound query strings.

Builds a GatewayRequest from the ASGI scope, runs the policy chain and
either rewrites scope["query_string"] before calling the downstream app or
answers with a JSON error at the failure's status code.

Pure ASGI (no BaseHTTPMiddleware) so response bodies are never buffered.
"""

from typing import Dict, Iterable, Optional, Sequence

from fastapi.responses import JSONResponse
from loguru import logger
from starlette.types import ASGIApp, Receive, Scope, Send

from qtransform.chain import RequestPolicy, run_request_policies
from qtransform.config import QUERY_TRANSFORM_ENABLED, QUERY_TRANSFORM_EXCLUDED_PATHS
from qtransform.context import ExecutionContext, GatewayRequest
from qtransform.multimap import QueryParameterMap


def request_from_scope(scope: Scope) -> GatewayRequest:
    """
    Build a GatewayRequest from an HTTP ASGI scope.

    Repeated headers are joined with ", " in arrival order.
    """
    headers: Dict[str, str] = {}
    for raw_name, raw_value in scope.get("headers", []):
        name = raw_name.decode("latin-1").lower()
        value = raw_value.decode("latin-1")
        headers[name] = f"{headers[name]}, {value}" if name in headers else value

    return GatewayRequest(
        method=scope.get("method", "GET"),
        path=scope.get("path", "/"),
        headers=headers,
        params=QueryParameterMap.from_query_string(scope.get("query_string", b"")),
    )


class QueryTransformMiddleware:
    """
    Run request policies on every HTTP request outside the excluded paths.

    Args:
        app: Downstream ASGI application
        policies: Request policies in execution order
        enabled: Master switch (defaults to QUERY_TRANSFORM_ENABLED)
        excluded_paths: Exact paths forwarded untouched
            (defaults to QUERY_TRANSFORM_EXCLUDED_PATHS)
    """

    def __init__(
        self,
        app: ASGIApp,
        policies: Sequence[RequestPolicy] = (),
        enabled: Optional[bool] = None,
        excluded_paths: Optional[Iterable[str]] = None,
    ):
        self.app = app
        self.policies = list(policies)
        self.enabled = QUERY_TRANSFORM_ENABLED if enabled is None else enabled
        if excluded_paths is None:
            excluded_paths = QUERY_TRANSFORM_EXCLUDED_PATHS
        self.excluded_paths = frozenset(excluded_paths)

    def _applies_to(self, scope: Scope) -> bool:
        return (
            scope["type"] == "http"
            and self.enabled
            and bool(self.policies)
            and scope.get("path", "/") not in self.excluded_paths
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not self._applies_to(scope):
            await self.app(scope, receive, send)
            return

        request = request_from_scope(scope)
        context = ExecutionContext(request=request)

        result = run_request_policies(request, context, self.policies)
        if not result.ok:
            failure = result.failure
            response = JSONResponse(
                status_code=failure.status_code,
                content={"error": {"key": failure.key, "message": failure.message}},
            )
            await response(scope, receive, send)
            return

        query_string = request.params.to_query_string()
        logger.debug("[Middleware] {} {} -> ?{}", request.method, request.path, query_string)
        scope["query_string"] = query_string.encode("utf-8", "surrogateescape")
        await self.app(scope, receive, send)
