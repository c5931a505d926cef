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
Request-scoped objects passed through the policy chain.

GatewayRequest is owned by a single request's processing path and is never
shared across requests. ExecutionContext carries per-request attributes and
gateway properties used to resolve dynamic expressions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from qtransform.multimap import QueryParameterMap


@dataclass
class GatewayRequest:
    """
    Inbound request as seen by gateway policies.

    Attributes:
        method: HTTP method
        path: Request path without query string
        headers: Lowercase header names to values
        params: Current query parameters (replaced by policies on success)
    """

    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    params: QueryParameterMap = field(default_factory=QueryParameterMap)


@dataclass
class ExecutionContext:
    """
    Per-request execution context.

    Attributes:
        request: Request being processed
        attributes: Values set by earlier policies for this request
        properties: Static gateway/API properties
    """

    request: GatewayRequest
    attributes: Dict[str, Any] = field(default_factory=dict)
    properties: Dict[str, Any] = field(default_factory=dict)

    def template_variables(self) -> Dict[str, Any]:
        """Namespace exposed to dynamic expressions."""
        request = self.request
        return {
            "request": {
                "method": request.method,
                "path": request.path,
                "headers": dict(request.headers),
                "params": {key: values[0] if values else "" for key, values in request.params.items()},
                "params_list": request.params.to_dict(),
            },
            "context": {"attributes": dict(self.attributes)},
            "properties": dict(self.properties),
        }
