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
Request policy chain orchestrator.

Runs request policies in declaration order over a shared GatewayRequest.
The first failing policy halts the chain and its result is returned to the
caller, which is responsible for answering the client.
"""

from typing import Protocol, Sequence

from loguru import logger

from qtransform.context import ExecutionContext, GatewayRequest
from qtransform.policy import PolicyResult


class RequestPolicy(Protocol):
    """A policy executed on the request phase of the chain."""

    name: str

    def on_request(self, request: GatewayRequest, context: ExecutionContext) -> PolicyResult: ...


def run_request_policies(
    request: GatewayRequest,
    context: ExecutionContext,
    policies: Sequence[RequestPolicy],
) -> PolicyResult:
    """
    Run every request policy until one fails.

    Args:
        request: Request shared by all policies
        context: Execution context for this request
        policies: Policies in execution order

    Returns:
        The first failure, or PolicyResult.success()
    """
    for policy in policies:
        result = policy.on_request(request, context)
        if not result.ok:
            logger.info(
                "[Chain] Halted by policy '{}' ({})",
                policy.name,
                result.failure.key,
            )
            return result

    return PolicyResult.success()
