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
Gateway policy that rewrites request query parameters.

The policy wraps apply_transform() for the policy chain: it binds a renderer
to the request's ExecutionContext, swaps the request parameters on success
and turns transformation errors into a PolicyResult failure.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from qtransform.context import ExecutionContext, GatewayRequest
from qtransform.errors import PolicyFailure, TransformError, build_policy_failure
from qtransform.models import TransformConfig
from qtransform.rendering import TemplateRenderer
from qtransform.transformer import apply_transform


@dataclass(frozen=True)
class PolicyResult:
    """Outcome of one policy invocation; failure is None on success."""

    failure: Optional[PolicyFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls) -> "PolicyResult":
        return cls()

    @classmethod
    def fail(cls, failure: PolicyFailure) -> "PolicyResult":
        return cls(failure=failure)


class TransformQueryParametersPolicy:
    """
    Query parameter transformation policy.

    Stateless apart from its read-only TransformConfig, so one instance can
    serve concurrent requests.

    Example:
        >>> policy = TransformQueryParametersPolicy(TransformConfig(removes=("debug",)))
        >>> result = policy.on_request(request, ExecutionContext(request))
        >>> result.ok
        True
    """

    name = "transform-queryparams"

    def __init__(self, config: TransformConfig):
        self.config = config

    def on_request(self, request: GatewayRequest, context: ExecutionContext) -> PolicyResult:
        """
        Transform request.params in place of the old map.

        Args:
            request: Request being processed
            context: Execution context used to resolve dynamic expressions

        Returns:
            PolicyResult.success(), or a failure leaving request.params untouched
        """
        try:
            request.params = apply_transform(
                request.params, self.config, TemplateRenderer(context)
            )
        except TransformError as e:
            failure = build_policy_failure(e)
            logger.warning(
                "[{}] Transformation failed for {} {}: {}",
                self.name,
                request.method,
                request.path,
                failure.message,
            )
            return PolicyResult.fail(failure)

        return PolicyResult.success()
