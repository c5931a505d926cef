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
Error taxonomy and failure reporting for the query transformation policy.

Architecture:
- TransformError: base class for everything the transformer may raise
- RenderError: a dynamic expression could not be resolved for this request
- ConfigurationError: malformed policy configuration reached the transformer
- PolicyFailure: structured failure handed back to the policy chain
- build_policy_failure(): converts an exception into a PolicyFailure

Example:
    >>> failure = build_policy_failure(RenderError("{{ request.headers.x }}", "'x' is undefined"))
    >>> failure.status_code
    500
"""

from dataclasses import dataclass

# Failure key reported to the policy chain
TRANSFORMATION_FAILED_KEY = "QUERY_PARAMETERS_TRANSFORMATION_FAILED"


class TransformError(Exception):
    """Base class for query parameter transformation failures."""


class RenderError(TransformError):
    """
    Raised when the expression engine fails to resolve a directive string.

    Attributes:
        template: Raw configured string that failed to render
        reason: Underlying engine message
    """

    def __init__(self, template: str, reason: str):
        self.template = template
        self.reason = reason
        super().__init__(f"Unable to render '{template}': {reason}")


class ConfigurationError(TransformError):
    """Raised when policy configuration is malformed (e.g. a missing name)."""


@dataclass(frozen=True)
class PolicyFailure:
    """
    Structured failure reported to the policy chain.

    Attributes:
        key: Machine-readable failure key
        message: Human-readable message
        status_code: HTTP status the gateway should answer with
    """

    key: str
    message: str
    status_code: int = 500


def build_policy_failure(error: TransformError) -> PolicyFailure:
    """
    Convert a transformation error into a PolicyFailure.

    Render and configuration errors are both gateway-side defects from the
    client's point of view, so they map to HTTP 500.

    Args:
        error: Error raised by the transformer

    Returns:
        PolicyFailure carrying the error message
    """
    message = str(error) or error.__class__.__name__
    return PolicyFailure(key=TRANSFORMATION_FAILED_KEY, message=message, status_code=500)
