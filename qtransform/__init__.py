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
Query Transform Gateway - request query parameter rewriting policy.

Modules:
    - config: Configuration and constants
    - multimap: Ordered multi-valued query parameter map
    - models: Transformation configuration and its loader
    - errors: Error taxonomy and policy failures
    - rendering: Dynamic expression renderers
    - transformer: Clear/add/remove transformation core
    - context: Request-scoped gateway objects
    - policy: Gateway policy wrapping the transformer
    - chain: Request policy chain orchestrator
    - middleware: ASGI integration
"""

from qtransform.config import APP_VERSION as __version__

__author__ = "Jwadow"

from qtransform.multimap import QueryParameterMap
from qtransform.models import (
    AddDirective,
    TransformConfig,
    parse_transform_config,
    load_transform_config_file,
)
from qtransform.errors import (
    TransformError,
    RenderError,
    ConfigurationError,
    PolicyFailure,
)
from qtransform.rendering import Renderer, PassthroughRenderer, TemplateRenderer
from qtransform.transformer import apply_transform, encode_spaces
from qtransform.context import ExecutionContext, GatewayRequest
from qtransform.policy import PolicyResult, TransformQueryParametersPolicy
from qtransform.chain import run_request_policies
from qtransform.middleware import QueryTransformMiddleware

__all__ = [
    # Version
    "__version__",

    # Data model
    "QueryParameterMap",
    "AddDirective",
    "TransformConfig",
    "parse_transform_config",
    "load_transform_config_file",

    # Errors
    "TransformError",
    "RenderError",
    "ConfigurationError",
    "PolicyFailure",

    # Rendering
    "Renderer",
    "PassthroughRenderer",
    "TemplateRenderer",

    # Transformation
    "apply_transform",
    "encode_spaces",

    # Gateway integration
    "ExecutionContext",
    "GatewayRequest",
    "PolicyResult",
    "TransformQueryParametersPolicy",
    "run_request_policies",
    "QueryTransformMiddleware",
]
