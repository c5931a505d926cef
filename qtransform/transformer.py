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
Query parameter transformer.

Applies a TransformConfig to a request's QueryParameterMap in three fixed
phases:

    1. Clear   - drop every inbound parameter when clear_all is set
    2. Add     - render, space-encode and set/append each add directive in order
    3. Remove  - delete each listed key (literal names, never rendered)

The input map is never mutated. Work happens on a copy that is returned only
when every phase succeeded, so a render failure leaves no partial result.
"""

from typing import Tuple

from loguru import logger

from qtransform.errors import ConfigurationError
from qtransform.models import AddDirective, TransformConfig
from qtransform.multimap import QueryParameterMap
from qtransform.rendering import Renderer


def encode_spaces(text: str) -> str:
    """
    Replace every literal space with "%20".

    Only spaces are encoded: "&", "=", "'", "%" and already percent-encoded
    sequences pass through so operators can pre-encode values.
    """
    return text.replace(" ", "%20")


def _resolve(directive: AddDirective, renderer: Renderer) -> Tuple[str, str]:
    if directive.name is None or directive.value is None:
        raise ConfigurationError(f"Add directive is missing a name or value: {directive!r}")

    name = encode_spaces(renderer.render(directive.name))
    value = encode_spaces(renderer.render(directive.value))
    return name, value


def apply_transform(
    params: QueryParameterMap,
    config: TransformConfig,
    renderer: Renderer,
) -> QueryParameterMap:
    """
    Produce the transformed query parameters for one request.

    Args:
        params: Current request parameters (not modified)
        config: Transformation configuration
        renderer: Request-bound expression renderer

    Returns:
        New QueryParameterMap with the configuration applied

    Raises:
        RenderError: If a directive name or value cannot be rendered
        ConfigurationError: If a directive is malformed
    """
    result = params.copy()

    # 1. Clear
    if config.clear_all:
        if len(result):
            logger.info("[QueryTransform] Clearing {} inbound parameter(s)", len(result))
        result.clear()

    # 2. Add (replace or append, in declaration order)
    for directive in config.adds:
        name, value = _resolve(directive, renderer)
        if directive.append_to_existing_array:
            result.add(name, value)
        else:
            result.set(name, [value])

    # 3. Remove (always after every add)
    removed = 0
    for name in config.removes:
        if result.remove(name):
            removed += 1

    logger.debug(
        "[QueryTransform] Applied: clear_all={}, adds={}, removed={}, keys {} -> {}",
        config.clear_all,
        len(config.adds),
        removed,
        len(params),
        len(result),
    )
    return result
