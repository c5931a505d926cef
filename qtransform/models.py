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
Policy configuration model for query parameter transformation.

The configuration document uses the gateway's camelCase schema:

    {
        "clearAll": false,
        "addQueryParameters": [
            {"name": "foo", "value": "bar", "appendToExistingArray": false}
        ],
        "removeQueryParameters": ["old"]
    }

Configurations are loaded once at policy activation and shared read-only
across requests, so every model here is frozen.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

from loguru import logger

from qtransform.errors import ConfigurationError


@dataclass(frozen=True)
class AddDirective:
    """
    One requested parameter insertion.

    Attributes:
        name: Parameter name, may embed dynamic expressions
        value: Parameter value, may embed dynamic expressions
        append_to_existing_array: Append to existing values instead of replacing them
    """

    name: str
    value: str
    append_to_existing_array: bool = False


@dataclass(frozen=True)
class TransformConfig:
    """
    Complete transformation configuration.

    Attributes:
        clear_all: Discard every inbound parameter before adds/removes
        adds: Add directives, applied in declaration order
        removes: Literal parameter names deleted after all adds
    """

    clear_all: bool = False
    adds: Tuple[AddDirective, ...] = ()
    removes: Tuple[str, ...] = ()


def _parse_bool(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{field_name}' must be a boolean, got {value!r}")
    return value


def _parse_add_directive(raw: Any, index: int) -> AddDirective:
    """Validate one entry of addQueryParameters."""
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"addQueryParameters[{index}] must be an object, got {type(raw).__name__}"
        )

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"addQueryParameters[{index}].name is required")

    value = raw.get("value")
    if value is None:
        value = ""
    elif not isinstance(value, str):
        raise ConfigurationError(
            f"addQueryParameters[{index}].value must be a string, got {value!r}"
        )

    append = _parse_bool(
        raw.get("appendToExistingArray"),
        f"addQueryParameters[{index}].appendToExistingArray",
    )
    return AddDirective(name=name, value=value, append_to_existing_array=append)


def parse_transform_config(data: Mapping[str, Any]) -> TransformConfig:
    """
    Build a TransformConfig from a decoded policy document.

    Missing keys fall back to their defaults (no clear, no adds, no removes).

    Args:
        data: Decoded JSON object

    Returns:
        Immutable TransformConfig

    Raises:
        ConfigurationError: If any field has the wrong shape
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Policy configuration must be an object, got {type(data).__name__}"
        )

    clear_all = _parse_bool(data.get("clearAll"), "clearAll")

    raw_adds = data.get("addQueryParameters") or []
    if not isinstance(raw_adds, list):
        raise ConfigurationError("'addQueryParameters' must be a list")
    adds = tuple(_parse_add_directive(raw, i) for i, raw in enumerate(raw_adds))

    raw_removes = data.get("removeQueryParameters") or []
    if not isinstance(raw_removes, list):
        raise ConfigurationError("'removeQueryParameters' must be a list")
    for i, name in enumerate(raw_removes):
        if not isinstance(name, str):
            raise ConfigurationError(
                f"removeQueryParameters[{i}] must be a string, got {name!r}"
            )

    config = TransformConfig(clear_all=clear_all, adds=adds, removes=tuple(raw_removes))
    logger.debug(
        "[Config] Loaded transform config: clear_all={}, adds={}, removes={}",
        config.clear_all,
        len(config.adds),
        len(config.removes),
    )
    return config


def load_transform_config_file(path: Union[str, Path]) -> TransformConfig:
    """
    Read and parse a JSON policy document from disk.

    Raises:
        ConfigurationError: If the file cannot be read, decoded or validated
    """
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy file '{config_path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in policy file '{config_path}': {e}") from e

    logger.info(f"Loaded query transform policy from {config_path}")
    return parse_transform_config(data)
