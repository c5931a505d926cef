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
Ordered multi-valued query parameter map.

Keys keep their first-insertion position; values under a key keep their
insertion order. All values for a key live in a single list, so a key never
appears twice in iteration.

Query strings are handled in wire form: from_query_string() splits on "&"
and the first "=" without percent-decoding, and to_query_string() joins the
stored strings back without percent-encoding.

Example:
    >>> params = QueryParameterMap.from_query_string("tag=a&tag=b&page=2")
    >>> params.get_list("tag")
    ['a', 'b']
    >>> params.set("tag", ["c"])
    >>> params.to_query_string()
    'tag=c&page=2'
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union


class QueryParameterMap:
    """
    Mapping from parameter name to an ordered list of values.

    Backed by a plain dict, which preserves key insertion order and keeps the
    position of a key when its value list is replaced.
    """

    __slots__ = ("_params",)

    def __init__(self) -> None:
        self._params: Dict[str, List[str]] = {}

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "QueryParameterMap":
        """Build a map from (key, value) pairs, grouping repeated keys."""
        params = cls()
        for key, value in pairs:
            params.add(key, value)
        return params

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Union[str, Sequence[str]]]
    ) -> "QueryParameterMap":
        """
        Build a map from a mapping of key -> value or key -> list of values.

        Args:
            mapping: e.g. {"foo": ["bar", "baz"], "page": "2"}
        """
        params = cls()
        for key, values in mapping.items():
            if isinstance(values, str):
                params.add(key, values)
            else:
                params._params[key] = list(values)
        return params

    @classmethod
    def from_query_string(cls, query_string: Union[str, bytes]) -> "QueryParameterMap":
        """
        Parse a raw query string without decoding it.

        "a=1&b" yields {"a": ["1"], "b": [""]}; empty segments are skipped.
        """
        if isinstance(query_string, bytes):
            query_string = query_string.decode("utf-8", "surrogateescape")

        params = cls()
        for segment in query_string.split("&"):
            if not segment:
                continue
            key, _, value = segment.partition("=")
            params.add(key, value)
        return params

    def to_query_string(self) -> str:
        """Serialize back to wire form; empty values become a bare key."""
        parts = []
        for key, value in self.multi_items():
            parts.append(f"{key}={value}" if value else key)
        return "&".join(parts)

    def add(self, key: str, value: str) -> None:
        """Append value to the end of key's list, creating the key if absent."""
        self._params.setdefault(key, []).append(value)

    def set(self, key: str, values: Iterable[str]) -> None:
        """Replace every value of key; an existing key keeps its position."""
        self._params[key] = list(values)

    def remove(self, key: str) -> bool:
        """Delete key and all its values. Returns False if key was absent."""
        return self._params.pop(key, None) is not None

    def clear(self) -> None:
        self._params.clear()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for key, or default."""
        values = self._params.get(key)
        if not values:
            return default
        return values[0]

    def get_list(self, key: str) -> List[str]:
        """Return a copy of all values for key (empty list if absent)."""
        return list(self._params.get(key, ()))

    def keys(self) -> List[str]:
        return list(self._params)

    def items(self) -> List[Tuple[str, List[str]]]:
        return [(key, list(values)) for key, values in self._params.items()]

    def multi_items(self) -> List[Tuple[str, str]]:
        """Flattened (key, value) pairs in map order."""
        return [(key, value) for key, values in self._params.items() for value in values]

    def copy(self) -> "QueryParameterMap":
        clone = QueryParameterMap()
        clone._params = {key: list(values) for key, values in self._params.items()}
        return clone

    def to_dict(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._params.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        # Order-sensitive: dict equality alone ignores key order
        if not isinstance(other, QueryParameterMap):
            return NotImplemented
        return list(self._params.items()) == list(other._params.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"QueryParameterMap({self._params!r})"
