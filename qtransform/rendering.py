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
Expression rendering for dynamic parameter names and values.

The transformer only depends on the Renderer protocol: a single
render(str) -> str capability bound to one request. Two implementations are
provided:

- PassthroughRenderer: returns its input, for static configurations and tests
- TemplateRenderer: evaluates jinja2 expressions against an ExecutionContext

Template namespace:
    request.method, request.path, request.headers['x-user'],
    request.params['page'], request.params_list['tag'],
    context.attributes['tenant'], properties['env']

Example:
    >>> renderer = TemplateRenderer(ctx)
    >>> renderer.render("{{ request.headers['x-user'] }}")
    'alice'
"""

from functools import lru_cache
from typing import Protocol

from jinja2 import StrictUndefined, Template
from jinja2.sandbox import SandboxedEnvironment
from loguru import logger

from qtransform.context import ExecutionContext
from qtransform.errors import RenderError

# Cached compiled templates (configuration strings are few and reused)
_TEMPLATE_CACHE_SIZE = 512

_environment = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)


class Renderer(Protocol):
    """Resolves embedded dynamic expressions in a configured string."""

    def render(self, template: str) -> str: ...


class PassthroughRenderer:
    """Renderer that returns every string unchanged."""

    def render(self, template: str) -> str:
        return template


def _has_markers(text: str) -> bool:
    return "{{" in text or "{%" in text


@lru_cache(maxsize=_TEMPLATE_CACHE_SIZE)
def _compile(source: str) -> Template:
    return _environment.from_string(source)


class TemplateRenderer:
    """
    jinja2-backed renderer bound to one request's ExecutionContext.

    Undefined references fail loudly (StrictUndefined) instead of rendering
    as empty strings, and the sandbox blocks attribute access to internals.
    """

    def __init__(self, context: ExecutionContext):
        self._variables = context.template_variables()

    def render(self, template: str) -> str:
        """
        Render one configured string.

        Args:
            template: Raw configured string

        Returns:
            Resolved string (input unchanged when it has no template markers)

        Raises:
            RenderError: On any engine failure (syntax, undefined reference, runtime error)
        """
        if not _has_markers(template):
            return template

        try:
            rendered = _compile(template).render(**self._variables)
        except Exception as e:
            logger.debug("[Renderer] Failed to render {!r}: {}", template, e)
            raise RenderError(template, str(e)) from e

        return rendered
