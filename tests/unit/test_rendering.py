# -*- coding: utf-8 -*-

"""Unit tests for dynamic expression renderers."""

import pytest

from qtransform.errors import RenderError
from qtransform.rendering import PassthroughRenderer, TemplateRenderer


class TestPassthroughRenderer:

    def test_returns_input_unchanged(self):
        assert PassthroughRenderer().render("{{ anything }}") == "{{ anything }}"


class TestTemplateRenderer:
    """Tests for the jinja2-backed renderer."""

    def test_plain_strings_are_returned_as_is(self, execution_context):
        """
        What it does: Renders a string without template markers.
        Purpose: Ensure static names/values bypass the engine.
        """
        renderer = TemplateRenderer(execution_context)

        assert renderer.render("foo name&=3") == "foo name&=3"

    def test_resolves_request_header(self, execution_context):
        renderer = TemplateRenderer(execution_context)

        assert renderer.render("{{ request.headers['x-user'] }}") == "alice"

    def test_resolves_params_attributes_and_properties(self, execution_context):
        """
        What it does: Reads a query parameter, an attribute and a property.
        Purpose: Ensure the whole per-request namespace is exposed.
        """
        renderer = TemplateRenderer(execution_context)

        rendered = renderer.render(
            "{{ request.params['page'] }}-{{ context.attributes['plan'] }}-{{ properties['env'] }}"
        )

        assert rendered == "2-gold-prod"

    def test_resolves_method_and_path(self, execution_context):
        renderer = TemplateRenderer(execution_context)

        assert renderer.render("{{ request.method }} {{ request.path }}") == "GET /orders"

    def test_undefined_reference_raises_render_error(self, execution_context):
        """
        What it does: References a header that is not present.
        Purpose: Ensure missing data fails loudly instead of rendering empty.
        """
        renderer = TemplateRenderer(execution_context)

        with pytest.raises(RenderError) as exc_info:
            renderer.render("{{ request.headers['x-missing'] }}")

        assert exc_info.value.template == "{{ request.headers['x-missing'] }}"

    def test_syntax_error_raises_render_error(self, execution_context):
        renderer = TemplateRenderer(execution_context)

        with pytest.raises(RenderError):
            renderer.render("{{ request.headers[ }}")

    def test_sandbox_blocks_internal_attributes(self, execution_context):
        """
        What it does: Tries to reach Python internals from a template.
        Purpose: Ensure configured expressions cannot escape the sandbox.
        """
        renderer = TemplateRenderer(execution_context)

        with pytest.raises(RenderError):
            renderer.render("{{ request.__class__.__mro__[1].__subclasses__() }}")

    @pytest.mark.parametrize(
        "template",
        [
            "{{ request.headers.pop('x-absent') }}",
            "{{ {}.pop('k') }}",
            "{{ [].pop() }}",
        ],
    )
    def test_runtime_errors_raise_render_error(self, execution_context, template):
        """
        What it does: Renders expressions that fail inside a method call.
        Purpose: Ensure lookup errors raised by the engine are reported as RenderError.
        """
        renderer = TemplateRenderer(execution_context)

        print(f"Action: rendering {template!r}...")
        with pytest.raises(RenderError) as exc_info:
            renderer.render(template)

        assert exc_info.value.template == template
        assert isinstance(exc_info.value.__cause__, LookupError)
