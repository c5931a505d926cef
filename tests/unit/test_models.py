# -*- coding: utf-8 -*-

"""Unit tests for transformation configuration parsing."""

import json

import pytest

from qtransform.errors import ConfigurationError
from qtransform.models import (
    AddDirective,
    TransformConfig,
    load_transform_config_file,
    parse_transform_config,
)


class TestParseTransformConfig:
    """Tests for parse_transform_config()."""

    def test_parses_full_document(self):
        """
        What it does: Parses a document using every field.
        Purpose: Ensure camelCase keys map onto the frozen model in order.
        """
        config = parse_transform_config(
            {
                "clearAll": True,
                "addQueryParameters": [
                    {"name": "foo", "value": "bar"},
                    {"name": "foo", "value": "bar2", "appendToExistingArray": True},
                ],
                "removeQueryParameters": ["old", "debug"],
            }
        )

        assert config == TransformConfig(
            clear_all=True,
            adds=(
                AddDirective("foo", "bar", False),
                AddDirective("foo", "bar2", True),
            ),
            removes=("old", "debug"),
        )

    def test_empty_document_uses_defaults(self):
        assert parse_transform_config({}) == TransformConfig()

    def test_null_lists_are_treated_as_empty(self):
        config = parse_transform_config({"addQueryParameters": None, "removeQueryParameters": None})

        assert config.adds == ()
        assert config.removes == ()

    def test_missing_value_defaults_to_empty_string(self):
        config = parse_transform_config({"addQueryParameters": [{"name": "flag"}]})

        assert config.adds[0].value == ""

    @pytest.mark.parametrize(
        "document, fragment",
        [
            ({"addQueryParameters": [{"value": "v"}]}, "addQueryParameters[0].name"),
            ({"addQueryParameters": [{"name": None, "value": "v"}]}, "addQueryParameters[0].name"),
            ({"addQueryParameters": [{"name": "a"}, {"name": ""}]}, "addQueryParameters[1].name"),
            ({"addQueryParameters": [{"name": "a", "value": 3}]}, "addQueryParameters[0].value"),
            ({"addQueryParameters": ["a"]}, "addQueryParameters[0]"),
            ({"addQueryParameters": {"name": "a"}}, "addQueryParameters"),
            ({"removeQueryParameters": ["a", 1]}, "removeQueryParameters[1]"),
            ({"removeQueryParameters": "a"}, "removeQueryParameters"),
            ({"clearAll": "yes"}, "clearAll"),
        ],
    )
    def test_malformed_documents_raise(self, document, fragment):
        """
        What it does: Feeds malformed documents to the parser.
        Purpose: Ensure each defect raises ConfigurationError naming the field.
        """
        with pytest.raises(ConfigurationError) as exc_info:
            parse_transform_config(document)

        assert fragment in str(exc_info.value)

    def test_non_mapping_document_raises(self):
        with pytest.raises(ConfigurationError):
            parse_transform_config(["not", "an", "object"])


class TestLoadTransformConfigFile:
    """Tests for load_transform_config_file()."""

    def test_loads_json_file(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(
            json.dumps({"addQueryParameters": [{"name": "a", "value": "1"}]}),
            encoding="utf-8",
        )

        config = load_transform_config_file(path)

        assert config.adds == (AddDirective("a", "1"),)

    def test_missing_file_raises_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_transform_config_file(tmp_path / "missing.json")

    def test_invalid_json_raises_configuration_error(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_transform_config_file(path)

        assert "Invalid JSON" in str(exc_info.value)
