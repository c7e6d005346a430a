"""
Tests for header declarations, materialization and shortcut expansion.
"""

import pytest

from apibuilder import AllowedHeaders, ConfigurationError, FixedHeaders
from apibuilder.headers import (
    expand_header_shortcuts,
    materialize_headers,
    normalize_header_declaration,
    quote_literal,
)


class TestNormalizeHeaderDeclaration:
    """Test normalization of the two declaration styles."""

    def test_none(self):
        assert normalize_header_declaration(None) is None

    def test_mapping_becomes_fixed(self):
        declaration = normalize_header_declaration({"X-Version": "2", "X-Count": 3})
        assert declaration == FixedHeaders({"X-Version": "2", "X-Count": "3"})

    def test_list_becomes_allowed(self):
        declaration = normalize_header_declaration(["X-Request-Id", "X-Trace"])
        assert declaration == AllowedHeaders(("X-Request-Id", "X-Trace"))

    def test_normalized_values_are_returned_unchanged(self):
        fixed = FixedHeaders({"A": "1"})
        assert normalize_header_declaration(fixed) is fixed

    @pytest.mark.parametrize("declaration", ["X-Single", 5, {"X-Bad": None}, {"X-Bad": ["a"]}, [""], [1]])
    def test_invalid_declarations(self, declaration):
        with pytest.raises(ConfigurationError):
            normalize_header_declaration(declaration)


class TestMaterializeHeaders:
    """Test header materialization against runtime values."""

    def test_fixed_values_without_runtime_headers(self):
        assert materialize_headers({"X-A": "1"}, None) == {"X-A": "1"}

    def test_runtime_values_override_fixed(self):
        result = materialize_headers({"X-A": "1"}, {"X-A": "2", "X-B": "3"})
        assert result == {"X-A": "2", "X-B": "3"}

    def test_override_is_case_insensitive(self):
        result = materialize_headers({"X-A": "1"}, {"x-a": "2"})
        assert result == {"x-a": "2"}

    def test_allowed_names_keep_only_present_values(self):
        result = materialize_headers(["X-A", "X-Missing"], {"x-a": "1", "X-Other": "2"})
        assert result == {"X-A": "1"}

    def test_allowed_names_without_runtime_headers(self):
        assert materialize_headers(["X-A"], None) == {}

    def test_no_declaration_passes_runtime_headers_except_reserved(self):
        result = materialize_headers(None, {
            "X-A": "1",
            "Content-Type": "text/plain",
            "location": "/elsewhere",
        })
        assert result == {"X-A": "1"}

    def test_no_declaration_and_no_runtime_headers(self):
        assert materialize_headers(None, None) == {}

    def test_none_runtime_value_keeps_fixed_value(self):
        assert materialize_headers({"X-A": "1"}, {"X-A": None}) == {"X-A": "1"}

    def test_none_runtime_value_is_dropped_without_declaration(self):
        assert materialize_headers(None, {"X-A": None, "X-B": "1"}) == {"X-B": "1"}

    def test_none_runtime_value_is_dropped_for_allowed_names(self):
        assert materialize_headers(["X-A", "X-B"], {"X-A": None, "X-B": "1"}) == {"X-B": "1"}


class TestShortcutExpansion:
    """Test expansion of header shortcuts into platform parameters."""

    def test_plain_values_are_quoted(self):
        result = expand_header_shortcuts({"x-response-claudia": "yes"}, "gatewayresponse.header.")
        assert result == {"gatewayresponse.header.x-response-claudia": "'yes'"}

    def test_empty(self):
        assert expand_header_shortcuts(None, "gatewayresponse.header.") == {}
        assert expand_header_shortcuts({}, "gatewayresponse.header.") == {}

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            expand_header_shortcuts(["x-a"], "gatewayresponse.header.")

    @pytest.mark.parametrize("value,expected", [
        ("*", "'*'"),
        ("'already'", "'already'"),
        ("method.request.header.Origin", "method.request.header.Origin"),
        ("context.requestId", "context.requestId"),
        ("stageVariables.origin", "stageVariables.origin"),
        (5, "'5'"),
    ])
    def test_quote_literal(self, value, expected):
        assert quote_literal(value) == expected
