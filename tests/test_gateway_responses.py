"""
Tests for the gateway response registry.
"""

import pytest

from apibuilder import ConfigurationError, GatewayResponseRegistry, GatewayResponseType


class TestGatewayResponseRegistry:
    """Test registration and expansion of gateway responses."""

    def test_header_shortcuts_are_expanded(self):
        registry = GatewayResponseRegistry()
        entry = registry.register("DEFAULT_4XX", status_code=411, headers={"x-response-claudia": "yes"})

        assert entry.response_type is GatewayResponseType.DEFAULT_4XX
        assert entry.status_code == 411
        assert entry.response_parameters["gatewayresponse.header.x-response-claudia"] == "'yes'"

    def test_direct_parameters_win_over_shortcuts(self):
        registry = GatewayResponseRegistry()
        entry = registry.register(
            GatewayResponseType.UNAUTHORIZED,
            headers={"Access-Control-Allow-Origin": "*", "X-Other": "1"},
            response_parameters={
                "gatewayresponse.header.Access-Control-Allow-Origin": "method.request.header.Origin",
            },
        )
        assert entry.response_parameters == {
            "gatewayresponse.header.Access-Control-Allow-Origin": "method.request.header.Origin",
            "gatewayresponse.header.X-Other": "'1'",
        }

    def test_templates_are_stored(self):
        registry = GatewayResponseRegistry()
        entry = registry.register(
            "MISSING_AUTHENTICATION_TOKEN",
            status_code=404,
            response_templates={"application/json": '{"message": "not found"}'},
        )
        assert entry.to_native() == {
            "statusCode": 404,
            "responseTemplates": {"application/json": '{"message": "not found"}'},
        }

    def test_to_native_omits_unset_fields(self):
        registry = GatewayResponseRegistry()
        entry = registry.register("THROTTLED")
        assert entry.to_native() == {}

    def test_unknown_response_type(self):
        registry = GatewayResponseRegistry()
        with pytest.raises(ConfigurationError):
            registry.register("NOT_A_TYPE", status_code=400)

    @pytest.mark.parametrize("status_code", [99, 600])
    def test_invalid_status_code(self, status_code):
        registry = GatewayResponseRegistry()
        with pytest.raises(ConfigurationError):
            registry.register("DEFAULT_5XX", status_code=status_code)
        assert len(registry) == 0

    def test_resolve_all_keeps_registration_order(self):
        registry = GatewayResponseRegistry()
        registry.register("DEFAULT_5XX", status_code=503)
        registry.register("DEFAULT_4XX", status_code=411)
        registry.register("INVALID_API_KEY", status_code=401)

        types = [entry.response_type.value for entry in registry.resolve_all()]
        assert types == ["DEFAULT_5XX", "DEFAULT_4XX", "INVALID_API_KEY"]

    def test_registering_again_replaces_entry(self):
        registry = GatewayResponseRegistry()
        registry.register("DEFAULT_4XX", status_code=411)
        registry.register("DEFAULT_4XX", status_code=418)

        assert len(registry) == 1
        assert registry.get("DEFAULT_4XX").status_code == 418

    def test_lookup(self):
        registry = GatewayResponseRegistry()
        registry.register("ACCESS_DENIED", status_code=403)

        assert "ACCESS_DENIED" in registry
        assert GatewayResponseType.ACCESS_DENIED in registry
        assert "THROTTLED" not in registry
        assert "bogus" not in registry
        assert registry.get("bogus") is None

    def test_to_native_is_keyed_by_type(self):
        registry = GatewayResponseRegistry()
        registry.register("DEFAULT_4XX", status_code=411, headers={"x-a": "b"})
        assert registry.to_native() == {
            "DEFAULT_4XX": {
                "statusCode": 411,
                "responseParameters": {"gatewayresponse.header.x-a": "'b'"},
            }
        }
