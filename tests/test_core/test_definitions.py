"""Tests for the definition registry."""

import pytest
from pydantic import BaseModel

from liveconf.core.definitions import DefinitionRegistry, normalize_path
from liveconf.core.errors import ConfigError


class ServerConfig(BaseModel):
    host: str = "localhost"
    port: int = 80


class TlsServerConfig(ServerConfig):
    cert: str = ""


class TestRegister:
    """Test definition registration."""

    def test_register_normalizes_scope(self) -> None:
        """Test scopes are normalized like source keys."""
        registry = DefinitionRegistry()

        definition = registry.register(ServerConfig, "httpServer.mainListener")

        assert definition.scope == "http_server.main_listener"
        assert registry.get(ServerConfig) is definition
        assert ServerConfig in registry

    def test_register_same_scope_is_idempotent(self) -> None:
        """Test re-registering with the same scope keeps one definition."""
        registry = DefinitionRegistry()

        first = registry.register(ServerConfig, "server")
        second = registry.register(ServerConfig, "server")

        assert first is second
        assert len(registry) == 1

    def test_register_conflicting_scope_raises(self) -> None:
        """Test a type cannot be rebound to another scope."""
        registry = DefinitionRegistry()
        registry.register(ServerConfig, "server")

        with pytest.raises(ConfigError, match="already bound"):
            registry.register(ServerConfig, "other")

    def test_register_rejects_non_models(self) -> None:
        """Test only pydantic models can be configurations."""
        registry = DefinitionRegistry()

        with pytest.raises(TypeError, match="pydantic models"):
            registry.register(dict, "x")  # type: ignore[arg-type]

    def test_get_all_keeps_registration_order(self) -> None:
        """Test definitions come back in registration order."""
        registry = DefinitionRegistry()
        registry.register(TlsServerConfig, "tls")
        registry.register(ServerConfig, "server")

        assert [d.ctor for d in registry.get_all()] == [TlsServerConfig, ServerConfig]

    def test_reset(self) -> None:
        """Test reset forgets definitions and rules."""
        registry = DefinitionRegistry()
        registry.register(ServerConfig, "server")
        registry.register_property(ServerConfig, "port", exclude=True)

        registry.reset()

        assert len(registry) == 0
        assert registry.get_properties(ServerConfig) == []


class TestProperties:
    """Test per-property binding rules."""

    def test_bind_path_is_normalized(self) -> None:
        """Test bind paths are normalized."""
        registry = DefinitionRegistry()

        rule = registry.register_property(ServerConfig, "port", bind="Global.listenPort")

        assert rule.bind == "global.listen_port"

    def test_later_rule_replaces_earlier(self) -> None:
        """Test the last rule for a field wins."""
        registry = DefinitionRegistry()
        registry.register_property(ServerConfig, "port", bind="a.b")
        registry.register_property(ServerConfig, "port", exclude=True)

        (rule,) = registry.get_properties(ServerConfig)
        assert rule.exclude is True
        assert rule.bind is None

    def test_rules_are_inherited_and_overridable(self) -> None:
        """Test subclass rules override base rules for the same field."""
        registry = DefinitionRegistry()
        registry.register_property(ServerConfig, "host", bind="base.host")
        registry.register_property(ServerConfig, "port", bind="base.port")
        registry.register_property(TlsServerConfig, "port", bind="tls.port")

        rules = {r.property_key: r.bind for r in registry.get_properties(TlsServerConfig)}

        assert rules == {"host": "base.host", "port": "tls.port"}
        assert {r.property_key: r.bind for r in registry.get_properties(ServerConfig)} == {
            "host": "base.host",
            "port": "base.port",
        }

    def test_empty_property_key_rejected(self) -> None:
        """Test an empty field name is rejected."""
        registry = DefinitionRegistry()

        with pytest.raises(TypeError):
            registry.register_property(ServerConfig, "")


def test_normalize_path_drops_empty_segments() -> None:
    """Test stray dots do not produce empty segments."""
    assert normalize_path(".App..serverPort.") == "app.server_port"
    assert normalize_path("") == ""
