"""Tests for the host entry points."""

from pathlib import Path

import pytest
from pydantic import BaseModel, Field

import liveconf
from liveconf import (
    ConfigModule,
    ConfigParseError,
    ConfigurationNotFoundError,
    ConfigValidationError,
    EnvLoader,
    JsonFileLoader,
    YamlFileLoader,
)


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1)


class SecretsConfig(BaseModel):
    token: str = ""


class TestPreload:
    """Test preloading configuration."""

    @pytest.mark.asyncio
    async def test_preload_builds_registered_configurations(
        self, module: ConfigModule, tmp_path: Path
    ) -> None:
        """Test later sources override earlier ones and instances are cached."""
        base = tmp_path / "base.yaml"
        base.write_text("server:\n  host: 0.0.0.0\n  port: 80\n")
        module.register(ServerConfig, "server")

        await module.preload(
            loaders=[YamlFileLoader(base), EnvLoader(environ={"SERVER__PORT": "9090"})]
        )

        server = module.get(ServerConfig)
        assert server is not None
        assert server.host == "0.0.0.0"
        assert server.port == 9090

    @pytest.mark.asyncio
    async def test_preload_returns_runtime_config(self, module: ConfigModule, make_loader) -> None:
        loader = make_loader()

        rc = await module.preload(loaders=[loader], debug=True)

        assert rc.loaders == (loader,)
        assert rc.debug is True
        assert rc.suppress_warnings is False

    @pytest.mark.asyncio
    async def test_preload_is_stable(self, module: ConfigModule, make_loader) -> None:
        """Test a second preload keeps the live instance."""
        module.register(ServerConfig, "server")
        loader = make_loader({"server": {"port": 1}})

        await module.preload(loaders=[loader])
        first = module.get(ServerConfig)
        await module.preload(loaders=[loader])

        assert module.get(ServerConfig) is first
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_malformed_source_is_fatal(self, module: ConfigModule, tmp_path: Path) -> None:
        """Test a parse error at preload propagates."""
        path = tmp_path / "bad.json"
        path.write_text("{nope")

        with pytest.raises(ConfigParseError):
            await module.preload(loaders=[JsonFileLoader(path)])

    @pytest.mark.asyncio
    async def test_invalid_configuration_is_fatal(
        self, module: ConfigModule, make_loader
    ) -> None:
        """Test a validation error at preload propagates and caches nothing."""
        module.register(ServerConfig, "server")

        with pytest.raises(ConfigValidationError):
            await module.preload(loaders=[make_loader({"server": {"port": 0}})])

        assert module.get(ServerConfig) is None

    @pytest.mark.asyncio
    async def test_missing_sources_are_tolerated(
        self, module: ConfigModule, tmp_path: Path
    ) -> None:
        """Test absent files give model defaults."""
        module.register(ServerConfig, "server")

        await module.preload(loaders=[str(tmp_path / ".env"), JsonFileLoader(tmp_path / "x.json")])

        assert module.get(ServerConfig) == ServerConfig()

    @pytest.mark.asyncio
    async def test_providers_restrict_what_is_built(
        self, module: ConfigModule, make_loader
    ) -> None:
        module.register(ServerConfig, "server")
        module.register(SecretsConfig, "secrets")

        await module.preload(loaders=[make_loader()], providers=[SecretsConfig])

        assert module.get(SecretsConfig) is not None
        assert module.get(ServerConfig) is None

    @pytest.mark.asyncio
    async def test_string_and_callable_loaders(self, module: ConfigModule, tmp_path: Path) -> None:
        """Test paths resolve to dotenv loaders and callables to function loaders."""
        env_file = tmp_path / "app.env"
        env_file.write_text("SERVER__HOST=dotenv-host\n")
        module.register(ServerConfig, "server")

        await module.preload(loaders=[str(env_file), lambda options: {"server": {"port": 7}}])

        server = module.get(ServerConfig)
        assert server.host == "dotenv-host"
        assert server.port == 7


class TestConfigure:
    """Test process-wide defaults."""

    @pytest.mark.asyncio
    async def test_defaults_are_used_and_overridable(
        self, module: ConfigModule, make_loader
    ) -> None:
        default_loader = make_loader()
        other_loader = make_loader()
        module.configure(loaders=[default_loader], suppress_warnings=True)

        rc_default = module.runtime_config()
        rc_override = module.runtime_config(loaders=[other_loader])

        assert rc_default.loaders == (default_loader,)
        assert rc_default.suppress_warnings is True
        assert rc_override.loaders == (other_loader,)
        assert rc_override.suppress_warnings is True

    @pytest.mark.asyncio
    async def test_get_or_fail_preloads_with_defaults(
        self, module: ConfigModule, make_loader
    ) -> None:
        """Test get_or_fail builds on demand when defaults exist."""
        module.register(ServerConfig, "server")
        module.configure(loaders=[make_loader({"server": {"port": 5}})])

        server = await module.get_or_fail(ServerConfig)

        assert server.port == 5
        assert await module.get_or_fail(ServerConfig) is server

    @pytest.mark.asyncio
    async def test_get_or_fail_without_instance_raises(self, module: ConfigModule) -> None:
        module.register(ServerConfig, "server")

        with pytest.raises(ConfigurationNotFoundError, match="ServerConfig"):
            await module.get_or_fail(ServerConfig)

    def test_get_before_preload_is_none(self, module: ConfigModule) -> None:
        assert module.get(ServerConfig) is None


class TestPropertyRules:
    """Test config_key and its deprecated alias."""

    @pytest.mark.asyncio
    async def test_config_key_binds_absolute_path(
        self, module: ConfigModule, make_loader
    ) -> None:
        module.register(SecretsConfig, "secrets")
        module.config_key(SecretsConfig, "token", "vault.apiToken")

        await module.preload(loaders=[make_loader({"VAULT": {"API_TOKEN": "t0k"}})])

        assert module.get(SecretsConfig).token == "t0k"

    def test_config_name_is_deprecated(self, module: ConfigModule) -> None:
        with pytest.warns(DeprecationWarning, match="config_key"):
            rule = module.config_name(SecretsConfig, "token", "vault.token")

        assert rule.bind == "vault.token"


class TestDefaultModule:
    """Test the module-level API."""

    @pytest.mark.asyncio
    async def test_module_functions_share_default_instance(self, make_loader) -> None:
        liveconf.reset()
        try:
            liveconf.register(ServerConfig, "server")
            await liveconf.preload(loaders=[make_loader({"server": {"port": 3}})])

            assert liveconf.get(ServerConfig).port == 3
            assert liveconf.default_module.get(ServerConfig) is liveconf.get(ServerConfig)
        finally:
            liveconf.reset()

    def test_reset_forgets_everything(self, module: ConfigModule) -> None:
        module.register(ServerConfig, "server")
        module.configure(loaders=[])

        module.reset()

        assert module.defaults is None
        assert ServerConfig not in module.definitions
