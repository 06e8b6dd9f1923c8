"""Tests for the environment loader."""

import pytest

from liveconf.core.raw_registry import RawConfigRegistry
from liveconf.loaders import EnvLoader
from liveconf.runtime import RuntimeConfig


class TestEnvLoader:
    """Test environment loading."""

    @pytest.mark.asyncio
    async def test_nests_and_parses_variables(self) -> None:
        """Test APP__PORT=8080 becomes a nested integer."""
        loader = EnvLoader(environ={"APP__PORT": "8080", "APP__NAME": "svc"})

        assert await loader.load() == {"APP": {"PORT": 8080, "NAME": "svc"}}

    @pytest.mark.asyncio
    async def test_normalized_through_registry(self) -> None:
        """Test loaded variables are reachable as app.port after normalization."""
        loader = EnvLoader(environ={"APP__PORT": "8080"})
        registry = RawConfigRegistry()

        await registry.load(RuntimeConfig(loaders=(loader,)))

        assert registry.read().path("app.port") == 8080

    @pytest.mark.asyncio
    async def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test os.environ is read at load time."""
        loader = EnvLoader()
        monkeypatch.setenv("LIVECONF_TEST__FLAG", "true")

        data = await loader.load()

        assert data["LIVECONF_TEST"]["FLAG"] is True

    @pytest.mark.asyncio
    async def test_defaults_come_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test separator and parsing defaults follow LIVECONF_* settings."""
        monkeypatch.setenv("LIVECONF_ENV_SEPARATOR", "::")
        monkeypatch.setenv("LIVECONF_ENV_JSON_PARSE", "false")

        loader = EnvLoader(environ={"APP::PORT": "8080"})

        assert loader.separator == "::"
        assert await loader.load() == {"APP": {"PORT": "8080"}}

    @pytest.mark.asyncio
    async def test_explicit_arguments_win(self) -> None:
        """Test constructor arguments override settings."""
        loader = EnvLoader(separator="_", json_parse=False, environ={"A_B": "1"})

        assert await loader.load() == {"A": {"B": "1"}}
