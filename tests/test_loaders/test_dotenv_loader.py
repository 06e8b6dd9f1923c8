"""Tests for the dotenv loader."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from liveconf.core.loader import LoadOptions
from liveconf.loaders import DotenvLoader
from liveconf.telemetry import SOURCE_UNAVAILABLE


class TestDotenvLoader:
    """Test dotenv loading."""

    @pytest.mark.asyncio
    async def test_loads_nested_values(self, tmp_path: Path) -> None:
        """Test variables are nested and JSON-parsed."""
        path = tmp_path / ".env"
        path.write_text(
            "# comment\n"
            "T1=t1\n"
            "APP__PORT=8080\n"
            "APP__DEBUG=true\n"
            'APP__NAME="quoted value"\n'
        )

        data = await DotenvLoader(path).load()

        assert data == {
            "T1": "t1",
            "APP": {"PORT": 8080, "DEBUG": True, "NAME": "quoted value"},
        }

    @pytest.mark.asyncio
    async def test_references_are_not_expanded(self, tmp_path: Path) -> None:
        """Test ${VAR} stays verbatim."""
        path = tmp_path / ".env"
        path.write_text("T1=t1\nT2=${T1}\n")

        data = await DotenvLoader(path).load()

        assert data["T2"] == "${T1}"

    @pytest.mark.asyncio
    async def test_valueless_declarations_are_skipped(self, tmp_path: Path) -> None:
        """Test bare names without '=' produce no key."""
        path = tmp_path / ".env"
        path.write_text("BARE\nSET=1\n")

        assert await DotenvLoader(path).load() == {"SET": 1}

    @pytest.mark.asyncio
    async def test_missing_file_warns_and_is_empty(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a missing .env yields {} and a warning."""
        mock_log = MagicMock()
        monkeypatch.setattr("liveconf.loaders.file_loader.log", mock_log)

        data = await DotenvLoader(tmp_path / ".env").load()

        assert data == {}
        mock_log.warning.assert_called_once()
        assert mock_log.warning.call_args.args[0] == SOURCE_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_missing_file_warning_can_be_suppressed(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test suppress_warnings silences the missing-file warning."""
        mock_log = MagicMock()
        monkeypatch.setattr("liveconf.loaders.file_loader.log", mock_log)

        data = await DotenvLoader(tmp_path / ".env").load(LoadOptions(suppress_warnings=True))

        assert data == {}
        mock_log.warning.assert_not_called()

    def test_default_path(self) -> None:
        """Test the default source is ./.env."""
        assert DotenvLoader().path == Path(".env")
