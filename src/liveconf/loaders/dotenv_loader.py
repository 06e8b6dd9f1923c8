"""Dotenv file loader."""

import io
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from liveconf.config import get_settings
from liveconf.loaders.file_loader import FileLoader
from liveconf.loaders.parsing import nest_flat_mapping
from liveconf.watch.options import HotReloadConfig


class DotenvLoader(FileLoader):
    """Loads a ``.env`` file as a nested mapping.

    Variable names are split on the separator like EnvLoader does, values are
    JSON-parsed when possible. ``${VAR}`` references are kept verbatim;
    variables declared without a value are skipped.
    """

    format_name = "dotenv"

    def __init__(
        self,
        path: Path | str = ".env",
        separator: str | None = None,
        json_parse: bool | None = None,
        encoding: str = "utf-8",
        hot_reload: HotReloadConfig = None,
    ):
        super().__init__(path, encoding=encoding, hot_reload=hot_reload)
        settings = get_settings()
        self.separator = separator or settings.env_separator
        self.json_parse = settings.env_json_parse if json_parse is None else json_parse

    def parse(self, text: str) -> Any:
        values = dotenv_values(stream=io.StringIO(text), interpolate=False)
        flat = {key: value for key, value in values.items() if value is not None}
        return nest_flat_mapping(flat, self.separator, self.json_parse)
