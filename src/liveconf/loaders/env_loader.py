"""Process environment loader."""

import os
from collections.abc import Mapping

from liveconf.config import get_settings
from liveconf.core.loader import LoadOptions, RawData
from liveconf.loaders.parsing import nest_flat_mapping


class EnvLoader:
    """Loads the process environment as a nested mapping.

    ``APP__PORT=8080`` becomes ``{"APP": {"PORT": 8080}}``; the registry then
    normalizes the keys to ``app.port``.
    """

    def __init__(
        self,
        separator: str | None = None,
        json_parse: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize the loader.

        Args:
            separator: Path separator inside variable names. Defaults to
                ``LIVECONF_ENV_SEPARATOR`` (``"__"``).
            json_parse: JSON-parse values. Defaults to ``LIVECONF_ENV_JSON_PARSE``.
            environ: Mapping to read instead of ``os.environ``.
        """
        settings = get_settings()
        self.separator = separator or settings.env_separator
        self.json_parse = settings.env_json_parse if json_parse is None else json_parse
        self._environ = environ

    async def load(self, options: LoadOptions = LoadOptions()) -> RawData:
        snapshot = dict(os.environ if self._environ is None else self._environ)
        return nest_flat_mapping(snapshot, self.separator, self.json_parse)

    def __repr__(self) -> str:
        return f"EnvLoader(separator={self.separator!r})"
