"""File loaders for JSON, YAML and TOML sources.

All file loaders share the same behavior:
- a missing file yields ``{}`` and a ``source_unavailable`` warning (unless
  warnings are suppressed)
- unreadable or malformed content raises ConfigParseError
- with ``hot_reload`` enabled, ``start_watch`` watches the file
"""

import asyncio
import functools
from pathlib import Path
from typing import Any

import orjson
import toml
import yaml

from liveconf.core.errors import ConfigParseError, SourceUnavailableError, WatchError
from liveconf.core.loader import Disposer, LoadOptions, RawData, ReloadCallback
from liveconf.loaders.parsing import ensure_mapping, read_source_text
from liveconf.telemetry import SOURCE_UNAVAILABLE, get_logger
from liveconf.watch.driver import create_file_watcher
from liveconf.watch.options import HotReloadConfig, WatchOptions, normalize_hot_reload

log = get_logger(__name__)


class FileLoader:
    """Base class of file-backed loaders. Subclasses implement ``parse``."""

    format_name = "file"

    def __init__(
        self,
        path: Path | str,
        encoding: str = "utf-8",
        hot_reload: HotReloadConfig = None,
    ):
        """Initialize the loader.

        Args:
            path: Source file. It may not exist yet.
            encoding: Text encoding of the file.
            hot_reload: ``True`` or WatchOptions (or an equivalent dict) to
                make the loader watchable.
        """
        self.path = Path(path)
        self.encoding = encoding
        self.watch_options: WatchOptions | None = normalize_hot_reload(hot_reload)

    @property
    def watchable(self) -> bool:
        return self.watch_options is not None

    async def load(self, options: LoadOptions = LoadOptions()) -> RawData:
        """Read and parse the file.

        Raises:
            ConfigParseError: If the file cannot be read or parsed.
        """
        try:
            text = await asyncio.to_thread(read_source_text, self.path, self.encoding)
        except SourceUnavailableError:
            if not options.suppress_warnings:
                log.warning(
                    SOURCE_UNAVAILABLE,
                    loader=type(self).__name__,
                    path=str(self.path),
                )
            return {}

        return ensure_mapping(self.parse(text), f"{self.format_name} file {self.path}")

    def parse(self, text: str) -> Any:
        raise NotImplementedError

    def start_watch(self, on_reload: ReloadCallback) -> Disposer:
        """Watch the file and await ``on_reload`` after each change.

        Raises:
            WatchError: If hot reload was not enabled for this loader.
        """
        if self.watch_options is None:
            raise WatchError(f"Hot reload is not enabled for {self.path}")

        return create_file_watcher(
            self.path,
            self.watch_options,
            load=functools.partial(self.load, LoadOptions(suppress_warnings=True)),
            on_reload=on_reload,
            name=type(self).__name__,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class JsonFileLoader(FileLoader):
    """Loads a JSON document whose root is an object."""

    format_name = "JSON"

    def parse(self, text: str) -> Any:
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise ConfigParseError(f"Failed to parse JSON file {self.path}: {e}") from None


class YamlFileLoader(FileLoader):
    """Loads a YAML document; an empty document is an empty mapping."""

    format_name = "YAML"

    def parse(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Failed to parse YAML file {self.path}: {e}") from None


class TomlFileLoader(FileLoader):
    """Loads a TOML document."""

    format_name = "TOML"

    def parse(self, text: str) -> Any:
        try:
            return toml.loads(text)
        except toml.TomlDecodeError as e:
            raise ConfigParseError(f"Failed to parse TOML file {self.path}: {e}") from None
