"""Configuration sources.

Every loader exposes ``async load(options) -> dict``; file loaders created
with ``hot_reload`` also expose ``start_watch``.
"""

from liveconf.loaders.compose import CompositeLoader, compose_loader
from liveconf.loaders.dotenv_loader import DotenvLoader
from liveconf.loaders.env_loader import EnvLoader
from liveconf.loaders.file_loader import (
    FileLoader,
    JsonFileLoader,
    TomlFileLoader,
    YamlFileLoader,
)
from liveconf.loaders.function_loader import FunctionLoader, LoadFunction
from liveconf.loaders.parsing import nest_flat_mapping, parse_value

__all__ = [
    "CompositeLoader",
    "compose_loader",
    "DotenvLoader",
    "EnvLoader",
    "FileLoader",
    "JsonFileLoader",
    "TomlFileLoader",
    "YamlFileLoader",
    "FunctionLoader",
    "LoadFunction",
    "nest_flat_mapping",
    "parse_value",
]
