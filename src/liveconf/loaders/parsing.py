"""Shared helpers for loaders: reading sources and shaping flat key/value data."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from liveconf.core.errors import ConfigParseError, SourceUnavailableError
from liveconf.core.tree import assoc_path


def read_source_text(path: Path, encoding: str = "utf-8") -> str:
    """Read a source file.

    Args:
        path: File to read.
        encoding: Text encoding.

    Returns:
        File content.

    Raises:
        SourceUnavailableError: If the file does not exist.
        ConfigParseError: If the file exists but cannot be read or decoded.
    """
    try:
        return path.read_text(encoding=encoding)
    except FileNotFoundError:
        raise SourceUnavailableError(path) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Unexpected error reading {path}: {e}") from None


def parse_value(value: Any, json_parse: bool = True) -> Any:
    """Opportunistically JSON-parse a string value.

    ``"8080"`` becomes ``8080``, ``"true"`` becomes ``True``, ``'{"a": 1}'``
    becomes a dict. Anything that is not valid JSON is returned unchanged.
    """
    if not json_parse or not isinstance(value, str):
        return value
    try:
        return orjson.loads(value)
    except orjson.JSONDecodeError:
        return value


def nest_flat_mapping(
    flat: Mapping[str, Any], separator: str, json_parse: bool = True
) -> dict[str, Any]:
    """Expand ``{"app__port": "80"}`` into ``{"app": {"port": 80}}``.

    Keys are split on ``separator``; empty segments are dropped. When a
    scalar and a nested path collide, the key seen last wins.
    """
    result: dict[str, Any] = {}
    for key, value in flat.items():
        segments = [segment for segment in key.split(separator) if segment]
        if not segments:
            continue
        assoc_path(result, segments, parse_value(value, json_parse))
    return result


def ensure_mapping(data: Any, source: str) -> dict[str, Any]:
    """Check that parsed content has a mapping at its root.

    Raises:
        ConfigParseError: If the root is a list or scalar.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Configuration root of {source} must be a mapping, got {type(data).__name__}"
        )
    return data
