"""Configuration tree primitives.

A configuration tree is plain data: mappings, sequences and scalars. This
module holds the operations the rest of the engine performs on such trees:

- key normalization (``apiUrl``, ``API_URL``, ``api-url`` all become ``api_url``)
- deterministic deep merge (later source wins, mappings merge recursively,
  everything else is replaced wholesale)
- freezing into an immutable snapshot (MergedConfig) and thawing back into
  independent plain containers
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

_SEPARATORS = re.compile(r"[\s\-]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Returned by MergedConfig.path when asked to tell a missing path from an explicit null.
MISSING: Any = object()


def to_snake_case(key: str) -> str:
    """Rewrite a key to the canonical snake_case form.

    Args:
        key: Key as it appears in a source (camelCase, SCREAMING_CASE, kebab-case...).

    Returns:
        Lower snake_case key.

    Example:
        >>> to_snake_case("maxRetryCount")
        'max_retry_count'
        >>> to_snake_case("API_URL")
        'api_url'
    """
    key = _SEPARATORS.sub("_", key.strip())
    key = _CAMEL_BOUNDARY.sub("_", key)
    return key.lower()


def normalize_keys(value: Any) -> Any:
    """Recursively rewrite every mapping key with to_snake_case.

    Mappings nested inside sequences are normalized too. Non-string keys
    (YAML allows integers) are kept as they are. When two keys collapse onto
    the same canonical key, the one appearing last wins.
    """
    if isinstance(value, Mapping):
        return {
            (to_snake_case(k) if isinstance(k, str) else k): normalize_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [normalize_keys(item) for item in value]
    return value


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` without mutating either.

    Merge policy:
        - mapping + mapping → recursive merge per key
        - anything else → replaced wholesale by the override value
          (sequences are never merged element-wise)

    Args:
        base: Lower-precedence tree.
        override: Higher-precedence tree.

    Returns:
        A new tree. Values are thawed copies, so the result shares no
        containers with the inputs.
    """
    result: dict[str, Any] = {key: thaw(value) for key, value in base.items()}

    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = thaw(override_value)

    return result


def deep_merge_all(trees: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Fold deep_merge over ``trees`` in order; later trees win."""
    merged: dict[str, Any] = {}
    for tree in trees:
        merged = deep_merge(merged, tree)
    return merged


def assoc_path(target: dict[str, Any], keys: Sequence[str], value: Any) -> None:
    """Set ``value`` at the nested ``keys`` path of ``target`` in place.

    Intermediate mappings are created as needed; a non-mapping found on the
    way is replaced by a mapping.
    """
    node = target
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


def freeze(value: Any) -> Any:
    """Return a deep, read-only copy of a tree.

    Mappings become MappingProxyType over fresh dicts, sequences become tuples.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a deep, mutable copy of a tree (dicts and lists)."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


def _split_path(path: str) -> list[str]:
    return [
        segment if segment.isdigit() else to_snake_case(segment)
        for segment in path.split(".")
        if segment
    ]


class MergedConfig:
    """Immutable snapshot of a merged configuration tree.

    Every merge produces a fresh MergedConfig; nothing mutates one after
    construction. Use ``path`` for dotted lookups and ``extract`` for
    scoped sub-tree views.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data: Mapping[str, Any] = freeze(data or {})

    @classmethod
    def _from_frozen(cls, data: Mapping[str, Any]) -> "MergedConfig":
        snapshot = cls.__new__(cls)
        snapshot._data = data
        return snapshot

    @property
    def data(self) -> Mapping[str, Any]:
        """Read-only view of the whole tree."""
        return self._data

    def path(self, path: str, default: Any = None) -> Any:
        """Look up a dotted path.

        Segments are normalized like source keys, so ``path("db.maxPool")``
        finds ``db.max_pool``. Integer segments index into sequences.

        Args:
            path: Dotted path; an empty path returns the whole tree.
            default: Returned when any segment is missing. Pass ``MISSING``
                to tell an absent path from one explicitly set to None.

        Returns:
            The frozen value at the path, or ``default``.
        """
        node: Any = self._data
        for segment in _split_path(path):
            if isinstance(node, Mapping):
                if segment not in node:
                    return default
                node = node[segment]
            elif isinstance(node, tuple) and segment.isdigit():
                index = int(segment)
                if index >= len(node):
                    return default
                node = node[index]
            else:
                return default
        return node

    def extract(self, scope: str) -> "MergedConfig":
        """Return the sub-tree at ``scope`` as its own MergedConfig.

        An empty scope returns this snapshot. A missing or non-mapping
        scope yields an empty view rather than an error.
        """
        if not scope:
            return self
        node = self.path(scope)
        if not isinstance(node, Mapping):
            return MergedConfig._from_frozen(MappingProxyType({}))
        return MergedConfig._from_frozen(node)

    def to_dict(self) -> dict[str, Any]:
        """Return an independent, mutable deep copy of the tree."""
        return thaw(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergedConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MergedConfig({self.to_dict()!r})"
