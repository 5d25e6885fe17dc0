"""Known value registry: numeric envelope predicates and their names.

Envelopes usually encode well-known predicates such as `provenance` as
compact unsigned integers ("known values") instead of text. The registry
maps those integers to names so predicates can be matched by name.
"""

from __future__ import annotations

__all__ = ["DEFAULT_KNOWN_VALUES", "KnownValueRegistry"]

from collections.abc import Mapping
from types import MappingProxyType

from provenance_cli.constants import PROVENANCE_PREDICATE
from provenance_cli.exceptions import ConfigurationError

DEFAULT_KNOWN_VALUES: Mapping[int, str] = MappingProxyType(
    {
        1: "isA",
        2: "id",
        3: "signed",
        4: "note",
        8: "key",
        16: "date",
        62: "endpoint",
        63: "delegate",
        64: PROVENANCE_PREDICATE,
        65: "privateKey",
        66: "service",
        67: "capability",
        68: "provenanceGenerator",
    }
)


class KnownValueRegistry:
    """Immutable two-way mapping between known values and their names."""

    __slots__ = ("_by_value", "_by_name")

    def __init__(self, entries: Mapping[int, str]) -> None:
        by_name: dict[str, int] = {}
        for value, name in entries.items():
            if value < 0:
                raise ConfigurationError(f"known value for '{name}' must be non-negative")
            if name in by_name:
                raise ConfigurationError(
                    f"known value name '{name}' assigned to both {by_name[name]} and {value}"
                )
            by_name[name] = value
        self._by_value: Mapping[int, str] = MappingProxyType(dict(entries))
        self._by_name: Mapping[str, int] = MappingProxyType(by_name)

    @classmethod
    def with_defaults(cls) -> "KnownValueRegistry":
        return cls(DEFAULT_KNOWN_VALUES)

    def extended(self, additions: Mapping[int, str]) -> "KnownValueRegistry":
        """Return a new registry with additional known values.

        Raises:
            ConfigurationError: If an addition renames an existing value.
        """
        merged = dict(self._by_value)
        for value, name in additions.items():
            existing = merged.get(value)
            if existing is not None and existing != name:
                raise ConfigurationError(
                    f"known value {value} is already named '{existing}', "
                    f"cannot rename to '{name}'"
                )
            merged[value] = name
        return KnownValueRegistry(merged)

    def name_for_value(self, value: int) -> str | None:
        return self._by_value.get(value)

    def value_for_name(self, name: str) -> int | None:
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._by_value)

    def __repr__(self) -> str:
        return f"KnownValueRegistry({len(self)} entries)"
