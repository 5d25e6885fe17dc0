"""CBOR tag registry: UR type name -> CBOR tag.

The registry is an immutable value built once at startup (built-in defaults
plus config-file additions) and passed by reference to whatever needs it.
Nothing mutates it after construction.

Example usage:
    registry = TagRegistry.with_defaults().extended({"my-type": 90001})
    registry.tag_for_name("envelope")  # 200
"""

from __future__ import annotations

__all__ = ["DEFAULT_TAGS", "TagRegistry"]

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from provenance_cli.constants import (
    TAG_COMPRESSED,
    TAG_DATE,
    TAG_ENCRYPTED,
    TAG_ENVELOPE,
    TAG_KNOWN_VALUE,
    TAG_LEAF,
    TAG_PROVENANCE_MARK,
)
from provenance_cli.exceptions import ConfigurationError

# Built-in registrations, keyed by UR type name
DEFAULT_TAGS: Mapping[str, int] = MappingProxyType(
    {
        "date": TAG_DATE,
        "encoded-cbor": 24,
        "uri": 32,
        "uuid": 37,
        "envelope": TAG_ENVELOPE,
        "leaf": TAG_LEAF,
        "json": 262,
        "known-value": TAG_KNOWN_VALUE,
        "digest": 40001,
        "encrypted": TAG_ENCRYPTED,
        "compressed": TAG_COMPRESSED,
        "request": 40004,
        "response": 40005,
        "function": 40006,
        "parameter": 40007,
        "placeholder": 40008,
        "replacement": 40009,
        "agreement-private-key": 40010,
        "agreement-public-key": 40011,
        "arid": 40012,
        "nonce": 40014,
        "password": 40015,
        "crypto-prvkey-base": 40016,
        "crypto-pubkeys": 40017,
        "salt": 40018,
        "crypto-sealed": 40019,
        "signature": 40020,
        "signing-private-key": 40021,
        "signing-public-key": 40022,
        "crypto-key": 40023,
        "xid": 40024,
        "seed": 40300,
        "hdkey": 40303,
        "provenance": TAG_PROVENANCE_MARK,
    }
)


class TagRegistry:
    """Immutable two-way mapping between UR type names and CBOR tags."""

    __slots__ = ("_by_name", "_by_tag")

    def __init__(self, entries: Mapping[str, int]) -> None:
        """Build a registry.

        Args:
            entries: UR type name -> CBOR tag.

        Raises:
            ConfigurationError: If a tag is negative or two names share a tag.
        """
        by_tag: dict[int, str] = {}
        for name, tag in entries.items():
            if tag < 0:
                raise ConfigurationError(f"CBOR tag for '{name}' must be non-negative, got {tag}")
            if tag in by_tag:
                raise ConfigurationError(
                    f"CBOR tag {tag} registered for both '{by_tag[tag]}' and '{name}'"
                )
            by_tag[tag] = name
        self._by_name: Mapping[str, int] = MappingProxyType(dict(entries))
        self._by_tag: Mapping[int, str] = MappingProxyType(by_tag)

    @classmethod
    def with_defaults(cls) -> "TagRegistry":
        """Registry holding only the built-in registrations."""
        return cls(DEFAULT_TAGS)

    def extended(self, additions: Mapping[str, int]) -> "TagRegistry":
        """Return a new registry with additional registrations.

        Re-registering a name with the same tag is allowed; changing the tag
        of a known name is not.

        Raises:
            ConfigurationError: If an addition contradicts an existing entry.
        """
        merged = dict(self._by_name)
        for name, tag in additions.items():
            existing = merged.get(name)
            if existing is not None and existing != tag:
                raise ConfigurationError(
                    f"UR type '{name}' is already registered with CBOR tag {existing}, "
                    f"cannot re-register with {tag}"
                )
            merged[name] = tag
        return TagRegistry(merged)

    def tag_for_name(self, name: str) -> int | None:
        """Look up the CBOR tag for a UR type name (exact match)."""
        return self._by_name.get(name)

    def name_for_tag(self, tag: int) -> str | None:
        """Look up the UR type name registered for a CBOR tag."""
        return self._by_tag.get(tag)

    def items(self) -> Iterator[tuple[str, int]]:
        """Iterate entries sorted by tag."""
        return iter(sorted(self._by_name.items(), key=lambda item: item[1]))

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"TagRegistry({len(self)} entries)"
