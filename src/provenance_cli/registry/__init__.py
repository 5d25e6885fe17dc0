"""Read-only registries shared by the resolver and the extractor."""

from provenance_cli.registry.known_values import DEFAULT_KNOWN_VALUES, KnownValueRegistry
from provenance_cli.registry.tags import DEFAULT_TAGS, TagRegistry

__all__ = [
    "DEFAULT_KNOWN_VALUES",
    "DEFAULT_TAGS",
    "KnownValueRegistry",
    "TagRegistry",
]
