"""Info payload resolution and provenance mark extraction."""

from provenance_cli.core.extractor import ArtifactExtractor, ContainerUnwrapper, UnwrapResult
from provenance_cli.core.resolver import PayloadTagResolver, ResolvedPayload

__all__ = [
    "ArtifactExtractor",
    "ContainerUnwrapper",
    "PayloadTagResolver",
    "ResolvedPayload",
    "UnwrapResult",
]
