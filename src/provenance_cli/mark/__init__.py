"""Provenance mark records."""

from provenance_cli.mark.record import ProvenanceRecord, Resolution

__all__ = ["ProvenanceRecord", "Resolution"]
