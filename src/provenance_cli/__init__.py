"""provenance-cli: info payloads and provenance mark extraction.

Resolves `info` payloads (hex or UR) into tagged CBOR values and recovers
provenance marks from arbitrary, possibly wrapped, UR-encoded envelopes.
"""

__version__ = "0.1.0"
