"""Mark collection and chain reports."""

from provenance_cli.chain.collect import (
    CollectedMark,
    Collection,
    MarkIssue,
    MarkSource,
    collect_marks,
    sources_from_directory,
    sources_from_tokens,
)
from provenance_cli.chain.report import ChainGroup, ChainReport, MarkEntry, ReportIssue, build_report

__all__ = [
    "ChainGroup",
    "ChainReport",
    "CollectedMark",
    "Collection",
    "MarkEntry",
    "MarkIssue",
    "MarkSource",
    "ReportIssue",
    "build_report",
    "collect_marks",
    "sources_from_directory",
    "sources_from_tokens",
]
