"""Collecting provenance marks from tokens or a chain directory.

Order contract handed to the report:
- Tokens given on the command line keep their given order.
- Mark files in a chain directory are read in lexicographic file-name order
  (so mark-10.json precedes mark-2.json). Reordering by sequence number is
  left to chain validation.

A mark that cannot be read or extracted becomes an issue naming its source;
collection continues with the remaining marks.
"""

from __future__ import annotations

__all__ = [
    "CollectedMark",
    "Collection",
    "MarkIssue",
    "MarkSource",
    "collect_marks",
    "sources_from_directory",
    "sources_from_tokens",
]

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from provenance_cli.constants import APP_NAME, MARK_FILE_GLOB, MARKS_SUBDIR
from provenance_cli.core.extractor import ArtifactExtractor
from provenance_cli.exceptions import ExtractionError
from provenance_cli.mark.record import ProvenanceRecord

_logger = logging.getLogger(f"{APP_NAME}.chain")

# Key holding the mark's UR in a chain directory's mark files
_MARK_FILE_UR_KEY = "ur"


@dataclass(frozen=True)
class MarkSource:
    """A UR to extract, labeled with where it came from."""

    label: str
    token: str


@dataclass(frozen=True)
class CollectedMark:
    source: str
    record: ProvenanceRecord


@dataclass(frozen=True)
class MarkIssue:
    source: str
    message: str


@dataclass
class Collection:
    """Marks and issues, each in input order."""

    marks: list[CollectedMark] = field(default_factory=list)
    issues: list[MarkIssue] = field(default_factory=list)

    @property
    def records(self) -> list[ProvenanceRecord]:
        return [mark.record for mark in self.marks]


def sources_from_tokens(tokens: Iterable[str]) -> list[MarkSource]:
    """Label command-line tokens with themselves, keeping their order.

    Blank entries are skipped.
    """
    return [MarkSource(label=token.strip(), token=token) for token in tokens if token.strip()]


def sources_from_directory(path: Path) -> tuple[list[MarkSource], list[MarkIssue]]:
    """Read mark URs from a chain directory.

    Uses `<path>/marks/` when present, else `<path>` itself. Each mark file is
    a JSON object whose "ur" field holds the mark's UR.

    Args:
        path: Chain directory.

    Returns:
        Sources in lexicographic file-name order, plus issues for files that
        could not be read.

    Raises:
        NotADirectoryError: If `path` is not a directory.
    """
    if not path.is_dir():
        raise NotADirectoryError(f"Chain directory not found: {path}")
    marks_dir = path / MARKS_SUBDIR
    if not marks_dir.is_dir():
        marks_dir = path

    sources: list[MarkSource] = []
    issues: list[MarkIssue] = []
    for mark_file in sorted(marks_dir.glob(MARK_FILE_GLOB), key=lambda p: p.name):
        label = mark_file.name
        try:
            data = json.loads(mark_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            issues.append(MarkIssue(source=label, message=f"unreadable mark file: {e}"))
            continue
        token = data.get(_MARK_FILE_UR_KEY) if isinstance(data, dict) else None
        if not isinstance(token, str):
            issues.append(
                MarkIssue(source=label, message=f"mark file has no '{_MARK_FILE_UR_KEY}' field")
            )
            continue
        sources.append(MarkSource(label=label, token=token))

    _logger.debug(
        {
            "event": "chain_directory_read",
            "path": str(marks_dir),
            "marks": len(sources),
            "issues": len(issues),
        }
    )
    return sources, issues


def collect_marks(
    sources: Iterable[MarkSource],
    extractor: ArtifactExtractor,
    issues: Iterable[MarkIssue] = (),
) -> Collection:
    """Extract one mark per source, preserving source order.

    Args:
        sources: URs to extract.
        extractor: Extractor bound to the session's registries.
        issues: Issues already found while gathering sources.

    Returns:
        Collected marks and issues.
    """
    collection = Collection(issues=list(issues))
    for source in sources:
        try:
            record = extractor.extract(source.token)
        except ExtractionError as e:
            collection.issues.append(MarkIssue(source=source.label, message=str(e)))
            continue
        collection.marks.append(CollectedMark(source=source.label, record=record))
    return collection
