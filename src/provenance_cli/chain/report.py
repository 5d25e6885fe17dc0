"""Chain report: collected marks grouped by chain.

Groups marks by chain id (chains in first-seen order, marks in input order)
and renders the result as text or JSON. Gap and genesis detection are the
mark library's job and are not performed here.
"""

from __future__ import annotations

__all__ = [
    "ChainGroup",
    "ChainReport",
    "MarkEntry",
    "ReportIssue",
    "build_report",
]

from pydantic import BaseModel, Field

from provenance_cli.chain.collect import Collection


class MarkEntry(BaseModel):
    """A single mark in a chain group."""

    source: str = Field(description="Token or file the mark came from")
    id: str = Field(description="Short mark identifier (hash prefix)")
    seq: int = Field(description="Sequence number")
    date: str = Field(description="Mark date (ISO 8601)")
    resolution: str = Field(description="Mark resolution")
    has_info: bool = Field(description="Whether the mark carries an info payload")


class ChainGroup(BaseModel):
    """Marks sharing one chain id."""

    chain_id: str = Field(description="Chain id (hex)")
    marks: list[MarkEntry] = Field(default_factory=list, description="Marks in input order")


class ReportIssue(BaseModel):
    """A mark that could not be read or extracted."""

    source: str = Field(description="Token or file that failed")
    message: str = Field(description="Why it failed")


class ChainReport(BaseModel):
    """Report over all collected marks."""

    chains: list[ChainGroup] = Field(default_factory=list, description="Chains in first-seen order")
    issues: list[ReportIssue] = Field(default_factory=list, description="Extraction failures")

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    @property
    def mark_count(self) -> int:
        return sum(len(chain.marks) for chain in self.chains)

    def format_text(self) -> str:
        """Render as plain text, one line per mark."""
        lines: list[str] = []
        for index, chain in enumerate(self.chains, start=1):
            lines.append(f"Chain {index}: {chain.chain_id}")
            for mark in chain.marks:
                info = " info" if mark.has_info else ""
                lines.append(f"  {mark.seq}: {mark.id} {mark.date} ({mark.resolution}){info}")
        if self.issues:
            lines.append("Issues:")
            lines.extend(f"  {issue.source}: {issue.message}" for issue in self.issues)
        return "\n".join(lines)


def build_report(collection: Collection) -> ChainReport:
    """Group a collection into a report."""
    groups: dict[str, ChainGroup] = {}
    for collected in collection.marks:
        record = collected.record
        group = groups.setdefault(record.chain_id_hex, ChainGroup(chain_id=record.chain_id_hex))
        group.marks.append(
            MarkEntry(
                source=collected.source,
                id=record.identifier,
                seq=record.seq,
                date=record.date.isoformat(),
                resolution=record.resolution.name.lower(),
                has_info=record.info is not None,
            )
        )
    return ChainReport(
        chains=list(groups.values()),
        issues=[ReportIssue(source=i.source, message=i.message) for i in collection.issues],
    )
