"""Tests for mark collection and chain reports."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from provenance_cli.chain import (
    MarkIssue,
    MarkSource,
    build_report,
    collect_marks,
    sources_from_directory,
    sources_from_tokens,
)
from provenance_cli.core import ArtifactExtractor
from provenance_cli.mark import ProvenanceRecord


def _write_mark(directory: Path, name: str, record: ProvenanceRecord) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(json.dumps({"seq": record.seq, "ur": record.to_ur_string()}))


class TestSourcesFromTokens:
    def test_keeps_order_and_skips_blanks(self) -> None:
        sources = sources_from_tokens(["ur:b/x", "  ", "ur:a/y\n"])

        assert [s.label for s in sources] == ["ur:b/x", "ur:a/y"]


class TestSourcesFromDirectory:
    """Tests for reading a chain directory."""

    def test_prefers_marks_subdirectory(
        self, tmp_path: Path, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        # Arrange
        _write_mark(tmp_path / "marks", "mark-0.json", make_record(seq=0))
        (tmp_path / "generator.json").write_text("{}")

        # Act
        sources, issues = sources_from_directory(tmp_path)

        # Assert
        assert [s.label for s in sources] == ["mark-0.json"]
        assert issues == []

    def test_falls_back_to_directory_itself(
        self, tmp_path: Path, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        _write_mark(tmp_path, "mark-0.json", make_record(seq=0))

        sources, _ = sources_from_directory(tmp_path)

        assert len(sources) == 1

    def test_lexicographic_file_order(
        self, tmp_path: Path, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        # Arrange
        marks = tmp_path / "marks"
        for seq in (2, 10, 1):
            _write_mark(marks, f"mark-{seq}.json", make_record(seq=seq))

        # Act
        sources, _ = sources_from_directory(tmp_path)

        # Assert
        assert [s.label for s in sources] == ["mark-1.json", "mark-10.json", "mark-2.json"]

    def test_unreadable_files_become_issues(self, tmp_path: Path) -> None:
        # Arrange
        marks = tmp_path / "marks"
        marks.mkdir()
        (marks / "a.json").write_text("{broken")
        (marks / "b.json").write_text(json.dumps({"seq": 0}))
        (marks / "c.json").write_text(json.dumps(["ur:provenance/xx"]))

        # Act
        sources, issues = sources_from_directory(tmp_path)

        # Assert
        assert sources == []
        assert [i.source for i in issues] == ["a.json", "b.json", "c.json"]
        assert "unreadable" in issues[0].message
        assert "'ur'" in issues[1].message

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(NotADirectoryError):
            sources_from_directory(tmp_path / "absent")


class TestCollectMarks:
    def test_failures_recorded_and_collection_continues(
        self, extractor: ArtifactExtractor, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        # Arrange
        good = make_record(seq=1)
        sources = [
            MarkSource(label="bad", token="not a ur"),
            MarkSource(label="good", token=good.to_ur_string()),
        ]
        earlier = [MarkIssue(source="x.json", message="unreadable mark file")]

        # Act
        collection = collect_marks(sources, extractor, earlier)

        # Assert
        assert collection.records == [good]
        assert [i.source for i in collection.issues] == ["x.json", "bad"]
        assert "failed to parse UR" in collection.issues[1].message


class TestChainReport:
    """Tests for build_report and its renderings."""

    def test_groups_by_chain_in_first_seen_order(
        self, extractor: ArtifactExtractor, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        # Arrange
        records = [
            make_record(seq=1, chain=2),
            make_record(seq=0, chain=1),
            make_record(seq=0, chain=2),
        ]
        sources = [MarkSource(label=f"m{i}", token=r.to_ur_string()) for i, r in enumerate(records)]

        # Act
        report = build_report(collect_marks(sources, extractor))

        # Assert
        assert [c.chain_id for c in report.chains] == ["02020202", "01010101"]
        assert [m.seq for m in report.chains[0].marks] == [1, 0]
        assert report.mark_count == 3
        assert not report.has_issues

    def test_format_text(
        self, extractor: ArtifactExtractor, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        # Arrange
        record = make_record(seq=0, info="hello")
        sources = [
            MarkSource(label="m0", token=record.to_ur_string()),
            MarkSource(label="m1", token="ur:xid"),
        ]

        # Act
        text = build_report(collect_marks(sources, extractor)).format_text()

        # Assert
        lines = text.splitlines()
        assert lines[0] == f"Chain 1: {record.chain_id_hex}"
        assert lines[1].startswith(f"  0: {record.identifier} 2023-06-20T00:00:00+00:00 (low)")
        assert lines[1].endswith(" info")
        assert lines[2] == "Issues:"
        assert lines[3].startswith("  m1: ")

    def test_json_dump(
        self, extractor: ArtifactExtractor, make_record: Callable[..., ProvenanceRecord]
    ) -> None:
        record = make_record()
        report = build_report(
            collect_marks([MarkSource(label="m0", token=record.to_ur_string())], extractor)
        )

        data = json.loads(report.model_dump_json())

        assert data["chains"][0]["marks"][0]["id"] == record.identifier
        assert data["issues"] == []
