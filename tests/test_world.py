"""Tests for document worlds."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from typst_count.aggregator import aggregate, count_document
from typst_count.exceptions import CompilationError, UnresolvedImportError
from typst_count.schemas import ContentNode, CountResult, NodeKind
from typst_count.world import FileSystemWorld, InMemoryWorld


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestFileSystemWorld:
    """Tests for FileSystemWorld."""

    def test_compile_uses_canonical_path(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "doc.json", [{"func": "text", "text": "hi"}])
        document = FileSystemWorld().compile(str(path))
        assert document.file_id == str(path.resolve())
        assert document.root.children == (ContentNode.text_run("hi"),)

    def test_compile_html(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.html"
        path.write_text("<p>Hello there</p>", encoding="utf-8")
        document = FileSystemWorld().compile(str(path))
        assert document.root.children[0].kind is NodeKind.PARAGRAPH

    def test_missing_file_is_compilation_error(self, tmp_path: Path) -> None:
        with pytest.raises(CompilationError, match="Failed to find input file"):
            FileSystemWorld().compile(str(tmp_path / "missing.json"))

    def test_unsupported_suffix_is_compilation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.typ"
        path.write_text("= Heading", encoding="utf-8")
        with pytest.raises(CompilationError, match="Unsupported content file type"):
            FileSystemWorld().compile(str(path))

    def test_malformed_file_reports_its_path(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(CompilationError) as exc_info:
            FileSystemWorld().compile(str(path))
        assert exc_info.value.file_id == str(path.resolve())

    def test_relative_reference_resolves_from_importer(self, tmp_path: Path) -> None:
        importer = write_json(tmp_path / "chapters" / "one.json", [])
        target = write_json(tmp_path / "chapters" / "parts" / "a.json", ["part"])
        document = FileSystemWorld().resolve("parts/a.json", importer=str(importer.resolve()))
        assert document.file_id == str(target.resolve())

    def test_absolute_reference_resolves_from_root(self, tmp_path: Path) -> None:
        main = write_json(
            tmp_path / "main.json",
            [{"func": "include", "path": "chapters/one.json"}],
        )
        write_json(tmp_path / "chapters" / "one.json", [{"func": "include", "path": "/shared/note.json"}])
        write_json(tmp_path / "shared" / "note.json", [{"func": "text", "text": "Shared note."}])

        report = count_document(str(main), FileSystemWorld())

        assert report.ok, report.error
        assert report.count == CountResult(words=2, characters=12)

    def test_absolute_references_follow_each_root_file(self, tmp_path: Path) -> None:
        for name, note in (("a", "one"), ("b", "two words")):
            write_json(tmp_path / name / "main.json", [{"func": "include", "path": "../shared/s.json"}])
            write_json(tmp_path / name / "note.json", [{"func": "text", "text": note}])
        write_json(tmp_path / "shared" / "s.json", [{"func": "include", "path": "/note.json"}])
        roots = [str(tmp_path / "a" / "main.json"), str(tmp_path / "b" / "main.json")]
        world = FileSystemWorld()

        forward = aggregate(roots, world)
        backward = aggregate(list(reversed(roots)), world)

        one = CountResult(words=1, characters=3)
        two = CountResult(words=2, characters=9)
        assert [file.count for file in forward.files] == [one, two]
        assert [file.count for file in backward.files] == [two, one]

    def test_absolute_reference_uses_origin(self, tmp_path: Path) -> None:
        origin = write_json(tmp_path / "book" / "main.json", [])
        target = write_json(tmp_path / "book" / "note.json", ["note"])
        shared = write_json(tmp_path / "shared" / "s.json", [])
        document = FileSystemWorld().resolve(
            "/note.json", importer=str(shared.resolve()), origin=str(origin.resolve())
        )
        assert document.file_id == str(target.resolve())

    def test_explicit_root_wins(self, tmp_path: Path) -> None:
        write_json(tmp_path / "project" / "note.json", ["root note"])
        importer = write_json(tmp_path / "elsewhere" / "doc.json", [])
        world = FileSystemWorld(tmp_path / "project")
        document = world.resolve("/note.json", importer=str(importer.resolve()))
        assert document.file_id == str((tmp_path / "project" / "note.json").resolve())

    def test_missing_reference_is_unresolved_import(self, tmp_path: Path) -> None:
        importer = write_json(tmp_path / "doc.json", [])
        with pytest.raises(UnresolvedImportError) as exc_info:
            FileSystemWorld().resolve("nope.json", importer=str(importer))
        assert exc_info.value.reference == "nope.json"
        assert exc_info.value.file_id == str(importer)

    def test_uncompilable_reference_is_unresolved_import(self, tmp_path: Path) -> None:
        importer = write_json(tmp_path / "doc.json", [])
        (tmp_path / "bad.json").write_text("[1, 2", encoding="utf-8")
        with pytest.raises(UnresolvedImportError, match="Cannot compile"):
            FileSystemWorld().resolve("bad.json", importer=str(importer))


class TestInMemoryWorld:
    """Tests for InMemoryWorld."""

    def test_compile_and_resolve(self) -> None:
        root = ContentNode.text_run("x")
        world = InMemoryWorld({"a": root})
        assert world.compile("a").root == root
        assert world.resolve("a", importer="b").file_id == "a"

    def test_missing_entries(self) -> None:
        world = InMemoryWorld({})
        with pytest.raises(CompilationError):
            world.compile("a")
        with pytest.raises(UnresolvedImportError):
            world.resolve("a", importer="b")
