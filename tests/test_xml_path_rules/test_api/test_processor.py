"""Tests for the module-level processing functions."""

import io

import pytest

from xml_path_rules.api import describe_rules, process, process_file, process_string
from xml_path_rules.shared.config import DispatchConfig
from xml_path_rules.shared.errors import InvalidPatternError

CATALOG = """<?xml version="1.0"?>
<catalog>
  <book id="b1"><title>Dune</title><author>Herbert</author></book>
  <book id="b2"><title>Emma</title><author>Austen</author></book>
</catalog>
"""


class TestProcess:
    """Test process() with the supported input kinds."""

    def test_string(self) -> None:
        titles = []
        result = process(CATALOG, {"book/title": lambda node, ctx: titles.append(node.text)})

        assert titles == ["Dune", "Emma"]
        assert result.completed is True

    def test_file_object(self) -> None:
        ids = []
        process(
            io.BytesIO(CATALOG.encode("utf-8")),
            {"book": {"open_handler": lambda info, ctx: ids.append(info.attributes["id"])}},
        )
        assert ids == ["b1", "b2"]

    def test_with_config(self) -> None:
        titles = []
        config = DispatchConfig(default_whitespace="keep", correlation_id="cfg")
        result = process(
            "<r><title> x </title></r>",
            {"title": lambda node, ctx: titles.append(node.text)},
            config,
        )
        assert titles == [" x "]
        assert result.correlation_id == "cfg"

    def test_invalid_pattern(self) -> None:
        with pytest.raises(InvalidPatternError):
            process(CATALOG, {"book/": lambda node, ctx: None})


class TestProcessString:
    """Test process_string()."""

    def test_bytes(self) -> None:
        authors = []
        process_string(
            CATALOG.encode("utf-8"),
            {"/catalog/book/author": lambda node, ctx: authors.append(node.text)},
        )
        assert authors == ["Herbert", "Austen"]

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="xml_string must be str or bytes"):
            process_string(io.StringIO(CATALOG), {"book": lambda node, ctx: None})  # type: ignore


class TestProcessFile:
    """Test process_file()."""

    def test_path(self, tmp_path) -> None:
        path = tmp_path / "catalog.xml"
        path.write_text(CATALOG, encoding="utf-8")
        books = []

        result = process_file(path, {"book": lambda node, ctx: books.append(node)})

        assert [book["title"].text for book in books] == ["Dune", "Emma"]
        assert books[1].position == 2
        assert result.statistics.nodes_created == 6

    def test_string_path(self, tmp_path) -> None:
        path = tmp_path / "catalog.xml"
        path.write_text(CATALOG, encoding="utf-8")
        titles = []
        process_file(str(path), {"title": lambda node, ctx: titles.append(node.text)})
        assert titles == ["Dune", "Emma"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="XML file not found"):
            process_file(tmp_path / "missing.xml", {"book": lambda node, ctx: None})


class TestDescribeRules:
    """Test describe_rules()."""

    def test_reports_rank_order(self) -> None:
        described = describe_rules({
            "title": lambda node, ctx: None,
            "/catalog/book/title": lambda node, ctx: None,
            "book/*": {"open_handler": lambda info, ctx: None},
        })
        assert [entry["pattern"] for entry in described] == [
            "/catalog/book/title", "book/*", "title",
        ]
        assert described[1]["close_handler"] is False
