"""Tests for the Node type."""

import pytest

from xml_path_rules.tree import Node


def make_book() -> Node:
    book = Node("book", "/shelf/book", {"id": "b1"})
    book.append_text("intro")
    for position, name in enumerate(["A", "B"], start=1):
        author = Node("author", "/shelf/book/author", position=position)
        author.append_text(name)
        book.append_child(author)
    book.append_text("middle")
    title = Node("title", "/shelf/book/title")
    title.append_text("T")
    book.append_child(title)
    return book


class TestNodeCreation:
    """Test Node construction and validation."""

    def test_defaults(self) -> None:
        node = Node("a", "/a")
        assert node.attributes == {}
        assert node.position == 1
        assert node.contents == []
        assert node.depth == 1

    def test_empty_name_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Node name cannot be empty"):
            Node("", "/")

    def test_invalid_position_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Node position must be >= 1"):
            Node("a", "/a", position=0)

    def test_initial_contents_are_indexed(self) -> None:
        child = Node("c", "/p/c")
        parent = Node("p", "/p", contents=["x", child])
        assert parent["c"] is child

    def test_append_child_rejects_non_nodes(self) -> None:
        with pytest.raises(TypeError, match="Child must be a Node instance"):
            Node("a", "/a").append_child("text")  # type: ignore

    def test_empty_text_is_not_stored(self) -> None:
        node = Node("a", "/a")
        node.append_text("")
        assert node.contents == []


class TestNodeAccess:
    """Test indexed child access and text helpers."""

    def test_last_child_by_name(self) -> None:
        book = make_book()
        assert book["author"].text == "B"
        assert book["title"].text == "T"

    def test_all_children_by_name(self) -> None:
        book = make_book()
        assert [author.text for author in book["author[]"]] == ["A", "B"]
        assert [author.position for author in book["author[]"]] == [1, 2]

    def test_missing_child(self) -> None:
        book = make_book()
        with pytest.raises(KeyError, match="isbn"):
            book["isbn"]
        assert book["isbn[]"] == []
        assert book.get("isbn") is None
        assert book.get("isbn[]", "none") == "none"
        assert "isbn" not in book
        assert "author" in book

    def test_child_helpers(self) -> None:
        book = make_book()
        assert book.child("title") is book["title"]
        assert book.child("missing") is None
        assert book.child_names() == ["author", "title"]

    def test_children_named_returns_a_copy(self) -> None:
        book = make_book()
        book.children_named("author").clear()
        assert len(book["author[]"]) == 2

    def test_contents_preserve_document_order(self) -> None:
        book = make_book()
        kinds = [item if isinstance(item, str) else item.name for item in book.contents]
        assert kinds == ["intro", "author", "author", "middle", "title"]

    def test_text_and_full_text(self) -> None:
        book = make_book()
        assert book.text == "intromiddle"
        assert book.full_text == "introABmiddleT"

    def test_attributes(self) -> None:
        book = make_book()
        assert book.get_attribute("id") == "b1"
        assert book.get_attribute("lang", "en") == "en"

    def test_depth_from_path(self) -> None:
        assert make_book()["title"].depth == 3


class TestNodeTraversal:
    """Test traversal and serialization helpers."""

    def test_iter_nodes_document_order(self) -> None:
        names = [node.name for node in make_book().iter_nodes()]
        assert names == ["book", "author", "author", "title"]

    def test_subtree_size(self) -> None:
        assert make_book().subtree_size() == 4
        assert Node("leaf", "/leaf").subtree_size() == 1

    def test_to_dict(self) -> None:
        data = make_book().to_dict()
        assert data["name"] == "book"
        assert data["attributes"] == {"id": "b1"}
        assert data["contents"][0] == "intro"
        assert data["contents"][1]["name"] == "author"
        assert "contents" not in Node("a", "/a").to_dict()

    def test_repr_is_compact(self) -> None:
        assert repr(make_book()) == "Node(name='book', path='/shelf/book', position=1, contents=5)"
