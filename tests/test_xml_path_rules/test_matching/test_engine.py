"""Tests for the pattern match engine."""

import pytest

from xml_path_rules.matching import MatchEngine
from xml_path_rules.matching.engine import advance, initial_states, matches
from xml_path_rules.patterns import PatternRegistry, compile_pattern


def handler(node, context):
    return None


def opener(info, context):
    return None


class TestMatches:
    """Test whole-path matching."""

    @pytest.mark.parametrize(
        "pattern, path, expected",
        [
            ("foo", ["foo"], True),
            ("foo", ["a", "b", "foo"], True),
            ("foo", ["foo", "bar"], False),
            ("alpha/foo", ["root", "alpha", "foo"], True),
            ("alpha/foo", ["alpha", "x", "foo"], False),
            ("/alpha/foo", ["alpha", "foo"], True),
            ("/alpha/foo", ["root", "alpha", "foo"], False),
            ("alpha//foo", ["alpha", "foo"], True),
            ("alpha//foo", ["alpha", "beta", "gamma", "foo"], True),
            ("alpha//foo", ["root", "alpha", "beta", "foo"], True),
            ("alpha//foo", ["beta", "foo"], False),
            ("alpha/*", ["alpha", "x"], True),
            ("alpha/*", ["alpha"], False),
            ("alpha/*", ["alpha", "x", "y"], False),
            ("*", ["anything"], True),
            ("*", ["a", "b"], True),
            ("/*", ["a"], True),
            ("/*", ["a", "b"], False),
            ("//", ["a", "b", "c"], True),
            ("alpha//", ["alpha"], True),
            ("alpha//", ["alpha", "b", "c"], True),
            ("alpha//", ["beta"], False),
            ("//foo", ["a", "foo"], True),
            ("/a/*/c", ["a", "b", "c"], True),
            ("/a/*/c", ["a", "c"], False),
        ],
    )
    def test_matches(self, pattern: str, path, expected: bool) -> None:
        assert matches(compile_pattern(pattern), path) is expected

    def test_empty_path_never_matches(self) -> None:
        assert matches(compile_pattern("//"), []) is False

    def test_incremental_advance_equals_whole_path(self) -> None:
        """Test that stepping name by name reaches the same verdict."""
        pattern = compile_pattern("a//b/c")
        states = initial_states(pattern)
        for name in ["x", "a", "y", "b"]:
            states = advance(pattern, states, name)
        assert len(pattern.steps) not in states
        states = advance(pattern, states, "c")
        assert len(pattern.steps) in states


class TestMatchEngine:
    """Test rank-ordered matching through the engine."""

    def test_match_path_returns_most_specific_first(self) -> None:
        registry = PatternRegistry()
        registry.register("foo", handler)
        registry.register("/alpha/foo", handler)
        registry.register("alpha/foo", handler)
        registry.register("beta/foo", handler)

        engine = MatchEngine(registry)
        matched = engine.match_path(["alpha", "foo"])
        assert [rule.source for rule in matched] == ["/alpha/foo", "alpha/foo", "foo"]

    def test_step_prunes_dead_patterns(self) -> None:
        registry = PatternRegistry()
        registry.register("/catalog/book", handler)
        registry.register("/other/book", handler)
        engine = MatchEngine(registry)

        result = engine.step(engine.root_pending(), "catalog")
        assert result.matched == []
        assert [rule.source for rule, _ in result.pending] == ["/catalog/book"]

        result = engine.step(result.pending, "book")
        assert [rule.source for rule in result.matched] == ["/catalog/book"]
        assert result.pending == []

    def test_unanchored_patterns_stay_pending(self) -> None:
        registry = PatternRegistry()
        registry.register("book", handler)
        engine = MatchEngine(registry)

        result = engine.step(engine.root_pending(), "book")
        assert [rule.source for rule in result.matched] == ["book"]
        assert len(result.pending) == 1

    def test_open_and_close_matches(self) -> None:
        registry = PatternRegistry()
        registry.register("item", {"open_handler": opener})
        registry.register("list/item", handler)
        registry.register("/list/item", {"open_handler": opener, "close_handler": handler})
        engine = MatchEngine(registry)

        pending = engine.step(engine.root_pending(), "list").pending
        result = engine.step(pending, "item")

        assert [rule.source for rule in result.open_matches] == ["/list/item", "item"]
        assert [rule.source for rule in result.close_matches] == ["/list/item", "list/item"]
