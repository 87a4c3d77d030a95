"""Match engine evaluating compiled patterns against element paths.

A pattern is run as a small non-deterministic automaton whose states are
positions in ``Pattern.steps``. Position ``len(steps)`` is accepting. A
literal step consumes an equal name, a single wildcard consumes any name and a
descendant wildcard consumes any name while staying put; a descendant wildcard
may also be passed over without consuming anything.

Because the automaton is advanced one element name at a time, the state set
reached at an element can be handed to its children. That is what lets the
interest tracker evaluate each pattern without re-matching the whole path on
every open event.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from xml_path_rules.patterns.compiler import Pattern, Segment, SegmentKind
from xml_path_rules.patterns.registry import PatternRegistry, Rule

StateSet = FrozenSet[int]

EMPTY: StateSet = frozenset()


def _closure(steps: Sequence[Segment], states: Iterable[int]) -> StateSet:
    result = set(states)
    frontier = list(result)
    while frontier:
        state = frontier.pop()
        if state < len(steps) and steps[state].kind is SegmentKind.DESCENDANT_WILDCARD:
            following = state + 1
            if following not in result:
                result.add(following)
                frontier.append(following)
    return frozenset(result)


def initial_states(pattern: Pattern) -> StateSet:
    """States of ``pattern`` before any element has been consumed."""
    return _closure(pattern.steps, (0,))


def advance(pattern: Pattern, states: StateSet, name: str) -> StateSet:
    """Consume one element name."""
    steps = pattern.steps
    reached = set()
    for state in states:
        if state >= len(steps):
            continue
        step = steps[state]
        if step.kind is SegmentKind.DESCENDANT_WILDCARD:
            reached.add(state)
        elif step.kind is SegmentKind.SINGLE_WILDCARD or step.name == name:
            reached.add(state + 1)
    if not reached:
        return EMPTY
    return _closure(steps, reached)


def accepts(pattern: Pattern, states: StateSet) -> bool:
    return len(pattern.steps) in states


def can_extend(pattern: Pattern, states: StateSet) -> bool:
    """Check whether a deeper element could still complete the pattern."""
    return any(state < len(pattern.steps) for state in states)


def matches(pattern: Pattern, path: Sequence[str]) -> bool:
    """Evaluate ``pattern`` against a full path from the root.

    Examples:
        >>> from xml_path_rules.patterns import compile_pattern
        >>> matches(compile_pattern("alpha//foo"), ["alpha", "beta", "foo"])
        True
        >>> matches(compile_pattern("/alpha/foo"), ["root", "alpha", "foo"])
        False
    """
    if not path:
        return False
    states = initial_states(pattern)
    for name in path:
        states = advance(pattern, states, name)
        if not states:
            return False
    return accepts(pattern, states)


PendingEntry = Tuple[Rule, StateSet]


@dataclass
class StepResult:
    """Outcome of advancing every pending rule through one element.

    ``pending`` keeps only rules that may still match a descendant; ``matched``
    lists the rules whose pattern matches the element itself. Both preserve
    specificity order.
    """

    pending: List[PendingEntry]
    matched: List[Rule]

    @property
    def open_matches(self) -> List[Rule]:
        return [rule for rule in self.matched if rule.open_handler is not None]

    @property
    def close_matches(self) -> List[Rule]:
        return [rule for rule in self.matched if rule.close_handler is not None]


class MatchEngine:
    """Applies the rules of a registry to element paths in rank order."""

    def __init__(self, registry: PatternRegistry) -> None:
        self.registry = registry

    def root_pending(self) -> List[PendingEntry]:
        """Pending entries for the (virtual) parent of the root element."""
        return [(rule, initial_states(rule.pattern)) for rule in self.registry]

    def step(self, pending: Sequence[PendingEntry], name: str) -> StepResult:
        """Advance every pending rule through element ``name``."""
        next_pending: List[PendingEntry] = []
        matched: List[Rule] = []
        for rule, states in pending:
            reached = advance(rule.pattern, states, name)
            if not reached:
                continue
            if accepts(rule.pattern, reached):
                matched.append(rule)
            if can_extend(rule.pattern, reached):
                next_pending.append((rule, reached))
        return StepResult(pending=next_pending, matched=matched)

    def match_path(self, path: Sequence[str]) -> List[Rule]:
        """All rules matching ``path``, most specific first."""
        return [rule for rule in self.registry if matches(rule.pattern, path)]
