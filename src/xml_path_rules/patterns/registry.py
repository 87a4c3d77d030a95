"""Pattern registry: compiled patterns paired with their handlers.

The registry owns every ``Rule`` for the lifetime of a dispatcher and keeps
them in specificity order, so every consumer that walks ``registry.rules``
sees the most specific rule first.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from xml_path_rules.shared.config import WhitespaceMode
from xml_path_rules.shared.logging import get_logger

from .compiler import Pattern, compile_pattern

OpenHandler = Callable[..., Any]
CloseHandler = Callable[..., Any]

_SPEC_KEYS = ("open_handler", "close_handler", "whitespace")


@dataclass(frozen=True)
class HandlerSpec:
    """Handlers and text normalization attached to one pattern.

    ``whitespace`` left as ``None`` resolves to the dispatcher's configured
    default when the spec is registered.
    """

    open_handler: Optional[OpenHandler] = None
    close_handler: Optional[CloseHandler] = None
    whitespace: Optional[WhitespaceMode] = None

    def __post_init__(self) -> None:
        """Validate handler specification."""
        if self.open_handler is None and self.close_handler is None:
            raise ValueError("HandlerSpec needs an open_handler or a close_handler")
        if self.open_handler is not None and not callable(self.open_handler):
            raise TypeError("open_handler must be callable")
        if self.close_handler is not None and not callable(self.close_handler):
            raise TypeError("close_handler must be callable")
        if self.whitespace is not None:
            object.__setattr__(
                self, "whitespace", WhitespaceMode.coerce(self.whitespace)
            )

    @classmethod
    def from_value(cls, value: Any) -> "HandlerSpec":
        """Build a spec from a callable, a spec or a mapping of options."""
        if isinstance(value, HandlerSpec):
            return value
        if isinstance(value, Mapping):
            unknown = sorted(set(value) - set(_SPEC_KEYS))
            if unknown:
                raise TypeError(
                    f"Unknown handler options {unknown}; expected {list(_SPEC_KEYS)}"
                )
            return cls(**dict(value))
        if callable(value):
            return cls(close_handler=value)
        raise TypeError(
            "handler must be a callable, a HandlerSpec or a mapping, "
            f"got {type(value).__name__}"
        )


@dataclass(frozen=True)
class Rule:
    """A registered pattern with its resolved handler specification."""

    pattern: Pattern
    open_handler: Optional[OpenHandler]
    close_handler: Optional[CloseHandler]
    whitespace: WhitespaceMode

    @property
    def source(self) -> str:
        return self.pattern.source

    @property
    def wants_node(self) -> bool:
        return self.close_handler is not None


class PatternRegistry:
    """Holds all rules of a dispatcher in specificity order.

    Examples:
        >>> registry = PatternRegistry()
        >>> _ = registry.register("foo", print)
        >>> _ = registry.register("/alpha/foo", print)
        >>> [rule.source for rule in registry]
        ['/alpha/foo', 'foo']
    """

    def __init__(
        self,
        default_whitespace: WhitespaceMode = WhitespaceMode.NORMALIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        self.default_whitespace = default_whitespace
        self.logger = get_logger(__name__, correlation_id, "pattern_registry")
        self._rules: List[Rule] = []
        self._next_sequence = 0

    def register(
        self,
        pattern: str,
        handler: Union[CloseHandler, HandlerSpec, Mapping[str, Any]]
    ) -> Rule:
        """Compile ``pattern`` and attach ``handler`` to it.

        Raises:
            InvalidPatternError: If the pattern does not compile
            TypeError, ValueError: If the handler specification is unusable
        """
        compiled = compile_pattern(pattern, sequence=self._next_sequence)
        spec = HandlerSpec.from_value(handler)
        rule = Rule(
            pattern=compiled,
            open_handler=spec.open_handler,
            close_handler=spec.close_handler,
            whitespace=spec.whitespace or self.default_whitespace,
        )
        self._next_sequence += 1
        self._rules.append(rule)
        self._rules.sort(key=lambda item: item.pattern.rank_key)

        self.logger.debug(
            "Registered pattern",
            extra={
                "pattern": pattern,
                "anchored": compiled.anchored,
                "rank": self._rules.index(rule),
                "has_open_handler": rule.open_handler is not None,
                "has_close_handler": rule.close_handler is not None,
            }
        )
        return rule

    def register_many(
        self,
        rules: Mapping[str, Union[CloseHandler, HandlerSpec, Mapping[str, Any]]]
    ) -> List[Rule]:
        """Register every pattern of a mapping, in the mapping's order."""
        return [self.register(pattern, handler) for pattern, handler in rules.items()]

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def describe(self) -> List[Dict[str, Any]]:
        """Summarize the rules in rank order."""
        return [
            {
                "rank": rank,
                "pattern": rule.source,
                "anchored": rule.pattern.anchored,
                "literals": rule.pattern.literal_count,
                "wildcards": rule.pattern.wildcard_count,
                "open_handler": rule.open_handler is not None,
                "close_handler": rule.close_handler is not None,
                "whitespace": rule.whitespace.value,
            }
            for rank, rule in enumerate(self._rules)
        ]
