"""Rule dispatcher: the drive loop tying all components together.

For every tokenizer event the dispatcher updates the interest tracker, feeds
the tree builder, invokes matching handlers in specificity order and lets the
lifecycle manager decide what happens to each closed Node. Everything runs
synchronously on the caller's thread, one event at a time.
"""

import time
import uuid
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Union

from xml_path_rules.events.events import ElementClose, ElementOpen, Event, Text
from xml_path_rules.events.source import InputType, XMLEventSource
from xml_path_rules.matching.engine import MatchEngine
from xml_path_rules.patterns.registry import HandlerSpec, PatternRegistry, Rule
from xml_path_rules.shared.config import DispatchConfig
from xml_path_rules.shared.errors import HandlerError, ReentrantDriveError
from xml_path_rules.shared.logging import get_logger
from xml_path_rules.shared.result import DiagnosticSeverity, DriveResult
from xml_path_rules.tools.memory import MemoryMonitor, NodeAllocationTracker
from xml_path_rules.tree.builder import TreeBuilder

from .context import ElementInfo, HandlerContext, StopProcessing
from .interest import InterestTracker, OpenFrame
from .lifecycle import LifecycleManager

SourceType = Union[InputType, Iterable[Event]]
HandlerValue = Union[Callable[..., Any], HandlerSpec, Mapping[str, Any]]

MS_PER_SECOND = 1000


class RuleDispatcher:
    """Registers path rules and drives documents through them.

    Handlers are called as ``close_handler(node, context)`` and
    ``open_handler(element_info, context)``.

    Examples:
        >>> titles = []
        >>> dispatcher = RuleDispatcher({
        ...     "book/title": lambda node, context: titles.append(node.text),
        ... })
        >>> result = dispatcher.drive("<shelf><book><title> Dune </title></book></shelf>")
        >>> titles
        ['Dune']
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, HandlerValue]] = None,
        config: Optional[DispatchConfig] = None,
        allocations: Optional[NodeAllocationTracker] = None
    ) -> None:
        """Initialize dispatcher.

        Args:
            rules: Optional mapping of pattern text to handler specification
            config: Dispatch configuration (defaults to ``DispatchConfig()``)
            allocations: Tracker receiving Node construction/release counts;
                reset at the start of every drive
        """
        self.config = config or DispatchConfig()
        self.logger = get_logger(__name__, self.config.correlation_id, "rule_dispatcher")
        self.registry = PatternRegistry(
            default_whitespace=self.config.default_whitespace,
            correlation_id=self.config.correlation_id,
        )
        self.engine = MatchEngine(self.registry)
        self.allocations = allocations or NodeAllocationTracker()
        self._driving = False
        if rules:
            self.registry.register_many(rules)

    def register(self, pattern: str, handler: HandlerValue) -> Rule:
        """Register one rule; see ``PatternRegistry.register``."""
        if self._driving:
            raise ReentrantDriveError("Rules cannot be registered while driving")
        return self.registry.register(pattern, handler)

    @property
    def rules(self) -> List[Rule]:
        return self.registry.rules

    @property
    def is_driving(self) -> bool:
        return self._driving

    def drive(self, source: SourceType) -> DriveResult:
        """Consume ``source`` until end of document or cancellation.

        Args:
            source: An iterable of events, or XML as str/bytes/Path/file object

        Returns:
            DriveResult with statistics and diagnostics

        Raises:
            HandlerError: A handler raised; open frames were released first
            MalformedInputError: The tokenizer rejected the input
            ReentrantDriveError: A drive of this dispatcher is already in
                progress. A handler that re-enters sees it directly; the
                outer drive then raises it as the ``original`` of a
                ``HandlerError``
        """
        if self._driving:
            raise ReentrantDriveError("drive() cannot be re-entered from a handler")
        self._driving = True
        try:
            correlation_id = self.config.correlation_id or str(uuid.uuid4())
            return _DriveSession(self, correlation_id).run(source)
        finally:
            self._driving = False


class _DriveSession:
    """State of a single drive; discarded when the drive returns or raises."""

    def __init__(self, dispatcher: RuleDispatcher, correlation_id: str) -> None:
        self.config = dispatcher.config
        self.registry = dispatcher.registry
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "drive")

        self.allocations = dispatcher.allocations
        self.allocations.reset()
        self.tracker = InterestTracker(dispatcher.engine)
        self.builder = TreeBuilder(self.allocations, correlation_id)
        self.lifecycle = LifecycleManager(self.builder, correlation_id)
        self.monitor: Optional[MemoryMonitor] = None
        if self.config.track_memory:
            self.monitor = MemoryMonitor(
                sample_interval=self.config.memory_sample_interval,
                correlation_id=correlation_id,
            )

        self.result = DriveResult(correlation_id=correlation_id)
        self.stats = self.result.statistics
        self.stopped = False
        self.stop_path: Optional[str] = None
        self._stray_text_reported = False
        self._debug = self.logger.is_debug_enabled()

    def _open(self, source: SourceType) -> Iterator[Event]:
        if isinstance(source, (str, bytes, Path)) or hasattr(source, "read"):
            return iter(XMLEventSource.from_config(source, self.config, self.correlation_id))
        if hasattr(source, "__iter__"):
            return iter(source)
        raise TypeError(f"Unsupported source type {type(source).__name__}")

    def run(self, source: SourceType) -> DriveResult:
        start_time = time.time()
        events = self._open(source)
        self.logger.info(
            "Starting drive",
            extra={
                "source_type": type(source).__name__,
                "rule_count": len(self.registry),
            }
        )
        if self.monitor is not None:
            self.monitor.sample("start")

        try:
            for event in events:
                self.stats.events_processed += 1
                self._dispatch(event)
                if self.monitor is not None:
                    self.monitor.maybe_sample(self.stats.events_processed)
                if self.stopped:
                    break

            if self.stopped:
                self._release_on_stop()
            elif self.tracker.depth:
                self._release_unclosed()

        except Exception as e:
            self._abort(e)
            raise

        finally:
            close = getattr(events, "close", None)
            if close is not None:
                close()
            self._finalize(start_time)

        self.result.completed = not self.stopped
        self.result.cancelled = self.stopped
        self.logger.info("Drive finished", extra=self.result.summary())
        return self.result

    def request_stop(self, path: Optional[str]) -> None:
        if self.stopped:
            return
        self.stopped = True
        self.stop_path = path
        self.logger.info("Stop requested by handler", extra={"path": path})

    # Event handling

    def _dispatch(self, event: Event) -> None:
        if isinstance(event, ElementOpen):
            self._on_open(event)
        elif isinstance(event, Text):
            self._on_text(event)
        elif isinstance(event, ElementClose):
            self._on_close(event)
        else:
            raise TypeError(f"Unsupported event type {type(event).__name__}")

    def _on_open(self, event: ElementOpen) -> None:
        parent = self.tracker.current
        if parent is not None:
            self.builder.flush_text(parent)

        frame = self.tracker.open(event.name, dict(event.attributes))
        self.stats.elements_opened += 1
        if frame.depth > self.stats.max_depth:
            self.stats.max_depth = frame.depth
        self.builder.start(frame)

        if self._debug:
            self.logger.debug(
                "Element opened",
                extra={
                    "element": frame.name,
                    "depth": frame.depth,
                    "pending": len(frame.pending),
                    "materializing": frame.materializing,
                }
            )

        if not frame.open_matches:
            return
        info = ElementInfo(
            name=frame.name,
            path=frame.path or self.tracker.current_path(),
            attributes=frame.attributes,
            position=frame.position,
            depth=frame.depth,
        )
        for rule in frame.open_matches:
            self.stats.open_handler_calls += 1
            self._invoke(rule, "open", rule.open_handler, info, frame)
            if self.stopped:
                return

    def _on_text(self, event: Text) -> None:
        frame = self.tracker.current
        if frame is None:
            if event.text.strip() and not self._stray_text_reported:
                self._stray_text_reported = True
                self.result.add_diagnostic(
                    DiagnosticSeverity.WARNING,
                    "Text outside the root element ignored",
                    "drive",
                )
            return
        self.builder.add_text(frame, event.text)

    def _on_close(self, event: ElementClose) -> None:
        frame, parent = self.tracker.close()
        self.stats.elements_closed += 1
        self.builder.flush_text(frame, closing=True)

        if frame.node is not None:
            try:
                for rule in frame.close_matches:
                    self.stats.close_handler_calls += 1
                    self._invoke(rule, "close", rule.close_handler, frame.node, frame)
                    if self.stopped:
                        break
            except HandlerError:
                self.lifecycle.release_open_frames([frame])
                raise

        disposition = self.lifecycle.settle(frame, parent)
        if self._debug:
            self.logger.debug(
                "Element closed",
                extra={"element": frame.name, "disposition": disposition.name}
            )

    def _invoke(
        self,
        rule: Rule,
        phase: str,
        handler: Optional[Callable[..., Any]],
        subject: Any,
        frame: OpenFrame
    ) -> None:
        if handler is None:
            return
        path = frame.path or ""
        context = HandlerContext(self, rule, path, frame.depth)
        try:
            handler(subject, context)
        except StopProcessing:
            self.request_stop(path)
        except Exception as e:
            raise HandlerError(
                e,
                path=path,
                element=frame.name,
                pattern=rule.source,
                phase=phase,
            ) from e

    # Termination paths

    def _release_on_stop(self) -> None:
        frames = self.tracker.release_all()
        released = self.lifecycle.release_open_frames(frames)
        self.result.add_diagnostic(
            DiagnosticSeverity.INFO,
            "Processing stopped by handler",
            "drive",
            path=self.stop_path,
            details={"open_frames_released": len(frames), "nodes_released": released},
        )

    def _release_unclosed(self) -> None:
        path = self.tracker.current_path()
        frames = self.tracker.release_all()
        self.lifecycle.release_open_frames(frames)
        self.result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"Input ended with {len(frames)} open element(s)",
            "drive",
            path=path,
        )

    def _abort(self, error: Exception) -> None:
        path = self.tracker.current_path() if self.tracker.depth else None
        frames = self.tracker.release_all()
        released = self.lifecycle.release_open_frames(frames)
        self.logger.error(
            "Drive aborted",
            extra={
                "error_type": type(error).__name__,
                "path": getattr(error, "path", path),
                "open_frames_released": len(frames),
                "nodes_released": released,
            }
        )

    def _finalize(self, start_time: float) -> None:
        self.stats.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.stats.nodes_created = self.allocations.created
        self.stats.nodes_released = self.allocations.released
        self.stats.peak_live_nodes = self.allocations.peak_live
        if self.monitor is not None:
            self.monitor.sample("end")
            self.stats.start_rss_bytes = self.monitor.start_rss
            self.stats.peak_rss_bytes = self.monitor.peak_rss
            self.stats.end_rss_bytes = self.monitor.end_rss
