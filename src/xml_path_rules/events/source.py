"""Event source backed by lxml's incremental target parser.

The document is fed to ``lxml.etree.XMLParser`` in chunks. A parser target
queues one event per start tag, end tag and character-data callback; the
queue is drained between chunks, so at most one chunk worth of events is
buffered at any time and the caller can stop reading early by closing the
iterator.
"""

from collections import deque
from pathlib import Path
from typing import IO, Any, Deque, Dict, Iterator, Optional, Union

from lxml import etree

from xml_path_rules.shared.config import DispatchConfig
from xml_path_rules.shared.errors import MalformedInputError
from xml_path_rules.shared.logging import get_logger

from .events import ElementClose, ElementOpen, Event, Text

InputType = Union[str, bytes, Path, IO[Any]]

TEXT_ENCODING = "utf-8"


def local_name(name: str) -> str:
    """Strip a ``{namespace-uri}`` prefix from an lxml name."""
    if name[:1] == "{":
        return name.split("}", 1)[1]
    return name


class _EventCollector:
    """lxml parser target that queues events in document order."""

    def __init__(self, strip_namespaces: bool) -> None:
        self.events: Deque[Event] = deque()
        self.depth = 0
        self.strip_namespaces = strip_namespaces

    def _name(self, name: str) -> str:
        return local_name(name) if self.strip_namespaces else name

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        self.depth += 1
        attributes = {self._name(key): value for key, value in attrib.items()}
        self.events.append(ElementOpen(self._name(tag), attributes, self.depth))

    def end(self, tag: str) -> None:
        self.events.append(ElementClose(self._name(tag), self.depth))
        self.depth -= 1

    def data(self, data: str) -> None:
        self.events.append(Text(data, self.depth))

    def close(self) -> None:
        return None


class XMLEventSource:
    """Iterable of tokenizer events for one XML document.

    ``str`` input is treated as document content (as is ``bytes``); use a
    ``Path`` or an open file object to read from disk.

    Examples:
        >>> events = list(XMLEventSource("<a>hi<b/></a>"))
        >>> [type(event).__name__ for event in events]
        ['ElementOpen', 'Text', 'ElementOpen', 'ElementClose', 'ElementClose']
    """

    def __init__(
        self,
        input_data: InputType,
        chunk_size: int = 64 * 1024,
        strip_namespaces: bool = True,
        resolve_entities: bool = False,
        huge_tree: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self.input_data = input_data
        self.chunk_size = chunk_size
        self.strip_namespaces = strip_namespaces
        self.resolve_entities = resolve_entities
        self.huge_tree = huge_tree
        self.logger = get_logger(__name__, correlation_id, "xml_event_source")

    @classmethod
    def from_config(
        cls,
        input_data: InputType,
        config: DispatchConfig,
        correlation_id: Optional[str] = None
    ) -> "XMLEventSource":
        return cls(
            input_data,
            chunk_size=config.chunk_size,
            strip_namespaces=config.strip_namespaces,
            resolve_entities=config.resolve_entities,
            huge_tree=config.huge_tree,
            correlation_id=correlation_id,
        )

    def __iter__(self) -> Iterator[Event]:
        return self._events()

    def _make_parser(
        self,
        collector: _EventCollector,
        encoding: Optional[str]
    ) -> "etree.XMLParser":
        return etree.XMLParser(
            target=collector,
            encoding=encoding,
            no_network=True,
            resolve_entities=self.resolve_entities,
            huge_tree=self.huge_tree,
        )

    def _read_stream(self, stream: IO[Any]) -> Iterator[Union[str, bytes]]:
        while True:
            chunk = stream.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    def _chunks(self) -> Iterator[Union[str, bytes]]:
        data = self.input_data
        if isinstance(data, (str, bytes)):
            for offset in range(0, len(data), self.chunk_size):
                yield data[offset:offset + self.chunk_size]
        elif isinstance(data, Path):
            with data.open("rb") as stream:
                yield from self._read_stream(stream)
        elif hasattr(data, "read"):
            yield from self._read_stream(data)
        else:
            raise TypeError(
                f"Unsupported input type {type(data).__name__}; expected str, "
                "bytes, Path or a file object"
            )

    def _events(self) -> Iterator[Event]:
        collector = _EventCollector(self.strip_namespaces)
        parser = None
        chunks_fed = 0
        try:
            for chunk in self._chunks():
                if isinstance(chunk, str):
                    chunk = chunk.encode(TEXT_ENCODING)
                    if parser is None:
                        parser = self._make_parser(collector, TEXT_ENCODING)
                elif parser is None:
                    parser = self._make_parser(collector, None)
                parser.feed(chunk)
                chunks_fed += 1
                while collector.events:
                    yield collector.events.popleft()

            if parser is None:
                raise MalformedInputError("Document is empty")
            parser.close()
            while collector.events:
                yield collector.events.popleft()

        except etree.XMLSyntaxError as e:
            line, column = getattr(e, "position", (None, None))
            self.logger.debug(
                "Tokenizer rejected input",
                extra={"chunks_fed": chunks_fed, "line": line, "column": column}
            )
            raise MalformedInputError(str(e), line, column) from e

        self.logger.debug("Event source exhausted", extra={"chunks_fed": chunks_fed})
