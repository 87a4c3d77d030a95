"""XML Path Rules.

Streaming, pattern-driven XML processing: register path patterns with open
and close handlers, and receive fully assembled Nodes only for the elements
you asked for. Everything else passes through without being built.

Progressive API Disclosure:
- Level 1: Simple functions - process(), process_string(), process_file()
- Level 2: Configured dispatcher - RuleDispatcher with DispatchConfig
- Level 3: Custom event sources - any iterable of ElementOpen/Text/ElementClose
"""

__version__ = "0.1.0"
__author__ = "XML Path Rules Team"

# Level 1: Simple functions
from .api import process, process_file, process_string

# Level 2: Configured dispatcher
from .dispatch import ElementInfo, HandlerContext, RuleDispatcher, StopProcessing
from .patterns import HandlerSpec, Pattern, compile_pattern
from .shared import (
    DispatchConfig,
    DriveResult,
    HandlerError,
    InvalidPatternError,
    MalformedInputError,
    ReentrantDriveError,
    WhitespaceMode,
    XMLRulesError,
)
from .tree import Node

# Level 3: Custom event sources
from .events import ElementClose, ElementOpen, Text, XMLEventSource

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple processing functions
    "process",
    "process_string",
    "process_file",

    # Level 2: Dispatcher, rules and results
    "RuleDispatcher",
    "HandlerSpec",
    "HandlerContext",
    "ElementInfo",
    "StopProcessing",
    "Pattern",
    "compile_pattern",
    "Node",
    "DispatchConfig",
    "WhitespaceMode",
    "DriveResult",

    # Errors
    "XMLRulesError",
    "InvalidPatternError",
    "MalformedInputError",
    "HandlerError",
    "ReentrantDriveError",

    # Level 3: Events
    "ElementOpen",
    "Text",
    "ElementClose",
    "XMLEventSource",
]
