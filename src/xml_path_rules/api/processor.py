"""Module-level convenience functions for one-shot processing.

Each function builds a ``RuleDispatcher`` for the given rules and drives a
single document through it.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from xml_path_rules.dispatch.dispatcher import HandlerValue, RuleDispatcher, SourceType
from xml_path_rules.shared.config import DispatchConfig
from xml_path_rules.shared.logging import get_logger
from xml_path_rules.shared.result import DriveResult

Rules = Mapping[str, HandlerValue]

# Max length for content preview in logs
PREVIEW_LENGTH = 100


def process(
    input_data: SourceType,
    rules: Rules,
    config: Optional[DispatchConfig] = None
) -> DriveResult:
    """Drive any supported input through ``rules``.

    Args:
        input_data: XML as str or bytes, a Path, a file object, or an
            iterable of tokenizer events
        rules: Mapping of pattern text to handler specification
        config: Optional dispatch configuration

    Returns:
        DriveResult describing the drive

    Examples:
        >>> ids = []
        >>> _ = process(
        ...     '<list><item id="1"/><item id="2"/></list>',
        ...     {"item": {"open_handler": lambda info, ctx: ids.append(info.attributes["id"])}},
        ... )
        >>> ids
        ['1', '2']
    """
    return RuleDispatcher(rules, config).drive(input_data)


def process_string(
    xml_string: Union[str, bytes],
    rules: Rules,
    config: Optional[DispatchConfig] = None
) -> DriveResult:
    """Drive XML content held in memory through ``rules``."""
    if not isinstance(xml_string, (str, bytes)):
        raise TypeError("xml_string must be str or bytes")
    logger = get_logger(__name__, config.correlation_id if config else None, "process_string")
    logger.debug(
        "Processing string input",
        extra={
            "content_length": len(xml_string),
            "preview": xml_string[:PREVIEW_LENGTH],
        }
    )
    return RuleDispatcher(rules, config).drive(xml_string)


def process_file(
    file_path: Union[str, Path],
    rules: Rules,
    config: Optional[DispatchConfig] = None
) -> DriveResult:
    """Drive an XML file through ``rules``.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"XML file not found: {path}")
    return RuleDispatcher(rules, config).drive(path)


def describe_rules(rules: Rules, config: Optional[DispatchConfig] = None) -> List[Dict[str, Any]]:
    """Compile ``rules`` without driving anything and report their ranking."""
    return RuleDispatcher(rules, config).registry.describe()
