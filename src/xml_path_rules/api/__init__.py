"""Public processing API.

Progressive API disclosure:
- Level 1: Simple functions - process(), process_string(), process_file()
- Level 2: Configured dispatcher - RuleDispatcher with DispatchConfig
"""

from .processor import describe_rules, process, process_file, process_string

__all__ = [
    "describe_rules",
    "process",
    "process_file",
    "process_string",
]
