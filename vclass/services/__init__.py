"""
Services module containing the registry, its lock and the command dispatcher.
"""

from .concurrency_manager import ConcurrencyManager, LockType
from .registry import Registry
from .command_dispatcher import (
    CommandDispatcher, CommandResult, ParsedCommand, ParseFailure, parse_line
)

__all__ = [
    "ConcurrencyManager",
    "LockType",
    "Registry",
    "CommandDispatcher",
    "CommandResult",
    "ParsedCommand",
    "ParseFailure",
    "parse_line",
]
