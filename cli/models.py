"""Parsed shell command data types."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ListCommand:
    """List workspace entries, optionally with size and date."""

    long: bool = False
    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class CatCommand:
    """Print a workspace file verbatim."""

    filename: str
    command: Literal["cat"] = "cat"


@dataclass(frozen=True)
class PwdCommand:
    """Print the resolved workspace root."""

    command: Literal["pwd"] = "pwd"


@dataclass(frozen=True)
class Crc32Command:
    """Checksum a workspace file's current bytes."""

    filename: str
    command: Literal["crc32"] = "crc32"


@dataclass(frozen=True)
class ChunkCheckCommand:
    """Report which chunks of a base name exist."""

    base_name: str
    command: Literal["chunk-check"] = "chunk-check"


@dataclass(frozen=True)
class HelpCommand:
    command: Literal["help"] = "help"


@dataclass(frozen=True)
class ClearCommand:
    command: Literal["clear"] = "clear"


@dataclass(frozen=True)
class HistoryCommand:
    command: Literal["history"] = "history"


CommandRequest = (
    ListCommand
    | CatCommand
    | PwdCommand
    | Crc32Command
    | ChunkCheckCommand
    | HelpCommand
    | ClearCommand
    | HistoryCommand
)
