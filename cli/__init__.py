"""Sandboxed shell over a chunkvault workspace."""

from cli.interpreter import CommandInterpreter

__all__ = [
    "CommandInterpreter",
]
