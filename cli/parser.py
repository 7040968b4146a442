"""Command parser for shell input."""

from cli.constants import VERB_ALIASES
from cli.models import (
    CatCommand,
    ChunkCheckCommand,
    ClearCommand,
    CommandRequest,
    Crc32Command,
    HelpCommand,
    HistoryCommand,
    ListCommand,
    PwdCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


class UnknownCommandError(ParseError):
    """Raised when the verb is not part of the vocabulary."""

    def __init__(self, verb: str):
        self.verb = verb
        super().__init__(f"Unknown command: {verb}")


class MissingArgumentError(ParseError):
    """Raised when a command's required argument is absent."""

    def __init__(self, verb: str, argument: str):
        self.verb = verb
        self.argument = argument
        super().__init__(f"{verb} requires a {argument}")

    @property
    def usage(self) -> str:
        return f"Usage: {self.verb} <{self.argument}>"


def tokenize(input_line: str) -> list[str]:
    """Split on whitespace; the verb is lower-cased, arguments are kept as typed."""
    tokens = input_line.split()
    if tokens:
        verb = tokens[0].lower()
        tokens[0] = VERB_ALIASES.get(verb, verb)
    return tokens


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a command object.

    Args:
        input_line: Raw user input from the shell

    Returns:
        One of the command dataclasses in cli.models

    Raises:
        UnknownCommandError: If the verb is not recognized
        MissingArgumentError: If a required argument is missing
        ParseError: If the input is empty or an option is invalid
    """
    tokens = tokenize(input_line)
    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]

    if command_name == "ls":
        return _parse_ls(args)
    elif command_name == "cat":
        return CatCommand(filename=_require(command_name, args, "filename"))
    elif command_name == "pwd":
        return PwdCommand()
    elif command_name == "crc32":
        return Crc32Command(filename=_require(command_name, args, "filename"))
    elif command_name == "chunk-check":
        return ChunkCheckCommand(base_name=_require(command_name, args, "filename"))
    elif command_name == "help":
        return HelpCommand()
    elif command_name == "clear":
        return ClearCommand()
    elif command_name == "history":
        return HistoryCommand()
    else:
        raise UnknownCommandError(command_name)


def _parse_ls(args: list[str]) -> ListCommand:
    """Parse 'ls' or 'ls -l'."""
    if not args:
        return ListCommand()
    if args == ["-l"]:
        return ListCommand(long=True)
    raise ParseError(f"ls: unsupported option {' '.join(args)}")


def _require(verb: str, args: list[str], argument: str) -> str:
    if not args:
        raise MissingArgumentError(verb, argument)
    return args[0]
