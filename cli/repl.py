"""REPL with prompt_toolkit for the sandbox shell."""

import os
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings

from cli.completer import ShellCompleter
from cli.constants import BANNER, EXIT_COMMAND, PROMPT_TEXT, STYLE, WELCOME_HELP
from cli.interpreter import CommandInterpreter


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_banner() -> None:
    print(BANNER)
    print(WELCOME_HELP)


def _replace_line(buffer: Buffer, text: str) -> None:
    buffer.document = Document(text, cursor_position=len(text))


def build_key_bindings(interpreter: CommandInterpreter) -> KeyBindings:
    """
    Up/Down walk the interpreter's own history, duplicates included.

    While the completion menu is open the keys move through completions instead.
    """
    bindings = KeyBindings()

    @bindings.add("up")
    def _recall_older(event) -> None:
        buffer = event.current_buffer
        if buffer.complete_state:
            buffer.complete_previous()
        elif len(interpreter.history):
            _replace_line(buffer, interpreter.recall_older())

    @bindings.add("down")
    def _recall_newer(event) -> None:
        buffer = event.current_buffer
        if buffer.complete_state:
            buffer.complete_next()
        else:
            _replace_line(buffer, interpreter.recall_newer())

    return bindings


def build_session(interpreter: CommandInterpreter) -> PromptSession:
    """Prompt session whose up/down recall walks the interpreter's history."""
    return PromptSession(
        completer=ShellCompleter(interpreter.workspace_root),
        key_bindings=build_key_bindings(interpreter),
        style=STYLE,
    )


def repl_loop(interpreter: CommandInterpreter, session: Optional[PromptSession] = None) -> None:
    """Start the interactive shell until 'exit' or end of input."""
    if session is None:
        session = build_session(interpreter)

    clear_screen()
    show_banner()
    for line in interpreter.open_session():
        print(line)

    try:
        while True:
            try:
                user_input = session.prompt([("class:prompt", PROMPT_TEXT)])
            except KeyboardInterrupt:
                interpreter.reset_recall()
                continue
            except EOFError:
                print("\nGoodbye!")
                break

            if user_input.strip().lower() == EXIT_COMMAND:
                print("Goodbye!")
                break

            output = interpreter.execute(user_input)
            if user_input.strip().lower() == "clear":
                clear_screen()
                show_banner()
                continue
            for line in output:
                print(line)
    finally:
        interpreter.close_session()
