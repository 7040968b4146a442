"""Custom completer for the sandbox shell with workspace file completion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, FILE_ARGUMENT_COMMANDS, VERB_ALIASES
from common.constants import MANIFEST_SUFFIX


class ShellCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Workspace file completion for cat and crc32
    - Base-name completion (from manifests) for chunk-check
    """

    def __init__(self, workspace_root: Path):
        self.workspace_root = Path(workspace_root)

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        command = VERB_ALIASES.get(command, command)
        if command not in FILE_ARGUMENT_COMMANDS:
            return

        argument_count = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_count > 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        if command == "chunk-check":
            yield from self._complete_from(current_word, self._manifest_base_names())
        else:
            yield from self._complete_from(current_word, self._workspace_files())

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _workspace_files(self) -> list[str]:
        if not self.workspace_root.is_dir():
            return []
        return sorted(item.name for item in self.workspace_root.iterdir() if item.is_file())

    def _manifest_base_names(self) -> list[str]:
        return [
            name[: -len(MANIFEST_SUFFIX)]
            for name in self._workspace_files()
            if name.endswith(MANIFEST_SUFFIX)
        ]

    def _complete_from(self, partial: str, candidates: list[str]) -> Iterable[Completion]:
        if not candidates:
            yield Completion(
                "",
                start_position=0,
                display="(no files found in workspace)",
            )
            return

        for name in candidates:
            if name.startswith(partial):
                yield Completion(name, start_position=-len(partial))
