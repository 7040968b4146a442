"""Session command history and line-editing recall."""


class CommandHistory:
    """
    Every command entered in a session, verbatim and in entry order.

    Not deduplicated and unbounded for the session.
    """

    def __init__(self):
        self._entries: list[str] = []

    def append(self, command: str) -> None:
        self._entries.append(command)

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def cursor(self) -> "HistoryCursor":
        return HistoryCursor(self)


class HistoryCursor:
    """
    Walks history from most recent to oldest without mutating it.

    ``older`` stops at the oldest entry; ``newer`` past the most recent
    entry returns an empty line, like an editor's fresh prompt.
    """

    def __init__(self, history: CommandHistory):
        self._history = history
        self._index = -1

    def older(self) -> str:
        entries = self._history.entries
        if not entries:
            return ""
        if self._index < len(entries) - 1:
            self._index += 1
        return entries[len(entries) - 1 - self._index]

    def newer(self) -> str:
        entries = self._history.entries
        if self._index > 0:
            self._index -= 1
            return entries[len(entries) - 1 - self._index]
        self._index = -1
        return ""

    def reset(self) -> None:
        self._index = -1

