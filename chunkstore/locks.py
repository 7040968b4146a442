"""Advisory per-base-name locks for mutating chunk operations."""

import threading
from pathlib import Path

from chunkstore.workspace import PathLike


class LockRegistry:
    """
    Hands out one lock per (workspace, base name).

    Advisory only: readers do not take it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.Lock] = {}

    def lock(self, workspace: PathLike, base_name: str) -> threading.Lock:
        key = (str(Path(workspace).resolve()), base_name)
        with self._guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]


default_registry = LockRegistry()
