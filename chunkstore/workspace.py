"""Per-identity workspace roots and path confinement.

Every file name used by the chunk store or the shell goes through
``resolve`` before the file system is touched.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePath
from typing import Union

from common.exceptions import IOFailure, NotFoundError, PathEscapeError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def resolve(workspace_root: PathLike, relative_name: str) -> Path:
    """
    Resolve ``relative_name`` against ``workspace_root``.

    Absolute names and names with ``..`` segments are rejected before any
    file-system access. Symlinks are then resolved and the result must still
    lie strictly beneath the root.

    Args:
        workspace_root: Workspace directory
        relative_name: Name supplied by a caller or typed at the shell

    Returns:
        Absolute path inside the workspace

    Raises:
        PathEscapeError: If resolution would leave the workspace
    """
    root_str = str(workspace_root)
    if not relative_name or not relative_name.strip():
        raise PathEscapeError(relative_name, root_str)

    pure = PurePath(relative_name)
    if pure.is_absolute() or pure.drive or pure.root or relative_name.startswith(("/", "\\")):
        raise PathEscapeError(relative_name, root_str)
    if any(part == ".." for part in relative_name.replace("\\", "/").split("/")):
        raise PathEscapeError(relative_name, root_str)

    root = Path(workspace_root).resolve()
    candidate = (root / pure).resolve()
    if candidate == root:
        raise PathEscapeError(relative_name, root_str)
    try:
        candidate.relative_to(root)
    except ValueError:
        logger.warning(f"Rejected path escaping workspace via symlink: {relative_name}")
        raise PathEscapeError(relative_name, root_str)
    return candidate


def ensure(workspace_root: PathLike) -> Path:
    """
    Create the workspace directory and its parents if absent.

    Raises:
        IOFailure: If the directory cannot be created
    """
    root = Path(workspace_root)
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure("create workspace", str(root), e)
    return root


def workspace_for(base_dir: PathLike, identity: str) -> Path:
    """Return the workspace root of ``identity`` beneath ``base_dir``."""
    return resolve(base_dir, identity)


@dataclass(frozen=True)
class WorkspaceEntry:
    name: str
    size: int
    modified: datetime
    is_dir: bool


class WorkspaceManager:
    """
    Workspace bound to one root directory.
    """

    def __init__(self, root: PathLike):
        self.root = Path(root)

    @classmethod
    def for_identity(cls, base_dir: PathLike, identity: str) -> "WorkspaceManager":
        return cls(workspace_for(base_dir, identity))

    def ensure(self) -> Path:
        return ensure(self.root)

    def resolve(self, relative_name: str) -> Path:
        return resolve(self.root, relative_name)

    def list_names(self) -> list[str]:
        """
        List entry names in the workspace, sorted lexicographically.

        Raises:
            NotFoundError: If the workspace directory does not exist
            IOFailure: If the directory cannot be read
        """
        if not self.root.is_dir():
            raise NotFoundError(str(self.root), what="Workspace")
        try:
            return sorted(item.name for item in self.root.iterdir())
        except OSError as e:
            raise IOFailure("list workspace", str(self.root), e)

    def list_entries(self) -> list[WorkspaceEntry]:
        """
        List entries with size and modification time, sorted by name.

        A symlink whose target is gone is reported with its own link metadata.
        """
        if not self.root.is_dir():
            raise NotFoundError(str(self.root), what="Workspace")
        entries = []
        try:
            for item in self.root.iterdir():
                try:
                    stat = item.stat()
                except FileNotFoundError:
                    stat = item.lstat()
                entries.append(WorkspaceEntry(
                    name=item.name,
                    size=stat.st_size,
                    modified=datetime.fromtimestamp(stat.st_mtime),
                    is_dir=item.is_dir(),
                ))
        except OSError as e:
            raise IOFailure("list workspace", str(self.root), e)
        return sorted(entries, key=lambda entry: entry.name)
