"""Command handler functions for shell operations.

Handlers return transcript lines. Every file-name argument is resolved
through the workspace before the file system is touched.
"""

from dataclasses import dataclass

from chunkstore import chunk_engine
from chunkstore.checksum import checksum_file
from chunkstore.service import ChunkService
from chunkstore.workspace import WorkspaceManager
from cli.constants import RULE, TIMESTAMP_FORMAT
from cli.models import CatCommand, ChunkCheckCommand, Crc32Command, ListCommand
from cli.reports import render_chunk_listing, render_existence_report
from common.exceptions import (
    ChunkVaultError,
    IOFailure,
    MalformedManifestError,
    NotFoundError,
    OperationCancelledError,
    PathEscapeError,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ShellContext:
    """What a handler may touch: one workspace and its chunk service."""

    workspace: WorkspaceManager
    service: ChunkService


def handle_ls(cmd: ListCommand, ctx: ShellContext) -> list[str]:
    """
    Handle 'ls' and 'ls -l'.

    Args:
        cmd: ListCommand, ``long`` selects the detailed listing
        ctx: Shell context

    Returns:
        Entry names (or detail rows) sorted lexicographically
    """
    if not cmd.long:
        names = ctx.workspace.list_names()
        if not names:
            return ["(empty directory)"]
        return [f"  {name}" for name in names]

    lines = [f"{'SIZE':<10} {'MODIFIED':<20} NAME", RULE]
    for entry in ctx.workspace.list_entries():
        modified = entry.modified.strftime(TIMESTAMP_FORMAT)
        lines.append(f"{entry.size:<10d} {modified:<20} {entry.name}")
    return lines


def handle_cat(cmd: CatCommand, ctx: ShellContext) -> list[str]:
    """
    Handle 'cat <file>'.

    Returns:
        File contents bracketed by header and footer markers
    """
    path = ctx.workspace.resolve(cmd.filename)
    if not path.exists():
        return [f"Error: File not found: {cmd.filename}"]
    if not path.is_file():
        return [f"Error: Not a regular file: {cmd.filename}"]

    try:
        content = path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        raise IOFailure("read file", cmd.filename, e)
    return [f"─── {cmd.filename} ───", content, "─── End of file ───"]


def handle_pwd(ctx: ShellContext) -> list[str]:
    return [str(ctx.workspace.root.resolve())]


def handle_crc32(cmd: Crc32Command, ctx: ShellContext) -> list[str]:
    """
    Handle 'crc32 <file>' over the file's current bytes.
    """
    path = ctx.workspace.resolve(cmd.filename)
    if not path.exists():
        return [f"Error: File not found: {cmd.filename}"]
    if not path.is_file():
        return [f"Error: Not a regular file: {cmd.filename}"]
    return [f"CRC32 ({cmd.filename}): {checksum_file(path)}"]


def handle_chunk_check(cmd: ChunkCheckCommand, ctx: ShellContext) -> list[str]:
    """
    Handle 'chunk-check <name>'.

    With a ``<name>.meta.json`` manifest in the workspace, each listed chunk
    is checked in manifest order; otherwise chunk files are found by prefix.
    """
    if ctx.service.has_manifest(cmd.base_name):
        results = ctx.service.check_existence(cmd.base_name)
        return render_existence_report(cmd.base_name, results)

    names = chunk_engine.find_chunk_files(ctx.workspace.root, cmd.base_name)
    return render_chunk_listing(cmd.base_name, names)


def describe_error(error: ChunkVaultError) -> str:
    """Turn a chunk store error into a labeled operator message."""
    if isinstance(error, PathEscapeError):
        return f"Error: Access denied: '{error.name}' is outside your workspace"
    if isinstance(error, MalformedManifestError):
        return f"Error: Malformed metadata: field '{error.field}': {error.reason}"
    if isinstance(error, NotFoundError):
        return f"Error: {error.what} not found: {error.path}"
    if isinstance(error, IOFailure):
        return f"Error: {error}"
    if isinstance(error, OperationCancelledError):
        return f"Error: Operation cancelled: {error}"
    return f"Error: {error}"
