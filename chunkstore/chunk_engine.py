"""Splits files into fixed-size chunk files and verifies them against a manifest."""

import logging
import os
import re
import threading
from pathlib import Path
from typing import Iterator, Optional

from chunkstore.checksum import checksum_file, checksums_equal, compute_checksum
from chunkstore.workspace import PathLike, resolve
from common.constants import CHUNK_SUFFIX, DEFAULT_BLOCK_SIZE, LEGACY_CHUNK_SUFFIX
from common.exceptions import (
    ChunkIntegrityError,
    InvalidBlockSizeError,
    IOFailure,
    NotFoundError,
    OperationCancelledError,
    PathEscapeError,
)
from common.types import ChunkManifest, ChunkRecord, ChunkStatus, VerificationResult

logger = logging.getLogger(__name__)


def chunk_name(base_name: str, index: int) -> str:
    """
    Derive the file name of the ``index``-th chunk (1-based).

    Args:
        base_name: Base file name
        index: 1-based position

    Returns:
        ``<base_name>.chunk<index>``
    """
    return f"{base_name}{CHUNK_SUFFIX}{index}"


def _check_cancelled(cancel_event: Optional[threading.Event], operation: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError(f"{operation} cancelled")


def _validate_block_size(block_size: int) -> None:
    if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
        raise InvalidBlockSizeError(f"Block size must be a positive integer, got {block_size!r}")


def _validate_base_name(workspace: PathLike, base_name: str) -> None:
    if "/" in base_name or "\\" in base_name:
        raise PathEscapeError(base_name, str(workspace))
    resolve(workspace, base_name)


def iter_blocks(source_file: Path, block_size: int) -> Iterator[bytes]:
    """
    Stream consecutive blocks of ``block_size`` bytes; the last may be shorter.

    Raises:
        NotFoundError: If the source file does not exist
        IOFailure: If the source cannot be read
    """
    if not source_file.is_file():
        raise NotFoundError(str(source_file), what="Source file")
    try:
        with open(source_file, "rb") as f:
            while True:
                block = f.read(block_size)
                if not block:
                    break
                yield block
    except OSError as e:
        raise IOFailure("read source", str(source_file), e)


def write_chunk(workspace: PathLike, name: str, data: bytes) -> Path:
    """
    Write one chunk file into the workspace.

    Raises:
        PathEscapeError: If ``name`` is not confined to the workspace
        IOFailure: If the write fails
    """
    path = resolve(workspace, name)
    try:
        path.write_bytes(data)
    except OSError as e:
        raise IOFailure("write chunk", str(path), e)
    return path


def split(
    source_file: PathLike,
    workspace: PathLike,
    base_name: str,
    block_size: int = DEFAULT_BLOCK_SIZE,
    owner: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ChunkManifest:
    """
    Split ``source_file`` into chunk files under ``workspace``.

    An empty source yields zero chunks. Re-running on identical bytes and
    block size reproduces the same manifest. On cancellation the chunks
    already written are left on disk.

    Args:
        source_file: File to split (may live outside the workspace)
        workspace: Workspace root receiving ``<base_name>.chunk<N>`` files
        base_name: Base file name for the chunks
        block_size: Bytes per chunk
        owner: Manifest owner; defaults to the workspace directory name
        cancel_event: Checked between blocks

    Returns:
        ChunkManifest with one record per block, in order

    Raises:
        InvalidBlockSizeError, PathEscapeError, NotFoundError, IOFailure,
        OperationCancelledError
    """
    _validate_block_size(block_size)
    _validate_base_name(workspace, base_name)
    source = Path(source_file)
    owner = owner or Path(workspace).name

    records = []
    for index, block in enumerate(iter_blocks(source, block_size), start=1):
        _check_cancelled(cancel_event, "split")
        name = chunk_name(base_name, index)
        write_chunk(workspace, name, block)
        records.append(ChunkRecord(name=name, checksum=compute_checksum(block), size=len(block)))
        logger.debug(f"Wrote chunk {name} ({len(block)} bytes)")

    logger.info(f"Split {source.name} into {len(records)} chunk(s) of up to {block_size} bytes")
    return ChunkManifest(owner=owner, chunks=tuple(records))


def verify(
    workspace: PathLike,
    manifest: ChunkManifest,
    cancel_event: Optional[threading.Event] = None,
) -> list[VerificationResult]:
    """
    Recompute each chunk's checksum and compare it to the manifest.

    Missing and corrupted chunks are reported as results, never raised.
    Results are in manifest order.

    Args:
        workspace: Workspace root holding the chunk files
        manifest: Manifest to verify against
        cancel_event: Checked between chunks

    Returns:
        One VerificationResult per chunk record
    """
    results = []
    for record in manifest.chunks:
        _check_cancelled(cancel_event, "verify")
        path = resolve(workspace, record.name)
        if not path.is_file():
            results.append(VerificationResult(record.name, ChunkStatus.MISSING, record.checksum))
            continue

        actual = checksum_file(path)
        status = ChunkStatus.MATCH if checksums_equal(record.checksum, actual) else ChunkStatus.MISMATCH
        if status is ChunkStatus.MISMATCH:
            logger.warning(f"Checksum mismatch for {record.name}: expected {record.checksum}, actual {actual}")
        results.append(VerificationResult(record.name, status, record.checksum, actual))
    return results


def existence_only(workspace: PathLike, manifest: ChunkManifest) -> list[tuple[str, bool]]:
    """
    Check only whether each manifest chunk exists, in manifest order.

    Returns:
        Ordered ``(chunk name, exists)`` pairs
    """
    return [(record.name, resolve(workspace, record.name).is_file()) for record in manifest.chunks]


def reassemble(
    workspace: PathLike,
    manifest: ChunkManifest,
    destination_name: str,
    cancel_event: Optional[threading.Event] = None,
) -> Path:
    """
    Concatenate verified chunks in manifest order into ``destination_name``.

    The output is written to a temporary file and moved into place only when
    every chunk verified, so a failed reassembly leaves no partial file.

    Raises:
        NotFoundError: If a chunk file is missing
        ChunkIntegrityError: If a chunk's checksum does not match
        IOFailure: If reading or writing fails
    """
    destination = resolve(workspace, destination_name)
    temp_path = destination.with_name(f".{destination.name}.partial")
    try:
        with open(temp_path, "wb") as out:
            for record in manifest.chunks:
                _check_cancelled(cancel_event, "reassemble")
                path = resolve(workspace, record.name)
                if not path.is_file():
                    raise NotFoundError(record.name, what="Chunk")
                data = path.read_bytes()
                actual = compute_checksum(data)
                if not checksums_equal(record.checksum, actual):
                    raise ChunkIntegrityError(record.name, record.checksum, actual)
                out.write(data)
        os.replace(temp_path, destination)
    except OSError as e:
        raise IOFailure("reassemble", str(destination), e)
    finally:
        if temp_path.exists():
            temp_path.unlink()

    logger.info(f"Reassembled {manifest.total_chunks} chunk(s) into {destination.name}")
    return destination


_TRAILING_NUMBER = re.compile(r"(\d+)$")


def _natural_key(name: str) -> tuple[str, int]:
    match = _TRAILING_NUMBER.search(name)
    if match is None:
        return (name, -1)
    return (name[:match.start()], int(match.group(1)))


def find_chunk_files(workspace: PathLike, base_name: str) -> list[str]:
    """
    Enumerate chunk files of ``base_name`` without a manifest.

    Matches names starting with ``<base>.chunk`` or ``<base>_chunk``,
    sorted by prefix then chunk number.

    Raises:
        PathEscapeError: If ``base_name`` is not confined
        NotFoundError: If the workspace does not exist
    """
    _validate_base_name(workspace, base_name)
    root = Path(workspace)
    if not root.is_dir():
        raise NotFoundError(str(root), what="Workspace")
    prefixes = (f"{base_name}{CHUNK_SUFFIX}", f"{base_name}{LEGACY_CHUNK_SUFFIX}")
    try:
        names = [item.name for item in root.iterdir() if item.is_file() and item.name.startswith(prefixes)]
    except OSError as e:
        raise IOFailure("list workspace", str(root), e)
    return sorted(names, key=_natural_key)
