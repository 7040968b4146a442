"""Reads and writes manifest documents (``<base>.meta.json``)."""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from chunkstore.manifest_schema import ManifestSchema
from chunkstore.workspace import PathLike, resolve
from common.constants import MANIFEST_SUFFIX
from common.exceptions import IOFailure, MalformedManifestError, NotFoundError
from common.types import ChunkManifest

logger = logging.getLogger(__name__)


def manifest_name(base_name: str) -> str:
    return f"{base_name}{MANIFEST_SUFFIX}"


def manifest_path(workspace: PathLike, base_name: str) -> Path:
    """
    Resolve the manifest location of ``base_name`` inside ``workspace``.

    Raises:
        PathEscapeError: If the name is not confined to the workspace
    """
    return resolve(workspace, manifest_name(base_name))


def _field_of(error: dict) -> str:
    return ".".join(str(part) for part in error["loc"]) or "manifest"


def parse(document: object, source: str = "<memory>") -> ChunkManifest:
    """
    Validate a decoded JSON document into a ChunkManifest.

    Raises:
        MalformedManifestError: Naming the first invalid field
    """
    if not isinstance(document, dict):
        raise MalformedManifestError(source, "manifest", "top level must be an object")
    try:
        schema = ManifestSchema.model_validate(document)
    except ValidationError as e:
        first = e.errors()[0]
        raise MalformedManifestError(source, _field_of(first), first["msg"])

    problems = schema.consistency_errors()
    if problems:
        field, reason = problems[0]
        raise MalformedManifestError(source, field, reason)
    return schema.to_manifest()


def load(path: PathLike) -> ChunkManifest:
    """
    Load a manifest file.

    Args:
        path: Already-resolved manifest path

    Returns:
        Parsed ChunkManifest

    Raises:
        NotFoundError: If the file does not exist
        MalformedManifestError: If it cannot be parsed into the required shape
        IOFailure: If it cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(str(path), what="Metadata file")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IOFailure("read manifest", str(path), e)
    except UnicodeDecodeError as e:
        raise MalformedManifestError(str(path), "manifest", f"not UTF-8 text: {e.reason}")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedManifestError(str(path), "manifest", f"invalid JSON at line {e.lineno}: {e.msg}")
    return parse(document, source=str(path))


def dumps(manifest: ChunkManifest) -> str:
    """Serialize deterministically; chunk order is preserved."""
    document = ManifestSchema.from_manifest(manifest).to_document()
    return json.dumps(document, indent=2) + "\n"


def save(path: PathLike, manifest: ChunkManifest) -> None:
    """
    Write a manifest atomically (temporary file then rename).

    Raises:
        IOFailure: If the write fails
    """
    path = Path(path)
    content = dumps(manifest)
    temp_name = None
    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise IOFailure("write manifest", str(path), e)
    logger.debug(f"Saved manifest {path.name} ({manifest.total_chunks} chunk(s))")


def delete(path: PathLike) -> bool:
    """
    Delete a manifest file.

    Returns:
        True if the file was deleted, False if it didn't exist
    """
    path = Path(path)
    if not path.exists():
        return False
    try:
        path.unlink()
    except OSError as e:
        raise IOFailure("delete manifest", str(path), e)
    return True
