"""Chunk store: workspace confinement, chunking, manifests and access control."""

from chunkstore.service import ChunkService
from chunkstore.workspace import WorkspaceManager

__all__ = [
    "ChunkService",
    "WorkspaceManager",
]
