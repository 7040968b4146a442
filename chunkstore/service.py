"""Chunk service: composes workspace, engine, metadata and access control."""

import logging
import threading
from pathlib import Path
from typing import Optional

from chunkstore import access_control, chunk_engine, metadata_store
from chunkstore.locks import LockRegistry, default_registry
from chunkstore.workspace import PathLike, WorkspaceManager
from common import audit
from common.audit import AuditEvent, AuditSink, safe_record
from common.constants import DEFAULT_BLOCK_SIZE
from common.types import AccessDecision, ChunkManifest, VerificationResult

logger = logging.getLogger(__name__)


class ChunkService:
    """
    Operations on chunked files inside one identity's workspace.

    Every name is confined through the WorkspaceManager; every user-visible
    action emits one audit event.
    """

    def __init__(
        self,
        workspace: WorkspaceManager,
        identity: str,
        audit_sink: Optional[AuditSink] = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
        locks: Optional[LockRegistry] = None,
    ):
        self.workspace = workspace
        self.identity = identity
        self.audit_sink = audit_sink
        self.block_size = block_size
        self.locks = locks or default_registry

    def _audit(self, action: str, target_file: Optional[str], details: str) -> None:
        safe_record(self.audit_sink, AuditEvent(
            username=self.identity, action=action, target_file=target_file, details=details,
        ))

    def manifest_path(self, base_name: str) -> Path:
        return metadata_store.manifest_path(self.workspace.root, base_name)

    def has_manifest(self, base_name: str) -> bool:
        return self.manifest_path(base_name).is_file()

    def load_manifest(self, base_name: str) -> ChunkManifest:
        return metadata_store.load(self.manifest_path(base_name))

    def ingest(
        self,
        source_file: PathLike,
        base_name: Optional[str] = None,
        owner: Optional[str] = None,
        block_size: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ChunkManifest:
        """
        Split a file into the workspace and write its manifest.

        Args:
            source_file: File to ingest
            base_name: Base name for chunks and manifest; defaults to the source file name
            owner: Manifest owner; defaults to the service identity
            block_size: Bytes per chunk; defaults to the service block size
            cancel_event: Checked between blocks

        Returns:
            The saved manifest
        """
        base_name = base_name or Path(source_file).name
        owner = owner or self.identity
        self.workspace.ensure()

        with self.locks.lock(self.workspace.root, base_name):
            manifest = chunk_engine.split(
                source_file,
                self.workspace.root,
                base_name,
                block_size=block_size or self.block_size,
                owner=owner,
                cancel_event=cancel_event,
            )
            metadata_store.save(self.manifest_path(base_name), manifest)

        self._audit(
            audit.FILE_UPLOAD_CHUNKED,
            base_name,
            f"Uploaded and chunked into {manifest.total_chunks} chunks",
        )
        return manifest

    def verify(
        self, base_name: str, cancel_event: Optional[threading.Event] = None
    ) -> list[VerificationResult]:
        manifest = self.load_manifest(base_name)
        results = chunk_engine.verify(self.workspace.root, manifest, cancel_event=cancel_event)
        valid = sum(1 for result in results if result.ok)
        self._audit(audit.CRC_CHECK, base_name, f"CRC32 validation: {valid}/{len(results)} valid")
        return results

    def check_existence(self, base_name: str) -> list[tuple[str, bool]]:
        manifest = self.load_manifest(base_name)
        results = chunk_engine.existence_only(self.workspace.root, manifest)
        self._audit(audit.CHUNK_CHECK, base_name, f"Checked chunks for {base_name}")
        return results

    def check_access(self, base_name: str, identity: str, role: str) -> AccessDecision:
        manifest = self.load_manifest(base_name)
        decision = access_control.evaluate(identity, role, manifest)
        self._audit(audit.ACCESS_CHECK, base_name, f"Access: {decision.describe()}")
        return decision

    def grant_access(self, base_name: str, user: str) -> ChunkManifest:
        """Add ``user`` to the manifest's allowed users."""
        return self._update_access(base_name, user, grant=True)

    def revoke_access(self, base_name: str, user: str) -> ChunkManifest:
        """Remove ``user`` from the manifest's allowed users."""
        return self._update_access(base_name, user, grant=False)

    def _update_access(self, base_name: str, user: str, grant: bool) -> ChunkManifest:
        with self.locks.lock(self.workspace.root, base_name):
            manifest = self.load_manifest(base_name)
            updated = manifest.with_allowed_user(user) if grant else manifest.without_allowed_user(user)
            if updated is not manifest:
                metadata_store.save(self.manifest_path(base_name), updated)

        action = audit.ACCESS_GRANT if grant else audit.ACCESS_REVOKE
        verb = "Granted" if grant else "Revoked"
        self._audit(action, base_name, f"{verb} access for {user}")
        return updated

    def reassemble(
        self,
        base_name: str,
        destination_name: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Path:
        with self.locks.lock(self.workspace.root, base_name):
            manifest = self.load_manifest(base_name)
            return chunk_engine.reassemble(
                self.workspace.root, manifest, destination_name, cancel_event=cancel_event
            )
