"""Shared data type definitions (ChunkRecord, ChunkManifest, VerificationResult, AccessDecision)."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ChunkRecord:
    """
    Metadata for a single chunk of a file.

    ``checksum`` is always 8 upper-case hex digits.
    """
    name: str
    checksum: str
    size: Optional[int] = None


@dataclass(frozen=True)
class ChunkManifest:
    """
    Layout, checksums and access list of a chunked file.

    ``chunks`` order is reassembly order. The owner is never required to
    appear in ``allowed_users``.
    """
    owner: str
    chunks: tuple[ChunkRecord, ...] = ()
    allowed_users: tuple[str, ...] = ()

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def chunk_names(self) -> list[str]:
        return [chunk.name for chunk in self.chunks]

    def with_allowed_user(self, user: str) -> "ChunkManifest":
        """Return a copy granting ``user`` access; owner and duplicates are no-ops."""
        if user == self.owner or user in self.allowed_users:
            return self
        return replace(self, allowed_users=self.allowed_users + (user,))

    def without_allowed_user(self, user: str) -> "ChunkManifest":
        """Return a copy with ``user`` removed from the access list."""
        if user not in self.allowed_users:
            return self
        return replace(
            self, allowed_users=tuple(u for u in self.allowed_users if u != user)
        )


class ChunkStatus(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    MISSING = "missing"


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of verifying one chunk against its manifest record.

    ``actual`` is None when the chunk file is missing.
    """
    name: str
    status: ChunkStatus
    expected: str
    actual: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ChunkStatus.MATCH


class AccessReason(str, Enum):
    ADMIN_OVERRIDE = "Admin Override"
    OWNER = "Owner"
    ALLOWED_USER = "Allowed User"


@dataclass(frozen=True)
class AccessDecision:
    """
    Result of an access evaluation; ``reason`` is None when denied.
    """
    allowed: bool
    reason: Optional[AccessReason] = None

    @classmethod
    def allow(cls, reason: AccessReason) -> "AccessDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls) -> "AccessDecision":
        return cls(allowed=False)

    def describe(self) -> str:
        if self.allowed:
            return f"ALLOWED ({self.reason.value})"
        return "DENIED (Not owner or allowed user)"
