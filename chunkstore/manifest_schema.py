"""Pydantic schema for the on-disk manifest document."""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from common.types import ChunkManifest, ChunkRecord

_CHECKSUM_PATTERN = re.compile(r"^[0-9A-Fa-f]{8}$")


class ChunkEntrySchema(BaseModel):
    """One entry of the ``chunks`` list."""
    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    crc32: StrictStr
    size: Optional[StrictInt] = None

    @field_validator("name")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError("must be a plain file name")
        return value

    @field_validator("crc32")
    @classmethod
    def _eight_hex_digits(cls, value: str) -> str:
        if not _CHECKSUM_PATTERN.match(value):
            raise ValueError("must be 8 hex digits")
        return value.upper()


class ManifestSchema(BaseModel):
    """Top-level manifest document."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_chunks: StrictInt = Field(alias="totalChunks", ge=0)
    chunks: List[ChunkEntrySchema]
    owner: StrictStr = Field(min_length=1)
    allowed_users: List[StrictStr] = Field(alias="allowedUsers")

    def consistency_errors(self) -> list[tuple[str, str]]:
        """Return ``(field, reason)`` pairs for cross-field invariant violations."""
        errors = []
        if self.total_chunks != len(self.chunks):
            errors.append((
                "totalChunks",
                f"declares {self.total_chunks} chunk(s) but {len(self.chunks)} are listed",
            ))
        seen = set()
        for index, entry in enumerate(self.chunks):
            if entry.name in seen:
                errors.append((f"chunks.{index}.name", f"duplicate chunk name {entry.name}"))
            seen.add(entry.name)
        return errors

    def to_manifest(self) -> ChunkManifest:
        return ChunkManifest(
            owner=self.owner,
            chunks=tuple(
                ChunkRecord(name=entry.name, checksum=entry.crc32, size=entry.size)
                for entry in self.chunks
            ),
            allowed_users=tuple(dict.fromkeys(u for u in self.allowed_users if u != self.owner)),
        )

    @classmethod
    def from_manifest(cls, manifest: ChunkManifest) -> "ManifestSchema":
        return cls(
            total_chunks=manifest.total_chunks,
            chunks=[
                ChunkEntrySchema(name=record.name, crc32=record.checksum, size=record.size)
                for record in manifest.chunks
            ],
            owner=manifest.owner,
            allowed_users=list(manifest.allowed_users),
        )

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
