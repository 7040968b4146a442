"""Project-wide constants (block size, chunk/manifest naming, read sizes)."""

DEFAULT_BLOCK_SIZE: int = 64 * 1024  # 64 KiB default block size

CHUNK_SUFFIX: str = ".chunk"
LEGACY_CHUNK_SUFFIX: str = "_chunk"
MANIFEST_SUFFIX: str = ".meta.json"

CHECKSUM_READ_SIZE: int = 8192

ROLE_ADMIN: str = "admin"
ROLE_USER: str = "user"
ROLES: tuple[str, ...] = (ROLE_ADMIN, ROLE_USER)
