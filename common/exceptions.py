"""Custom exception classes shared by the chunk store and the shell."""

from typing import Optional


class ChunkVaultError(Exception):
    """
    Base exception class for all chunkvault errors.
    """
    pass


class PathEscapeError(ChunkVaultError):
    """
    Raised when a name would resolve outside the workspace root.
    """

    def __init__(self, name: str, root: str):
        self.name = name
        self.root = root
        super().__init__(f"Path escapes workspace: {name}")


class NotFoundError(ChunkVaultError):
    """
    Raised when a manifest or source file does not exist.
    """

    def __init__(self, path: str, what: str = "File"):
        self.path = path
        self.what = what
        super().__init__(f"{what} not found: {path}")


class MalformedManifestError(ChunkVaultError):
    """
    Raised when a manifest exists but fails structural validation.

    ``field`` names the first offending field (dotted, e.g. ``chunks.1.crc32``).
    """

    def __init__(self, path: str, field: str, reason: str):
        self.path = path
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed manifest {path}: {field}: {reason}")


class IOFailure(ChunkVaultError):
    """
    Raised when an underlying file-system operation fails.
    """

    def __init__(self, operation: str, path: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        detail = f": {cause.strerror or cause}" if isinstance(cause, OSError) else (f": {cause}" if cause else "")
        super().__init__(f"{operation} failed for {path}{detail}")


class InvalidBlockSizeError(ChunkVaultError):
    """
    Raised when a block size is not a positive integer.
    """
    pass


class OperationCancelledError(ChunkVaultError):
    """
    Raised when a split or verify is cancelled between blocks.

    Chunk files already written stay on disk and are untrustworthy.
    """
    pass


class ChunkIntegrityError(ChunkVaultError):
    """
    Raised when reassembly meets a chunk whose checksum does not match.
    """

    def __init__(self, name: str, expected: str, actual: str):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Checksum mismatch for {name}: expected {expected}, actual {actual}")
