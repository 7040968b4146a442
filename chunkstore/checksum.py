"""Provides CRC-32 checksum calculation, formatting and comparison helpers.

The CRC is the zlib/gzip polynomial, so values are interchangeable with any
other implementation of the same algorithm.
"""

import zlib
from pathlib import Path
from typing import BinaryIO

from common.constants import CHECKSUM_READ_SIZE
from common.exceptions import IOFailure, NotFoundError

EMPTY_CHECKSUM = "00000000"


def format_checksum(value: int) -> str:
    """
    Render a raw 32-bit value as 8 upper-case, zero-padded hex digits.

    Args:
        value: CRC value (masked to 32 bits)

    Returns:
        e.g. ``0xAB`` -> ``"000000AB"``
    """
    return f"{value & 0xFFFFFFFF:08X}"


def compute_checksum(data: bytes) -> str:
    """
    Compute CRC-32 checksum for given data.

    Args:
        data: Bytes to compute checksum for

    Returns:
        8-digit upper-case hex string
    """
    return format_checksum(zlib.crc32(data))


def checksums_equal(expected: str, actual: str) -> bool:
    """Compare two rendered checksums, ignoring case."""
    return expected.strip().upper() == actual.strip().upper()


def verify_checksum(data: bytes, expected: str) -> bool:
    """
    Verify that data matches expected checksum.

    Args:
        data: Bytes to verify
        expected: Expected checksum (hex string, any case)

    Returns:
        True if checksum matches, False otherwise
    """
    return checksums_equal(expected, compute_checksum(data))


class IncrementalChecksumCalculator:
    """
    Calculate CRC-32 checksum incrementally for streaming data.

    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(piece1)
        calculator.update(piece2)
        final_checksum = calculator.finalize()
    """

    def __init__(self):
        self._value = 0
        self._finalized = False

    def update(self, data: bytes) -> None:
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._value = zlib.crc32(data, self._value)

    def finalize(self) -> str:
        self._finalized = True
        return format_checksum(self._value)

    def reset(self) -> None:
        self._value = 0
        self._finalized = False


def checksum_stream(stream: BinaryIO, read_size: int = CHECKSUM_READ_SIZE) -> str:
    """Checksum everything remaining in ``stream``."""
    calculator = IncrementalChecksumCalculator()
    for piece in iter(lambda: stream.read(read_size), b""):
        calculator.update(piece)
    return calculator.finalize()


def checksum_file(path: Path) -> str:
    """
    Compute the checksum of a file's current bytes.

    Args:
        path: Already-resolved path to a regular file

    Raises:
        NotFoundError: If the file does not exist
        IOFailure: If it is not a regular file or cannot be read
    """
    if not path.exists():
        raise NotFoundError(str(path))
    if not path.is_file():
        raise IOFailure("checksum", str(path), ValueError("not a regular file"))
    try:
        with open(path, "rb") as f:
            return checksum_stream(f)
    except OSError as e:
        raise IOFailure("checksum", str(path), e)
