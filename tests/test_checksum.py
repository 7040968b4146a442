"""Tests for CRC-32 checksum helpers."""

import io

import pytest

from chunkstore.checksum import (
    EMPTY_CHECKSUM,
    IncrementalChecksumCalculator,
    checksum_file,
    checksum_stream,
    checksums_equal,
    compute_checksum,
    format_checksum,
    verify_checksum,
)
from common.exceptions import IOFailure, NotFoundError


def test_known_check_value():
    """The standard CRC-32 check value for '123456789'."""
    assert compute_checksum(b'123456789') == 'CBF43926'


def test_empty_input_is_fixed_constant():
    assert compute_checksum(b'') == EMPTY_CHECKSUM == '00000000'


def test_format_pads_and_uppercases():
    assert format_checksum(0xAB) == '000000AB'
    assert format_checksum(0xDEADBEEF) == 'DEADBEEF'


def test_deterministic():
    data = b'the same bytes'
    assert compute_checksum(data) == compute_checksum(data)
    assert len(compute_checksum(data)) == 8


def test_single_byte_flip_changes_checksum():
    data = bytearray(b'chunk payload')
    original = compute_checksum(bytes(data))
    data[3] ^= 0x01
    assert compute_checksum(bytes(data)) != original


def test_comparison_is_case_insensitive():
    assert checksums_equal('cbf43926', 'CBF43926')
    assert verify_checksum(b'123456789', 'cbf43926')
    assert not verify_checksum(b'123456780', 'CBF43926')


def test_incremental_matches_one_shot():
    calculator = IncrementalChecksumCalculator()
    calculator.update(b'1234')
    calculator.update(b'56789')
    assert calculator.finalize() == 'CBF43926'


def test_incremental_rejects_update_after_finalize():
    calculator = IncrementalChecksumCalculator()
    calculator.finalize()
    with pytest.raises(ValueError):
        calculator.update(b'x')
    calculator.reset()
    calculator.update(b'123456789')
    assert calculator.finalize() == 'CBF43926'


def test_stream_reads_in_pieces():
    assert checksum_stream(io.BytesIO(b'123456789'), read_size=2) == 'CBF43926'


class TestChecksumFile:
    def test_file_checksum(self, tmp_path):
        path = tmp_path / 'digits.txt'
        path.write_bytes(b'123456789')
        assert checksum_file(path) == 'CBF43926'

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            checksum_file(tmp_path / 'missing.txt')

    def test_directory_is_not_regular_file(self, tmp_path):
        with pytest.raises(IOFailure):
            checksum_file(tmp_path)
