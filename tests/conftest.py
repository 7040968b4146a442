"""Shared pytest fixtures for all tests."""

import pytest

from chunkstore.service import ChunkService
from chunkstore.workspace import WorkspaceManager
from cli.interpreter import CommandInterpreter
from common.audit import MemoryAuditSink


@pytest.fixture
def workspace(tmp_path):
    """
    Create an empty workspace for identity 'alice'.

    Returns:
        Path to the workspace root
    """
    root = tmp_path / 'workspace' / 'alice'
    root.mkdir(parents=True)
    return root


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a 10-byte source file outside the workspace.

    Returns:
        Path to the source file
    """
    file_path = tmp_path / 'report.txt'
    file_path.write_bytes(b'0123456789')
    return file_path


@pytest.fixture
def memory_sink():
    return MemoryAuditSink()


@pytest.fixture
def service(workspace, memory_sink):
    """ChunkService for 'alice' with a 4-byte block size."""
    return ChunkService(WorkspaceManager(workspace), 'alice', audit_sink=memory_sink, block_size=4)


@pytest.fixture
def interpreter(workspace, memory_sink):
    """CommandInterpreter for 'alice' with a 4-byte block size."""
    return CommandInterpreter(workspace, identity='alice', audit_sink=memory_sink, block_size=4)
