"""Tests for workspace resolution and confinement."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from chunkstore.workspace import WorkspaceManager, ensure, resolve, workspace_for
from common.exceptions import NotFoundError, PathEscapeError


class TestResolve:
    """Tests for resolve()."""

    def test_plain_name_resolves_inside_root(self, workspace):
        assert resolve(workspace, 'notes.txt') == workspace.resolve() / 'notes.txt'

    def test_nested_name_resolves_inside_root(self, workspace):
        assert resolve(workspace, 'sub/notes.txt') == workspace.resolve() / 'sub' / 'notes.txt'

    @pytest.mark.parametrize('name', [
        '../../etc/passwd',
        '..',
        'a/../../b',
        'a/../b',
        '..\\secret',
    ])
    def test_parent_traversal_rejected(self, workspace, name):
        with pytest.raises(PathEscapeError):
            resolve(workspace, name)

    def test_absolute_path_rejected(self, workspace):
        with pytest.raises(PathEscapeError):
            resolve(workspace, '/etc/passwd')

    @pytest.mark.parametrize('name', ['', '   ', '.'])
    def test_empty_or_root_rejected(self, workspace, name):
        with pytest.raises(PathEscapeError):
            resolve(workspace, name)

    def test_rejection_touches_no_file_system(self, workspace):
        """Lexical rejection happens before any path resolution or stat."""
        with patch.object(Path, 'resolve', side_effect=AssertionError('resolved')), \
                patch.object(Path, 'exists', side_effect=AssertionError('stat')):
            with pytest.raises(PathEscapeError):
                resolve(workspace, '../../etc/passwd')
            with pytest.raises(PathEscapeError):
                resolve(workspace, '/etc/passwd')

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unavailable')
    def test_symlink_escape_rejected(self, workspace, tmp_path):
        outside = tmp_path / 'outside.txt'
        outside.write_text('secret')
        (workspace / 'link.txt').symlink_to(outside)

        with pytest.raises(PathEscapeError):
            resolve(workspace, 'link.txt')

    def test_error_carries_name(self, workspace):
        with pytest.raises(PathEscapeError) as exc_info:
            resolve(workspace, '../x')
        assert exc_info.value.name == '../x'


class TestEnsure:
    """Tests for ensure() and workspace_for()."""

    def test_creates_missing_parents(self, tmp_path):
        root = tmp_path / 'a' / 'b' / 'bob'
        ensure(root)
        assert root.is_dir()

    def test_idempotent(self, workspace):
        (workspace / 'keep.txt').write_text('x')
        ensure(workspace)
        ensure(workspace)
        assert (workspace / 'keep.txt').read_text() == 'x'

    def test_workspace_for_identity(self, tmp_path):
        assert workspace_for(tmp_path, 'bob') == tmp_path.resolve() / 'bob'

    def test_workspace_for_rejects_traversing_identity(self, tmp_path):
        with pytest.raises(PathEscapeError):
            workspace_for(tmp_path, '../bob')


class TestWorkspaceManager:
    """Tests for directory listing."""

    def test_list_names_sorted(self, workspace):
        for name in ['b.txt', 'a.txt', 'C.txt']:
            (workspace / name).write_text(name)
        assert WorkspaceManager(workspace).list_names() == ['C.txt', 'a.txt', 'b.txt']

    def test_list_entries_report_size(self, workspace):
        (workspace / 'data.bin').write_bytes(b'12345')
        entries = WorkspaceManager(workspace).list_entries()
        assert [(e.name, e.size, e.is_dir) for e in entries] == [('data.bin', 5, False)]

    def test_missing_workspace_raises_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            WorkspaceManager(tmp_path / 'nope').list_names()

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unavailable')
    def test_dangling_symlink_is_listed(self, workspace):
        (workspace / 'a.txt').write_text('a')
        (workspace / 'dangling').symlink_to(workspace / 'gone')
        manager = WorkspaceManager(workspace)

        assert manager.list_names() == ['a.txt', 'dangling']
        assert [(e.name, e.is_dir) for e in manager.list_entries()] == [('a.txt', False), ('dangling', False)]
