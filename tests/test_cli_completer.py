"""Tests for ShellCompleter."""

import pytest
from prompt_toolkit.document import Document

from cli.completer import ShellCompleter
from cli.constants import COMMANDS


@pytest.fixture
def populated(workspace):
    """
    Workspace with plain files and one manifest.

    Returns:
        Path to the workspace root
    """
    (workspace / 'notes.txt').write_text('content')
    (workspace / 'numbers.csv').write_text('content')
    (workspace / 'data.bin.meta.json').write_text('{}')
    (workspace / 'subdir').mkdir()
    return workspace


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def get_completions_display(completer, text):
    doc = Document(text, len(text))
    return [c.display_text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, workspace):
        assert get_completions_list(ShellCompleter(workspace), '') == COMMANDS

    def test_partial_command_filters(self, workspace):
        assert get_completions_list(ShellCompleter(workspace), 'c') == ['cat', 'crc32', 'chunk-check', 'clear']

    def test_partial_command_case_insensitive(self, workspace):
        assert get_completions_list(ShellCompleter(workspace), 'HI') == ['history']


class TestArgumentCompletion:
    """Tests for file and base-name completion."""

    def test_cat_completes_workspace_files(self, populated):
        completer = ShellCompleter(populated)
        assert get_completions_list(completer, 'cat ') == ['data.bin.meta.json', 'notes.txt', 'numbers.csv']

    def test_crc32_filters_by_prefix(self, populated):
        assert get_completions_list(ShellCompleter(populated), 'crc32 n') == ['notes.txt', 'numbers.csv']

    def test_chunk_check_completes_manifest_base_names(self, populated):
        assert get_completions_list(ShellCompleter(populated), 'chunk-check ') == ['data.bin']
        assert get_completions_list(ShellCompleter(populated), 'chunkcheck d') == ['data.bin']

    def test_no_second_argument(self, populated):
        assert get_completions_list(ShellCompleter(populated), 'cat notes.txt ') == []

    def test_commands_without_arguments(self, populated):
        assert get_completions_list(ShellCompleter(populated), 'pwd ') == []

    def test_empty_workspace_hint(self, workspace):
        displays = get_completions_display(ShellCompleter(workspace), 'cat ')
        assert displays == ['(no files found in workspace)']

    def test_missing_workspace_hint(self, tmp_path):
        displays = get_completions_display(ShellCompleter(tmp_path / 'absent'), 'crc32 ')
        assert any('no files found' in d for d in displays)
