"""Tests for the command-line entry point."""

import json
from unittest.mock import patch

import pytest

from cli.main import build_arg_parser, main


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    """Config for identity 'alice' with a 4-byte block size."""
    for name in ('CHUNKVAULT_WORKSPACE_BASE', 'CHUNKVAULT_BLOCK_SIZE', 'CHUNKVAULT_USER'):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'workspace_base': str(tmp_path / 'workspace'),
        'identity': 'alice',
        'role': 'user',
        'block_size': 4,
    }))
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch('cli.main.setup_logging') as mock_setup:
        yield mock_setup


def run(config_path, *argv):
    return main(['--config', str(config_path), *argv])


def test_default_command_is_shell():
    assert build_arg_parser().parse_args([]).command is None


def test_shell_starts_repl(config_path):
    with patch('cli.main.repl_loop') as mock_loop:
        assert run(config_path) == 0
    interpreter = mock_loop.call_args.args[0]
    assert interpreter.identity == 'alice'


def test_ingest_then_verify(config_path, sample_file, tmp_path, capsys):
    assert run(config_path, 'ingest', str(sample_file)) == 0
    assert 'File uploaded and split into 3 chunks' in capsys.readouterr().out
    assert (tmp_path / 'workspace' / 'alice' / 'report.txt.meta.json').is_file()

    assert run(config_path, 'verify', 'report.txt') == 0
    assert 'Status: ALL CHUNKS VALID ✓' in capsys.readouterr().out


def test_verify_reports_corruption(config_path, sample_file, tmp_path, capsys):
    run(config_path, 'ingest', str(sample_file))
    (tmp_path / 'workspace' / 'alice' / 'report.txt.chunk3').write_bytes(b'??')
    capsys.readouterr()

    assert run(config_path, 'verify', 'report.txt') == 2
    assert 'CORRUPTED' in capsys.readouterr().out


def test_share_and_access(config_path, sample_file, capsys):
    run(config_path, 'ingest', str(sample_file))
    assert run(config_path, 'share', 'report.txt', 'bob') == 0
    assert run(config_path, 'access', 'report.txt') == 0
    assert capsys.readouterr().out.strip().endswith('ACCESS: ALLOWED (Owner)')


def test_reassemble(config_path, sample_file, tmp_path):
    run(config_path, 'ingest', str(sample_file))
    assert run(config_path, 'reassemble', 'report.txt', 'restored.txt') == 0
    assert (tmp_path / 'workspace' / 'alice' / 'restored.txt').read_bytes() == b'0123456789'


def test_error_is_reported(config_path, capsys):
    assert run(config_path, 'share', 'missing.txt', 'bob') == 1
    assert 'Error: Metadata file not found' in capsys.readouterr().out


def test_log_lines_carry_session_identity(config_path, no_logging_setup):
    with patch('cli.main.set_session') as mock_set_session, patch('cli.main.repl_loop'):
        run(config_path)

    assert no_logging_setup.call_count == 4
    assert [c.args[1] for c in mock_set_session.call_args_list] == ['alice'] * 4
