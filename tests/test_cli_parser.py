"""Tests for shell command parsing."""

import pytest

from cli.models import (
    CatCommand,
    ChunkCheckCommand,
    ClearCommand,
    Crc32Command,
    HelpCommand,
    HistoryCommand,
    ListCommand,
    PwdCommand,
)
from cli.parser import MissingArgumentError, ParseError, UnknownCommandError, parse_command, tokenize


@pytest.mark.parametrize('line,expected', [
    ('ls', ListCommand()),
    ('ls -l', ListCommand(long=True)),
    ('cat notes.txt', CatCommand(filename='notes.txt')),
    ('pwd', PwdCommand()),
    ('crc32 data.bin', Crc32Command(filename='data.bin')),
    ('chunk-check data.bin', ChunkCheckCommand(base_name='data.bin')),
    ('chunkcheck data.bin', ChunkCheckCommand(base_name='data.bin')),
    ('help', HelpCommand()),
    ('clear', ClearCommand()),
    ('history', HistoryCommand()),
])
def test_parse_known_commands(line, expected):
    assert parse_command(line) == expected


def test_verb_is_case_insensitive_but_arguments_are_not():
    assert parse_command('CAT Notes.TXT') == CatCommand(filename='Notes.TXT')


def test_extra_whitespace():
    assert parse_command('  crc32    data.bin  ') == Crc32Command(filename='data.bin')


def test_unknown_command():
    with pytest.raises(UnknownCommandError) as exc_info:
        parse_command('rm -rf /')
    assert exc_info.value.verb == 'rm'
    assert str(exc_info.value) == 'Unknown command: rm'


@pytest.mark.parametrize('verb', ['cat', 'crc32', 'chunk-check'])
def test_missing_argument(verb):
    with pytest.raises(MissingArgumentError) as exc_info:
        parse_command(verb)
    assert str(exc_info.value) == f'{verb} requires a filename'
    assert exc_info.value.usage == f'Usage: {verb} <filename>'


def test_ls_rejects_other_options():
    with pytest.raises(ParseError):
        parse_command('ls -la')


def test_empty_input():
    with pytest.raises(ParseError):
        parse_command('   ')


def test_tokenize_applies_alias():
    assert tokenize('ChunkCheck a') == ['chunk-check', 'a']
    assert tokenize('') == []
