"""Tests for audit events and sinks."""

import logging
from unittest.mock import Mock

from common.audit import (
    AUDIT_LOGGER_NAME,
    SHELL_COMMAND,
    AuditEvent,
    LoggingAuditSink,
    MemoryAuditSink,
    safe_record,
)


def test_memory_sink_keeps_order():
    sink = MemoryAuditSink()
    safe_record(sink, AuditEvent('alice', 'A'))
    safe_record(sink, AuditEvent('alice', 'B'))
    assert sink.actions() == ['A', 'B']


def test_safe_record_swallows_sink_failure(caplog):
    sink = Mock()
    sink.record.side_effect = OSError('disk full')

    with caplog.at_level(logging.WARNING, logger='common.audit'):
        safe_record(sink, AuditEvent('alice', SHELL_COMMAND, details='Executed: ls'))

    assert 'Failed to record audit event SHELL_COMMAND' in caplog.text


def test_safe_record_without_sink():
    safe_record(None, AuditEvent('alice', SHELL_COMMAND))


def test_logging_sink_writes_structured_line(caplog):
    with caplog.at_level(logging.INFO, logger='tests.audit'):
        LoggingAuditSink('tests.audit').record(
            AuditEvent('alice', SHELL_COMMAND, target_file='a.txt', details='Executed: cat a.txt')
        )

    record = caplog.records[-1]
    assert record.name == 'tests.audit'
    assert record.getMessage() == (
        'user=alice action=SHELL_COMMAND target=a.txt container=- details=Executed: cat a.txt'
    )


def test_default_logger_name():
    assert LoggingAuditSink()._logger.name == AUDIT_LOGGER_NAME
