"""Audit events and sinks for user-visible actions.

Delivery is best-effort: a sink that raises must never fail the operation
that produced the event, so callers go through ``safe_record``.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

AUDIT_LOGGER_NAME = "chunkvault.audit"

SHELL_COMMAND = "SHELL_COMMAND"
SHELL_OPEN = "SHELL_OPEN"
SHELL_CLOSE = "SHELL_CLOSE"
FILE_UPLOAD_CHUNKED = "FILE_UPLOAD_CHUNKED"
CHUNK_CHECK = "CHUNK_CHECK"
CRC_CHECK = "CRC_CHECK"
ACCESS_CHECK = "ACCESS_CHECK"
ACCESS_GRANT = "ACCESS_GRANT"
ACCESS_REVOKE = "ACCESS_REVOKE"


@dataclass(frozen=True)
class AuditEvent:
    """
    One user-visible action.
    """
    username: str
    action: str
    target_file: Optional[str] = None
    container_id: Optional[str] = None
    details: str = ""


class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None:
        ...


class LoggingAuditSink:
    """Writes each event as one structured line to the audit logger."""

    def __init__(self, logger_name: str = AUDIT_LOGGER_NAME):
        self._logger = logging.getLogger(logger_name)

    def record(self, event: AuditEvent) -> None:
        self._logger.info(
            "user=%s action=%s target=%s container=%s details=%s",
            event.username,
            event.action,
            event.target_file or "-",
            event.container_id or "-",
            event.details,
        )


class MemoryAuditSink:
    """Keeps events in memory, in arrival order."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [event.action for event in self.events]


def safe_record(sink: Optional[AuditSink], event: AuditEvent) -> None:
    """
    Deliver ``event`` to ``sink`` without letting a sink failure propagate.

    Args:
        sink: Destination sink, or None to drop the event
        event: Event to record
    """
    if sink is None:
        return
    try:
        sink.record(event)
    except Exception as e:
        logger.warning(f"Failed to record audit event {event.action}: {e}")
