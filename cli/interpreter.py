"""Sandboxed command interpreter over one identity's workspace."""

from pathlib import Path
from typing import Optional

from chunkstore.service import ChunkService
from chunkstore.workspace import PathLike, WorkspaceManager
from cli.commands import (
    ShellContext,
    describe_error,
    handle_cat,
    handle_chunk_check,
    handle_crc32,
    handle_ls,
    handle_pwd,
)
from cli.constants import HELP_LINES, RULE
from cli.history import CommandHistory
from cli.models import (
    CatCommand,
    ChunkCheckCommand,
    ClearCommand,
    CommandRequest,
    Crc32Command,
    HelpCommand,
    HistoryCommand,
    ListCommand,
    PwdCommand,
)
from cli.parser import MissingArgumentError, ParseError, UnknownCommandError, parse_command
from cli.reports import render_access_decision, render_integrity_report
from common import audit
from common.audit import AuditEvent, AuditSink, safe_record
from common.constants import DEFAULT_BLOCK_SIZE, ROLE_USER
from common.exceptions import ChunkVaultError, IOFailure
from common.logging_config import get_logger

logger = get_logger(__name__)


class CommandInterpreter:
    """
    Processes one command line at a time against a confined workspace.

    Output accumulates in ``transcript``; ``execute`` also returns the lines
    produced by that one command. No command error ends the session.
    """

    def __init__(
        self,
        workspace_root: PathLike,
        identity: str,
        role: str = ROLE_USER,
        audit_sink: Optional[AuditSink] = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ):
        self.identity = identity
        self.role = role
        self.audit_sink = audit_sink
        self.workspace = WorkspaceManager(workspace_root)
        self.service = ChunkService(
            self.workspace, identity, audit_sink=audit_sink, block_size=block_size
        )
        self.context = ShellContext(workspace=self.workspace, service=self.service)
        self.history = CommandHistory()
        self.transcript: list[str] = []
        self._cursor = self.history.cursor()

        try:
            self.workspace.ensure()
        except IOFailure as e:
            self._emit([f"Warning: Could not create workspace directory: {e}"])

    @property
    def workspace_root(self) -> Path:
        return self.workspace.root

    def open_session(self) -> list[str]:
        """Emit the greeting and record the session start."""
        lines = [
            f"Workspace: {self.workspace.root}",
            "Type 'help' for available commands",
            "",
        ]
        self._emit(lines)
        self._audit(audit.SHELL_OPEN, "Opened shell emulator")
        return lines

    def close_session(self) -> None:
        self._audit(audit.SHELL_CLOSE, "Closed shell emulator")

    def execute(self, input_line: str) -> list[str]:
        """
        Run one command line.

        Blank input is ignored. Every other line is echoed, dispatched,
        appended to history verbatim as typed, and audited.

        Args:
            input_line: Raw command line

        Returns:
            Output lines of this command
        """
        command = input_line.strip()
        if not command:
            self._cursor.reset()
            return []

        self._emit([f"> {command}"])
        output, clear = self._run(command)
        self.history.append(command)
        self._cursor.reset()
        self._audit(audit.SHELL_COMMAND, f"Executed: {command}")

        if clear:
            self.transcript.clear()
            return []
        self._emit(output + [""])
        return output

    def _run(self, command: str) -> tuple[list[str], bool]:
        try:
            cmd_obj = parse_command(command)
        except UnknownCommandError as e:
            return [f"Unknown command: {e.verb}", "Type 'help' for available commands"], False
        except MissingArgumentError as e:
            return [f"Error: {e}", e.usage], False
        except ParseError as e:
            return [f"Error: {e}"], False

        if isinstance(cmd_obj, ClearCommand):
            return [], True

        try:
            return self.dispatch(cmd_obj), False
        except ChunkVaultError as e:
            logger.info(f"Command '{command}' failed: {e}")
            return [describe_error(e)], False
        except Exception as e:
            logger.error(f"Unexpected error executing '{command}': {e}", exc_info=True)
            return [f"Error executing command: {e}"], False

    def dispatch(self, cmd_obj: CommandRequest) -> list[str]:
        """Dispatch a parsed command to its handler."""
        if isinstance(cmd_obj, ListCommand):
            return handle_ls(cmd_obj, self.context)
        elif isinstance(cmd_obj, CatCommand):
            return handle_cat(cmd_obj, self.context)
        elif isinstance(cmd_obj, PwdCommand):
            return handle_pwd(self.context)
        elif isinstance(cmd_obj, Crc32Command):
            return handle_crc32(cmd_obj, self.context)
        elif isinstance(cmd_obj, ChunkCheckCommand):
            return handle_chunk_check(cmd_obj, self.context)
        elif isinstance(cmd_obj, HelpCommand):
            return list(HELP_LINES)
        elif isinstance(cmd_obj, HistoryCommand):
            return self._render_history()
        else:
            return [f"Unknown command type: {type(cmd_obj).__name__}"]

    def _render_history(self) -> list[str]:
        if not len(self.history):
            return ["No command history."]
        lines = ["Command History:", RULE]
        for number, entry in enumerate(self.history.entries, start=1):
            lines.append(f"{number:3d}  {entry}")
        return lines

    def integrity_report(self, base_name: str) -> list[str]:
        """Verify a chunked file against its manifest, rendered for display."""
        try:
            results = self.service.verify(base_name)
        except ChunkVaultError as e:
            return [describe_error(e)]
        return render_integrity_report(base_name, results)

    def access_report(self, base_name: str) -> str:
        """Evaluate this session's identity and role against a manifest."""
        try:
            decision = self.service.check_access(base_name, self.identity, self.role)
        except ChunkVaultError as e:
            return describe_error(e)
        return render_access_decision(decision)

    def recall_older(self) -> str:
        """Previous history entry, most recent first (cursor-up)."""
        return self._cursor.older()

    def recall_newer(self) -> str:
        """Next history entry toward the present (cursor-down)."""
        return self._cursor.newer()

    def reset_recall(self) -> None:
        """Return recall to a fresh line, as after an abandoned edit."""
        self._cursor.reset()

    def _emit(self, lines: list[str]) -> None:
        self.transcript.extend(lines)

    def _audit(self, action: str, details: str) -> None:
        safe_record(self.audit_sink, AuditEvent(
            username=self.identity, action=action, details=details,
        ))
