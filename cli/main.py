"""Shell entry point and one-shot chunk operations."""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from chunkstore.service import ChunkService
from cli.commands import describe_error
from cli.config import DEFAULT_CONFIG_PATH, Config
from cli.interpreter import CommandInterpreter
from cli.repl import repl_loop
from common.audit import LoggingAuditSink
from common.exceptions import ChunkVaultError
from common.logging_config import set_session, setup_logging

LOGGED_COMPONENTS = ("cli", "chunkstore", "common", "chunkvault")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chunkvault",
        description="Workspace-confined chunking, integrity checks and sandbox shell.",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config JSON file.")
    sub = p.add_subparsers(dest="command")

    sub.add_parser("shell", help="Start the sandbox shell (default).")

    ingest = sub.add_parser("ingest", help="Split a file into the workspace and write its manifest.")
    ingest.add_argument("source", type=Path)
    ingest.add_argument("--name", default=None, help="Base name (defaults to the source file name).")
    ingest.add_argument("--block-size", type=int, default=None)

    verify = sub.add_parser("verify", help="Verify chunk checksums against the manifest.")
    verify.add_argument("name")

    access = sub.add_parser("access", help="Check the configured identity's access to a file.")
    access.add_argument("name")

    share = sub.add_parser("share", help="Allow another identity to access a file.")
    share.add_argument("name")
    share.add_argument("user")

    unshare = sub.add_parser("unshare", help="Revoke another identity's access to a file.")
    unshare.add_argument("name")
    unshare.add_argument("user")

    reassemble = sub.add_parser("reassemble", help="Rebuild a file from its verified chunks.")
    reassemble.add_argument("name")
    reassemble.add_argument("destination")
    return p


def run_command(args: argparse.Namespace, interpreter: CommandInterpreter) -> int:
    """Run a one-shot subcommand, printing its transcript lines."""
    service: ChunkService = interpreter.service

    if args.command == "verify":
        lines = interpreter.integrity_report(args.name)
        print("\n".join(lines))
        return 0 if lines[-1].startswith("Status: ALL") else 2
    if args.command == "access":
        line = interpreter.access_report(args.name)
        print(line)
        return 0 if "ALLOWED" in line else 2

    try:
        if args.command == "ingest":
            manifest = service.ingest(args.source, base_name=args.name, block_size=args.block_size)
            print(f"File uploaded and split into {manifest.total_chunks} chunks")
        elif args.command == "share":
            service.grant_access(args.name, args.user)
            print(f"Granted {args.user} access to {args.name}")
        elif args.command == "unshare":
            service.revoke_access(args.name, args.user)
            print(f"Revoked {args.user} access to {args.name}")
        elif args.command == "reassemble":
            destination = service.reassemble(args.name, args.destination)
            print(f"Reassembled {args.name} into {destination.name}")
    except ChunkVaultError as e:
        print(describe_error(e))
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the chunkvault CLI."""
    args = build_arg_parser().parse_args(argv)
    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'INFO')

    loggers = [setup_logging(component, log_level=log_level) for component in LOGGED_COMPONENTS]
    logger = loggers[0]
    if args.debug:
        logger.info("Debug logging enabled")

    config = Config(args.config)
    identity = config.get_identity()
    for component_logger in loggers:
        set_session(component_logger, identity)
    try:
        workspace_root = config.get_workspace_root()
    except ChunkVaultError as e:
        print(describe_error(e))
        return 1

    interpreter = CommandInterpreter(
        workspace_root,
        identity=identity,
        role=config.get_role(),
        audit_sink=LoggingAuditSink(),
        block_size=config.get_block_size(),
    )

    if args.command not in (None, "shell"):
        return run_command(args, interpreter)

    logger.info("Shell starting...")
    try:
        repl_loop(interpreter)
    except Exception as e:
        logger.error(f"Shell error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shell exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
