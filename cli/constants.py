"""Shell constants: command vocabulary, help text, prompt styling."""

from prompt_toolkit.styles import Style

COMMANDS = ["ls", "cat", "pwd", "crc32", "chunk-check", "help", "clear", "history"]

VERB_ALIASES = {"chunkcheck": "chunk-check"}

FILE_ARGUMENT_COMMANDS = ("cat", "crc32", "chunk-check")

EXIT_COMMAND = "exit"

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6B bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;158;107m"
RESET = "\033[0m"

BANNER = f"""{GREEN}
  chunkvault sandbox shell
{RESET}"""

WELCOME_HELP = "Type 'help' for available commands or 'exit' to quit.\n"

PROMPT_TEXT = "vault> "

RULE = "─" * 53
DOUBLE_RULE = "═" * 59

HELP_LINES = [
    DOUBLE_RULE,
    "                    AVAILABLE COMMANDS                     ",
    DOUBLE_RULE,
    "",
    "  ls                  - List files in workspace",
    "  ls -l               - List files with size and date",
    "  cat <file>          - Display file contents",
    "  pwd                 - Show current workspace path",
    "  crc32 <file>        - Calculate CRC32 checksum",
    "  chunk-check <file>  - Check for file chunks",
    "  help                - Show this help message",
    "  clear               - Clear output window",
    "  history             - Show command history",
    "",
    DOUBLE_RULE,
    "",
    "Note: All commands run in your workspace directory only.",
    "You cannot access files outside your workspace.",
]

HELP_TEXT = "\n".join(HELP_LINES)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
