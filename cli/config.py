"""Configuration management for the chunkvault shell."""

import getpass
import json
import logging
import os
import shutil
from pathlib import Path

from chunkstore.workspace import workspace_for
from common.constants import DEFAULT_BLOCK_SIZE, ROLE_USER, ROLES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.chunkvault' / 'config.json'


def _default_identity() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


def _env_block_size() -> int:
    raw = os.environ.get("CHUNKVAULT_BLOCK_SIZE")
    if raw is None:
        return DEFAULT_BLOCK_SIZE
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid CHUNKVAULT_BLOCK_SIZE {raw!r}, using {DEFAULT_BLOCK_SIZE}")
        return DEFAULT_BLOCK_SIZE


class Config:
    """Manages shell configuration stored in a JSON file."""

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.chunkvault/config.json)
        """
        self.config_path = Path(config_path)
        self.data = self._load()

    @staticmethod
    def defaults() -> dict:
        """Defaults, read from the environment at call time."""
        return {
            "workspace_base": os.environ.get(
                "CHUNKVAULT_WORKSPACE_BASE", str(Path.home() / "workspace")
            ),
            "block_size": _env_block_size(),
            "identity": os.environ.get("CHUNKVAULT_USER") or _default_identity(),
            "role": ROLE_USER,
        }

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        A file that cannot be parsed is copied to ``config.json.bak`` and
        defaults are used.

        Returns:
            Configuration dictionary
        """
        config = self.defaults()

        if not self.config_path.exists():
            self.data = config
            self.save()
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
            backup_path = self.config_path.with_suffix('.json.bak')
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Could not back up config to {backup_path}: {copy_error}")
            return config

        config.update(data)
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config {self.config_path}: {e}")

    def get_identity(self) -> str:
        return self.data.get('identity') or _default_identity()

    def get_role(self) -> str:
        role = self.data.get('role', ROLE_USER)
        return role if role in ROLES else ROLE_USER

    def set_identity(self, identity: str, role: str = ROLE_USER) -> None:
        """
        Set the session identity and role, and save to file.

        Args:
            identity: Identity supplied by the external auth component
            role: ``"admin"`` or ``"user"``
        """
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        self.data['identity'] = identity
        self.data['role'] = role
        self.save()

    def get_workspace_base(self) -> Path:
        return Path(self.data.get('workspace_base', Path.home() / "workspace")).expanduser()

    def get_workspace_root(self) -> Path:
        """
        Get the identity's workspace root beneath the workspace base.

        Raises:
            PathEscapeError: If the identity is not a plain directory name
        """
        return workspace_for(self.get_workspace_base(), self.get_identity())

    def get_block_size(self) -> int:
        value = self.data.get('block_size', DEFAULT_BLOCK_SIZE)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            logger.warning(f"Invalid block_size {value!r} in config, using {DEFAULT_BLOCK_SIZE}")
            return DEFAULT_BLOCK_SIZE
        return value
