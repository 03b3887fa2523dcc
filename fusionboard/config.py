# Fusion Board — configuration
# Override via fusionboard.yaml, environment variables or CLI args.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

CONFIG_PATH = Path.home() / ".config" / "fusionboard" / "fusionboard.yaml"

ENV_CONFIG = "FUSIONBOARD_CONFIG"
ENV_DB = "FUSIONBOARD_DB"


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""
    pass


@dataclass
class Config:
    """Runtime configuration for the board server."""

    # Storage
    db_path: str = "~/.local/share/fusionboard/board.db"
    seed: bool = True                 # Insert demo board into a fresh DB

    # HTTP API
    host: str = "127.0.0.1"
    port: int = 3000

    log_level: str = "INFO"

    def resolve(self):
        """Apply environment overrides and expand ~."""
        env_db = os.environ.get(ENV_DB)
        if env_db:
            self.db_path = env_db
        self.db_path = str(Path(self.db_path).expanduser())
        self.port = int(self.port)
        self.log_level = str(self.log_level).upper()

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML, falling back to defaults when no file exists."""
        if path is None:
            path = os.environ.get(ENV_CONFIG)
        cfg_path = Path(path).expanduser() if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must be a mapping, got {type(data).__name__}")
            known = {f.name for f in fields(cls)}
            cfg = cls(**{k: v for k, v in data.items() if k in known})
        else:
            cfg = cls()
        try:
            cfg.resolve()
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e
        return cfg
