"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.fillprefix/config.yaml)
  3. User config (~/.fillprefix/config.yaml)
  4. Defaults

The catalog section lists catalog functions to apply globally once the
host engine is available (see PatternRegistry.set_global_catalog).
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .catalog import DEFAULT_CATALOG
from .presentation.symbols import get_symbols


logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_name_list(value: str) -> List[str]:
    """Split a comma-separated list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class CatalogConfig:
    """Catalog functions applied globally when the host comes up."""
    global_functions: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        unknown = DEFAULT_CATALOG.unknown(self.global_functions)
        if not unknown:
            return None
        name = unknown[0]
        message = f"Unknown catalog function '{name}'."
        suggestion = DEFAULT_CATALOG.suggest(name)
        if suggestion:
            message += f" Did you mean '{suggestion}'?"
        return message


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class LoggingConfig:
    """Logging preferences."""
    level: str = "WARNING"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.level.upper() not in LOG_LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(LOG_LEVELS)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "catalog": {
                "global_functions": list(self.catalog.global_functions)
            },
            "display": {
                "symbols": self.display.symbols
            },
            "logging": {
                "level": self.logging.level
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        catalog_data = data.get("catalog", {}) or {}
        display_data = data.get("display", {}) or {}
        logging_data = data.get("logging", {}) or {}

        functions = catalog_data.get("global_functions") or []
        if isinstance(functions, str):
            functions = parse_name_list(functions)

        return cls(
            catalog=CatalogConfig(global_functions=list(functions)),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "WARNING")).upper()
            )
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment
      2. Project config (.fillprefix/config.yaml)
      3. User config (~/.fillprefix/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".fillprefix"
    USER_CONFIG_FILE = "config.yaml"
    PROJECT_CONFIG_DIR = ".fillprefix"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_DIR / self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("FILLPREFIX_GLOBAL_CATALOG"):
            config_data.setdefault("catalog", {})["global_functions"] = parse_name_list(
                os.environ["FILLPREFIX_GLOBAL_CATALOG"]
            )
        if os.environ.get("FILLPREFIX_LOG_LEVEL"):
            config_data.setdefault("logging", {})["level"] = os.environ["FILLPREFIX_LOG_LEVEL"]

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.symbols")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.symbols')"

        section, setting = parts

        if section == "catalog":
            if setting == "global_functions":
                config.catalog.global_functions = parse_name_list(value)
            else:
                return f"Unknown catalog setting: {setting}. Valid: global_functions"
            error = config.catalog.validate()
            if error:
                return error

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols"
            error = config.display.validate()
            if error:
                return error

        elif section == "logging":
            if setting == "level":
                config.logging.level = value.upper()
            else:
                return f"Unknown logging setting: {setting}. Valid: level"
            error = config.logging.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: catalog, display, logging"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "catalog" and setting == "global_functions":
            return ",".join(config.catalog.global_functions)
        if section == "display" and setting == "symbols":
            return config.display.symbols
        if section == "logging" and setting == "level":
            return config.logging.level

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        functions = config.catalog.global_functions
        error = config.catalog.validate()
        status = f"{symbols.check_fail} {error}" if error else f"{symbols.check_pass} Valid"

        lines = [
            "Configuration:",
            "",
            "Catalog:",
            f"  Global functions: {', '.join(functions) if functions else '(none)'}",
            f"  Status: {status}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Logging:",
            f"  Level: {config.logging.level}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


def get_config(project_dir: Optional[Path] = None) -> Config:
    """Convenience function to load config."""
    return ConfigManager(project_dir).load()
