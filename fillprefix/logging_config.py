"""
Logging setup for the fillprefix command line.

Library modules only call logging.getLogger(__name__); handlers are
configured here, by the CLI, never on import.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Optional

import yaml


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None, config_path: Optional[str] = None) -> None:
    """
    Configure logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        config_path: Optional YAML dictConfig file
                     (default: FILLPREFIX_LOGGING_CONFIG if set)
    """
    level_name = (level or "WARNING").upper()
    numeric_level = getattr(logging, level_name, logging.WARNING)

    if config_path is None:
        config_path = os.environ.get("FILLPREFIX_LOGGING_CONFIG")

    if config_path and Path(config_path).exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
            config.setdefault("root", {})["level"] = numeric_level
            logging.config.dictConfig(config)
            return
        except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
            print(f"Warning: Failed to load logging config: {e}")
            # Fall through to basic config

    logging.basicConfig(
        level=numeric_level,
        format=DEFAULT_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logging.getLogger("fillprefix").setLevel(numeric_level)
