# utils.py
"""
Utility functions for the animation framework.

Logging setup and configuration loading live here. Neither belongs to the
simulation or the rendering surface; both are used once by the entry point
before the frame loop starts.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, List

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: Full configuration. Only the optional "logging" section is
#       read: "level", "format", "log_file", "max_bytes", "backup_count".
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler, creating the log directory when
#     needed. Third-party loggers in QUIET_LOGGERS are capped at WARNING.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed configuration with every known section present
#     (missing sections become empty dictionaries).
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when the
#     top level is not a JSON object.

CONFIG_SECTIONS = ('simulation_parameters', 'visualization', 'run_control', 'logging')

# numba logs every compilation pass at DEBUG.
QUIET_LOGGERS = ('numba',)

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/polarity.log'


def _build_handlers(log_file: str, max_bytes: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    directory = os.path.dirname(log_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handlers.append(logging.handlers.RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count
    ))
    return handlers


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to the console and a rotating log file.
    """
    settings = config.get('logging', {})
    level = str(settings.get('level', 'INFO')).upper()
    log_file = settings.get('log_file', DEFAULT_LOG_FILE)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(settings.get('format', DEFAULT_LOG_FORMAT))
    handlers = _build_handlers(
        log_file,
        settings.get('max_bytes', 1024 * 1024),
        settings.get('backup_count', 5),
    )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {level}, file {log_file}.")


def load_config(path: str) -> Dict[str, Any]:
    """Reads the JSON config and makes sure every section exists."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Could not parse {path}: {e}")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    missing = [section for section in CONFIG_SECTIONS if section not in config]
    for section in missing:
        config[section] = {}
    if missing:
        logging.warning(f"Config has no {', '.join(missing)} section(s); using defaults.")
    logging.info("Configuration loaded successfully.")
    return config
