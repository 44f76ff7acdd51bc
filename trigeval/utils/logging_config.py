# trigeval/utils/logging_config.py

"""
Configures the logging system for trigeval based on loaded settings.
Uses Rich for enhanced console logging.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from trigeval.config import TrigevalConfig
from trigeval.version import __version__

# --- Constants ---
# Map verbosity levels (from CLI flags) to logging levels
VERBOSITY_MAP = {
    0: logging.WARNING,  # Default (normal)
    1: logging.INFO,     # -v (verbose)
    2: logging.DEBUG,    # -vv (debug)
    -1: logging.CRITICAL + 10 # -q (quiet/silent)
}

PACKAGE_LOGGER = "trigeval"

# --- Setup Function ---

def setup_logging(config: TrigevalConfig, verbosity: Optional[int] = None) -> Optional[Path]:
    """
    Configures the package logger based on the provided configuration and verbosity level.

    Args:
        config: The loaded TrigevalConfig object.
        verbosity: -1 for quiet, 0 for normal, 1 for verbose, 2 for debug.
                   When None, the console level comes from the logging config.

    Returns:
        The path of the log file when file logging is active, otherwise None.
    """
    log_cfg = config.logging

    if verbosity is None:
        console_level = logging.getLevelName(log_cfg.log_level_console)
    else:
        console_level = VERBOSITY_MAP.get(verbosity, logging.DEBUG if verbosity > 2 else logging.WARNING)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG) # Handlers filter on their own levels
    package_logger.handlers.clear()
    package_logger.propagate = False

    if console_level <= logging.CRITICAL:
        console_handler = RichHandler(
            console=Console(stderr=True), # Keep stdout for command results
            level=console_level,
            show_time=False,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False, # Expressions may contain brackets
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(console_handler)

    log_filepath: Optional[Path] = None
    if log_cfg.log_file_enabled:
        try:
            log_dir = config.paths.log_directory
            log_dir.mkdir(parents=True, exist_ok=True)
            log_filepath = log_dir / log_cfg.log_filename_template.format(timestamp=datetime.now())

            file_handler = logging.FileHandler(log_filepath, encoding='utf-8')
            file_handler.setLevel(log_cfg.log_level_file)
            file_handler.setFormatter(logging.Formatter(log_cfg.log_format))
            package_logger.addHandler(file_handler)

            file_logger = logging.getLogger(f"{PACKAGE_LOGGER}.init")
            file_logger.info(f"--- trigeval v{__version__} Log Start ---")
            file_logger.debug(f"Full configuration loaded: {config.model_dump()}")
        except OSError as e:
            logging.getLogger(f"{PACKAGE_LOGGER}.error").error(f"Failed to configure file logging: {e}", exc_info=True)
            log_filepath = None

    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler()) # Quiet mode must not reach logging.lastResort

    init_logger = logging.getLogger(f"{PACKAGE_LOGGER}.init")
    init_logger.info(f"trigeval v{__version__} initialized.")
    if log_filepath is not None:
        init_logger.info(f"Logging to file: {log_filepath}")
    return log_filepath
