"""
Structured logging utility.
Single responsibility: provide consistent logging across application.
"""

import json
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def _level_value(level: str) -> int:
    """Map a level name (WARNING accepted as WARN) to its numeric rank."""
    name = level.upper()
    if name == "WARNING":
        name = "WARN"
    if name not in LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    return LEVELS[name]


class StructuredLogger:
    """
    Structured logger for consistent application logging.

    Events are dotted names ("reconciler.completed") carrying keyword
    context. Console output is human readable; the optional file sink
    receives one JSON object per line.
    """

    def __init__(self, name: str = "tabrecon",
                 log_file: Optional[Path] = None,
                 level: str = "INFO"):
        """
        Initialize logger.

        Args:
            name: Logger name
            log_file: Optional file path for logging
            level: Minimum level written to the console and file
        """
        self.name = name
        self.log_file = log_file
        self.level = _level_value(level)

    def _format_message(self, level: str, message: str,
                       **kwargs) -> Dict[str, Any]:
        """
        Format log message with metadata.

        Args:
            level: Log level (INFO, DEBUG, ERROR, etc.)
            message: Log message
            **kwargs: Additional context fields

        Returns:
            Formatted log entry
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "logger": self.name,
            "message": message
        }

        if kwargs:
            entry["context"] = kwargs

        return entry

    def _output(self, entry: Dict[str, Any]):
        """
        Output log entry to console and optionally file.

        Args:
            entry: Log entry dictionary
        """
        if LEVELS[entry["level"]] < self.level:
            return

        # Console output - human readable
        timestamp = entry["timestamp"].split("T")[1][:8]
        level = entry["level"]
        msg = entry["message"]

        print(f"[{timestamp}] {level:5} | {msg}", file=sys.stderr)

        if "context" in entry:
            for key, value in entry["context"].items():
                print(f"  {key}={value}", file=sys.stderr)

        # File output - JSON for parsing
        if self.log_file:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, default=str) + "\n")

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._output(self._format_message("INFO", message, **kwargs))

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._output(self._format_message("DEBUG", message, **kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._output(self._format_message("WARN", message, **kwargs))

    def error(self, message: str, **kwargs):
        """Log error message."""
        self._output(self._format_message("ERROR", message, **kwargs))

    def critical(self, message: str, **kwargs):
        """Log critical message."""
        self._output(self._format_message("CRITICAL", message, **kwargs))


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "tabrecon") -> StructuredLogger:
    """
    Get or create logger instance.

    The initial level comes from TABRECON_LOG_LEVEL (default INFO).

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _logger
    if _logger is None:
        _logger = StructuredLogger(name, level=os.getenv("TABRECON_LOG_LEVEL", "INFO"))
    return _logger


def configure_logger(level: Optional[str] = None,
                     log_file: Optional[Path] = None) -> StructuredLogger:
    """
    Adjust the shared logger in place.

    Modules hold the instance returned by get_logger() at import time,
    so configuration mutates that instance rather than replacing it.

    Args:
        level: New minimum level (unchanged when None)
        log_file: JSON-lines sink (unchanged when None)

    Returns:
        The shared logger
    """
    logger = get_logger()
    if level is not None:
        logger.level = _level_value(level)
    if log_file is not None:
        logger.log_file = Path(log_file)
    return logger
