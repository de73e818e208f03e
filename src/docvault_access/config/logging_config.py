"""Logging setup for docvault-access.

Two channels are configured: the regular module loggers, whose level follows
``LOG_LEVEL`` or ``LOG_VERBOSITY``, and the audit logger, which always runs at
INFO on its own handler so access decisions are recorded even when the
service is otherwise quiet.

Environment:
    LOG_LEVEL           explicit level, overrides LOG_VERBOSITY
    LOG_VERBOSITY       QUIET | NORMAL | VERBOSE | DEBUG (default NORMAL)
    LOG_FORMAT          simple | detailed | json (default simple)
    ENABLE_SQL_LOGGING  "true" keeps asyncpg at the root level
"""

import json
import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict, Optional


class LogVerbosity(str, Enum):
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"

    @property
    def level(self) -> str:
        return _VERBOSITY_LEVELS[self]


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Records carrying an ``audit`` extra (see LoggingAuditSink) have the
    event fields merged in instead of nested in the message string.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
        }
        audit = getattr(record, "audit", None)
        if isinstance(audit, dict):
            entry.update(audit)
        else:
            entry["message"] = record.getMessage()
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def resolve_level(verbosity: str, explicit_level: Optional[str] = None) -> str:
    """Effective root level: LOG_LEVEL wins, then the verbosity mode."""
    if explicit_level:
        return explicit_level.upper()
    try:
        return LogVerbosity(verbosity.upper()).level
    except ValueError:
        return LogVerbosity.NORMAL.level


class LoggingConfig:
    """Builds and applies the dictConfig for the service."""

    AUDIT_LOGGER = "docvault_access.audit"

    # Third-party loggers held at a fixed level
    NOISY_MODULES = {
        "asyncio": "ERROR",
        "httpx": "ERROR",
        "httpcore": "ERROR",
        "redis": "WARNING",
        "uvicorn.access": "WARNING",
    }

    @classmethod
    def build(cls) -> Dict[str, Any]:
        level = resolve_level(os.getenv("LOG_VERBOSITY", "NORMAL"), os.getenv("LOG_LEVEL"))
        try:
            log_format = LogFormat(os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower())
        except ValueError:
            log_format = LogFormat.SIMPLE

        if log_format is LogFormat.JSON:
            console_formatter: Dict[str, Any] = {"()": JsonFormatter, "datefmt": "%Y-%m-%dT%H:%M:%S"}
        else:
            console_formatter = {"format": _FORMAT_STRINGS[log_format], "datefmt": "%Y-%m-%d %H:%M:%S"}

        loggers: Dict[str, Any] = {
            cls.AUDIT_LOGGER: {"level": "INFO", "handlers": ["audit"], "propagate": False},
        }
        for module, module_level in cls.NOISY_MODULES.items():
            loggers[module] = {"level": module_level}
        if os.getenv("ENABLE_SQL_LOGGING", "false").lower() != "true":
            loggers["asyncpg"] = {"level": "WARNING"}

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": console_formatter,
                "audit": {"()": JsonFormatter, "datefmt": "%Y-%m-%dT%H:%M:%S"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stdout",
                },
                "audit": {
                    "class": "logging.StreamHandler",
                    "formatter": "audit",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls) -> None:
        config = cls.build()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(
            f"Logging configured: level={config['root']['level']}, "
            f"format={os.getenv('LOG_FORMAT', LogFormat.SIMPLE.value)}"
        )


def setup_logging() -> None:
    """Configure logging from the environment. Safe to call more than once."""
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
