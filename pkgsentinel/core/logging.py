"""Structured logging for the CLI and the API — structlog over stdlib logging.

Engine modules log with ``structlog.get_logger("pkgsentinel.engine")`` and
dotted event names; everything is routed through one stderr handler so that
machine-readable command output on stdout is never interleaved with logs.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

_QUIET_LOGGERS = {
    "uvicorn.access": "WARNING",
    "uvicorn.error": "INFO",
    "httpx": "WARNING",
    "asyncio": "WARNING",
}


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging.

    Environment:
        PKGSENTINEL_LOG_LEVEL  — level for pkgsentinel loggers (default: WARNING)
        PKGSENTINEL_LOG_FORMAT — console | json (default: console)

    *level* (``--verbose`` passes ``"DEBUG"``) overrides the environment.
    """
    log_level = (level or os.environ.get("PKGSENTINEL_LOG_LEVEL") or "WARNING").upper()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {name: {"level": lvl} for name, lvl in _QUIET_LOGGERS.items()}
    loggers["pkgsentinel"] = {"level": log_level}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(os.environ.get("PKGSENTINEL_LOG_FORMAT", "console").lower()),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": loggers,
        }
    )
