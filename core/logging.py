"""
Structured logging for the readiness scoring engine

JSON lines in deployed environments, plain text locally. Loggers returned by
``get_logger`` carry a fixed context (domain, component) that is attached to
every record and surfaces as top-level keys in JSON output.
"""
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from core.config import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "alembic.runtime.migration")


class ReadinessJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping app and environment on every record"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault("timestamp", datetime.utcnow().isoformat())
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["app"] = settings.app_name
        log_record["environment"] = settings.environment

        if record.exc_info and "exception" not in log_record:
            log_record["exception"] = self.formatException(record.exc_info)


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return ReadinessJsonFormatter(JSON_FORMAT, timestamp=True)
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Install a single stdout handler on the root logger

    Args:
        level: Log level name; defaults to ``settings.log_level``
        log_format: ``json`` or ``text``; defaults to ``settings.log_format``
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper()))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(log_format or settings.log_format))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.database_echo else logging.WARNING)


class ContextLogger(logging.LoggerAdapter):
    """Adapter merging its bound context into each call's ``extra``"""

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        super().__init__(logger, context or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def bind(self, **context) -> "ContextLogger":
        """Logger with extra context layered over this one's"""
        return ContextLogger(self.logger, {**self.extra, **context})


def get_logger(name: str, **context) -> ContextLogger:
    """
    Logger for ``name`` carrying ``context`` on every record

    Example:
        logger = get_logger("rescore_processor", domain="batch_runner")
        logger.info("Rescore finished", extra={"config_version": 3})
    """
    return ContextLogger(logging.getLogger(name), context)


configure_logging()
