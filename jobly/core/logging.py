import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from jobly.core.config import settings

# Correlation id of the request being served, set by CorrelationIdMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
}


class JoblyJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record, stamped with the service, environment and request id."""

    def __init__(self, *args, service: str = "jobly", environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service
        log_record["env"] = self.environment

        request_id = request_id_var.get()
        if request_id:
            log_record["request_id"] = request_id


def setup_logging(level: Optional[str] = None) -> None:
    """Install the JSON handler on the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    if not any(isinstance(h.formatter, JoblyJsonFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            JoblyJsonFormatter(
                "%(timestamp) %(level) %(name) %(message)",
                service=settings.app_name,
                environment=settings.environment,
            )
        )
        root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
