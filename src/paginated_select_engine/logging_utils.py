# src/paginated_select_engine/logging_utils.py
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, MutableMapping, Optional, Tuple

from pythonjsonlogger import jsonlogger

from .config import ENVIRONMENT, PAGINATED_SELECT_LOG_LEVEL, SERVICE_NAME

# Holds the id of the select instance whose task is currently running.
# Every task spawned by a select instance sets it on entry.
select_instance_var: ContextVar[str] = ContextVar("select_instance", default="<not-set>")


class SelectContextFilter(logging.Filter):
    """
    A logging filter that injects the current select instance id from a
    ContextVar into the log record.
    """
    def filter(self, record):
        """
        Attaches the select instance id to the log record.

        Args:
            record: The log record to be filtered.

        Returns:
            True to allow the record to be processed.
        """
        if not hasattr(record, "select_instance"):
            record.select_instance = select_instance_var.get()
        record.service = SERVICE_NAME
        record.environment = ENVIRONMENT
        return True


def setup_logging(level: Optional[str] = None):
    """
    Configures the root logger for structured JSON logging that carries the
    select instance id of every record.
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers to prevent duplicate logs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.setLevel((level or PAGINATED_SELECT_LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s %(service)s %(environment)s %(select_instance)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger"
        }
    )
    handler.setFormatter(formatter)
    handler.addFilter(SelectContextFilter())

    root_logger.addHandler(handler)


def generate_instance_id(prefix: str = "PS") -> str:
    """
    Generates a short id for a select instance.
    Args:
        prefix: A short code for the kind of control (e.g., 'PS').
    Returns:
        A formatted instance id string.
    """
    return f"{prefix}:{uuid.uuid4().hex[:5]}"


class DiagnosticLogger(logging.LoggerAdapter):
    """
    Logger adapter for per-instance diagnostics. Records are dropped unless the
    owning instance was created with diagnostics enabled, and every record is
    tagged with the instance id.
    """
    def __init__(self, logger: logging.Logger, instance_id: str, enabled: bool):
        super().__init__(logger, {"select_instance": instance_id})
        self.enabled = enabled

    def isEnabledFor(self, level: int) -> bool:
        return self.enabled and self.logger.isEnabledFor(level)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs
