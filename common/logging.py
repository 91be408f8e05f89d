"""
JSON logging for the Script Generation API.

Each record carries the id and path of the request being served, plus
whatever was passed through ``extra=``.
"""

import json
import logging
import sys
import uuid
from typing import Optional, Dict, Any
from contextvars import ContextVar
from datetime import datetime, timezone

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
request_path_var: ContextVar[Optional[str]] = ContextVar('request_path', default=None)

LOG_FORMATS = ("structured", "simple")
SIMPLE_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'
QUIET_LOGGERS = ("uvicorn", "fastapi", "httpx", "httpcore", "postgrest", "hpack")

# LogRecord attributes; everything else on a record came from `extra=`
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id
            entry["request_path"] = request_path_var.get()

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        entry.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(entry, default=str, ensure_ascii=False)


class RequestContextLogger:
    """Binds a request id (generated when missing) and path to every record logged inside the block."""

    def __init__(self, request_id: Optional[str] = None, path: Optional[str] = None):
        self.request_id = request_id or str(uuid.uuid4())
        self.path = path
        self._tokens = []

    def __enter__(self):
        self._tokens = [request_id_var.set(self.request_id), request_path_var.set(self.path)]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for token in reversed(self._tokens):
            token.var.reset(token)
        self._tokens = []


def setup_logging(
    level: str = "INFO",
    format_type: str = "structured",
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'structured' for JSON lines, 'simple' for plain text
        log_file: also write records to this file
    """
    if format_type not in LOG_FORMATS:
        raise ValueError(f"format_type must be one of {', '.join(LOG_FORMATS)}")

    formatter = StructuredFormatter() if format_type == "structured" else logging.Formatter(SIMPLE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_performance(operation: str, duration_ms: float, success: bool = True, **kwargs) -> None:
    """Timing of a service operation."""
    get_logger("performance").info(
        f"{operation} took {duration_ms:.1f}ms",
        extra={"operation": operation, "duration_ms": round(duration_ms, 3), "success": success, **kwargs}
    )


def log_security_event(
    event_type: str,
    ip_address: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """Rejected search fields, suspicious paths and similar."""
    get_logger("security").warning(
        f"Security event: {event_type}",
        extra={"event_type": event_type, "ip_address": ip_address, "details": details or {}}
    )


def log_entity_event(
    entity_type: str,
    entity_id: Any,
    action: str,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """A project, script, scene or project type was created, changed or removed."""
    get_logger("entities").info(
        f"{entity_type} {entity_id} {action}",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "action": action,
            "user_id": user_id,
            "details": details or {},
        }
    )


def log_api_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None
) -> None:
    """Access log line for a served request."""
    level = logging.WARNING if status_code >= 500 else logging.INFO
    get_logger("api").log(
        level,
        f"{method} {path} {status_code}",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": round(duration_ms, 3),
            "ip_address": ip_address,
            "user_agent": user_agent,
        }
    )
