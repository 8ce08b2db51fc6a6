import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

# Correlation id of the request being served, set by CorrelationIdMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_FORMAT = "%(timestamp) %(level) %(name) %(message)"


class PayStreamJsonFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per line. Payment context passed through ``extra=``
    (company_id, payment_id, tx_hash, counts) lands as top-level keys.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id


def setup_logging(level: str = "INFO"):
    root = logging.getLogger()
    # Re-imports (tests, reloads) must not stack handlers
    for handler in list(root.handlers):
        if isinstance(handler.formatter, PayStreamJsonFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(PayStreamJsonFormatter(LOG_FORMAT, static_fields={"service": "paystream"}))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
