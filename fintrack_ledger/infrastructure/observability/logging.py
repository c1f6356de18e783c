"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter
from fintrack_ledger.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ledger_operation(
    operation: str,
    user_id: str,
    success: bool,
    duration_ms: float,
    resource_id: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    """Log structured outcome of a mutating ledger operation"""
    logging.info(
        "Ledger operation completed",
        extra={
            "operation": operation,
            "user_id": user_id,
            "outcome": "success" if success else "failure",
            "resource_id": resource_id,
            "error": error,
            "duration_ms": duration_ms,
        },
    )
