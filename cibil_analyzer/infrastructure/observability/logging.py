"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from cibil_analyzer.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
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


def log_assessment(
    request_id: str,
    user_id: str,
    score: int,
    risk_tier: str,
    duration_ms: float,
    step: str = "assessment_complete",
) -> None:
    """Log structured assessment outcome for analysis"""
    logging.info(
        "Assessment completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": step,
            "score": score,
            "risk_tier": risk_tier,
            "duration_ms": duration_ms,
        },
    )


def log_auth_event(request_id: str, step: str, outcome: str, user_id: Optional[str] = None) -> None:
    """Log an auth step; never includes passwords, codes or tokens"""
    logging.info(
        "Auth event",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": step,
            "outcome": outcome,
        },
    )
