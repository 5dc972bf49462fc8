"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from uvwie_revenue.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on stdout"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_dues_assessment(
    request_id: str,
    shop_id: str,
    assessment_year: int,
    total_due: str,
    penalised_payments: int,
    duration_ms: float,
) -> None:
    """Log the outcome of a total-due calculation"""
    logging.info(
        "Dues assessed",
        extra={
            "request_id": request_id,
            "shop_id": shop_id,
            "step": "dues_assessed",
            "assessment_year": assessment_year,
            "total_due": total_due,
            "penalised_payments": penalised_payments,
            "duration_ms": duration_ms,
        },
    )


def log_compliance_evaluation(
    request_id: str,
    shop_id: str,
    status: str,
    persisted: bool,
    duration_ms: float,
) -> None:
    """Log a compliance classification and whether it was written back"""
    logging.info(
        "Compliance evaluated",
        extra={
            "request_id": request_id,
            "shop_id": shop_id,
            "step": "compliance_evaluated",
            "compliance_status": status,
            "persisted": persisted,
            "duration_ms": duration_ms,
        },
    )


def log_penalty_applied(
    request_id: str,
    payment_id: str,
    days_overdue: int,
    penalty_amount: str,
    duration_ms: float,
) -> None:
    logging.info(
        "Penalty applied",
        extra={
            "request_id": request_id,
            "payment_id": payment_id,
            "step": "penalty_applied",
            "days_overdue": days_overdue,
            "penalty_amount": penalty_amount,
            "duration_ms": duration_ms,
        },
    )
