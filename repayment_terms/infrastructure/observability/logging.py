"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from repayment_terms.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


logger = logging.getLogger("repayment_terms")


def log_schedule_generated(
    principal: str,
    frequency: str,
    interest_mode: str,
    installment_count: int,
    total_repayment: str,
    duration_ms: float,
) -> None:
    """Log a materialized amortization schedule"""
    logger.info(
        "Schedule generated",
        extra={
            "step": "schedule_generated",
            "principal": principal,
            "frequency": frequency,
            "interest_mode": interest_mode,
            "installment_count": installment_count,
            "total_repayment": total_repayment,
            "duration_ms": duration_ms,
        },
    )


def log_schedule_options(
    principal: str,
    source: str,
    option_count: int,
    duration_ms: float,
    warning: Optional[str] = None,
) -> None:
    """Log which schedule shapes were offered (income suggestions or presets)"""
    logger.info(
        "Schedule options computed",
        extra={
            "step": "schedule_options",
            "principal": principal,
            "source": source,
            "option_count": option_count,
            "warning": warning,
            "duration_ms": duration_ms,
        },
    )


def log_fee_calculated(amount: str, platform_fee: str, fee_type: str, duration_ms: float) -> None:
    """Log a platform fee breakdown"""
    logger.info(
        "Platform fee calculated",
        extra={
            "step": "fee_calculated",
            "amount": amount,
            "platform_fee": platform_fee,
            "fee_type": fee_type,
            "duration_ms": duration_ms,
        },
    )
