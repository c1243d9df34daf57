"""Logging setup for installment-gen.

Workflows pass document context with ``extra=``, for example
``logger.info("...", extra={"agreement_id": agreement.agreement_id})``.
Both formatters render the fields listed in ``CONTEXT_FIELDS`` next to the
message; other ``extra`` keys are left alone.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

CONTEXT_FIELDS = (
    "agreement_id",
    "agreement_number",
    "numbering_key",
    "first_invoice_number",
    "last_invoice_number",
    "invoice_count",
)


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the document context attached to a log record."""
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for installment-gen.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = ContextFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("installment_gen").setLevel(log_level)

    # Kafka delivery chatter and Faker provider loading
    logging.getLogger("confluent_kafka").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)


class ContextFormatter(logging.Formatter):
    """Text formatter that appends document context as ``key=value`` pairs.

    ``Created project agreement P-AGR-0001 for client c-1 [agreement_id=agr-1]``
    """

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = super().formatMessage(record)
        context = record_context(record)
        if not context:
            return message
        pairs = " ".join(f"{name}={value}" for name, value in context.items())
        return f"{message} [{pairs}]"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with document context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(record_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)
