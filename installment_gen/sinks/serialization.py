"""Shared serialization utilities for sinks."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from installment_gen.models.base import Event


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(v) for v in value]
    return value


def to_event(
    record: Any,
    event_type: str,
    subject_field: str,
    source: str = "installment-gen",
    event_time: datetime | None = None,
) -> Event:
    """Wrap a record in the standard event envelope.

    The event ID is ``<event_type>:<subject>`` so that re-publishing the
    same record yields the same ID.
    """
    data = to_dict(record)
    subject = str(data.get(subject_field, ""))
    return Event(
        event_id=f"{event_type}:{subject}",
        event_type=event_type,
        event_time=event_time or datetime.now(),
        source=source,
        subject=subject,
        data=data,
    )
