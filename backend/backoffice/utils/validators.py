"""
Custom validators
"""
from typing import Optional

from backoffice.db.models import PaymentMethod, TaskPriority, TaskStatus

_STATUS_ALIASES = {
    "open": TaskStatus.open,
    "pending": TaskStatus.open,
    "in progress": TaskStatus.in_progress,
    "in_progress": TaskStatus.in_progress,
    "completed": TaskStatus.completed,
    "overdue": TaskStatus.overdue,
}

_PRIORITY_ALIASES = {
    "low": TaskPriority.low,
    "medium": TaskPriority.medium,
    "normal": TaskPriority.medium,
    "high": TaskPriority.high,
    "urgent": TaskPriority.urgent,
}

_PAYMENT_METHOD_ALIASES = {
    "cash": PaymentMethod.cash,
    "bank transfer": PaymentMethod.bank_transfer,
    "bank_transfer": PaymentMethod.bank_transfer,
    "upi": PaymentMethod.upi,
    "card": PaymentMethod.card,
}


def _lookup(value, aliases: dict, label: str):
    if isinstance(value, (TaskStatus, TaskPriority, PaymentMethod)):
        return value
    key = str(value or "").strip().lower()
    if key not in aliases:
        allowed = ", ".join(sorted({member.value for member in aliases.values()}))
        raise ValueError(f"Invalid {label} '{value}'. Expected one of: {allowed}")
    return aliases[key]


def parse_task_status(value, allow_overdue: bool = False) -> TaskStatus:
    """
    Normalise a caller-supplied status label.
    Accepts any casing plus the legacy "pending"/"in_progress" spellings.
    """
    status = _lookup(value, _STATUS_ALIASES, "status")
    if status == TaskStatus.overdue and not allow_overdue:
        raise ValueError("Overdue is derived from the due date and cannot be set directly")
    return status


def parse_task_priority(value) -> TaskPriority:
    """Normalise a priority label ("Normal" is the legacy name for Medium)"""
    return _lookup(value, _PRIORITY_ALIASES, "priority")


def parse_payment_method(value) -> PaymentMethod:
    return _lookup(value, _PAYMENT_METHOD_ALIASES, "payment method")


def blank_to_none(value) -> Optional[str]:
    """Form selects submit "" for "no selection"."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
