"""
Task status rules.

Every status comparison in the service layer goes through `is_completed` and
`effective_status` so the overdue override lives in exactly one place:

  - Completed is terminal with respect to the override
  - a due date in the past forces Overdue
  - a stored Overdue whose due date moved forward reads as Open
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from backoffice.db.models import TaskStatus
from backoffice.db.schemas import TaskResponse


def _label(status: Any) -> str:
    return str(getattr(status, "value", status) or "").strip().lower()


def is_completed(status: Any) -> bool:
    return _label(status) == TaskStatus.completed.value.lower()


def is_past_due(due_date: Optional[date], today: date) -> bool:
    return due_date is not None and due_date < today


def derive_status(status: Any, due_date: Optional[date], today: date) -> TaskStatus:
    if is_completed(status):
        return TaskStatus.completed
    if is_past_due(due_date, today):
        return TaskStatus.overdue
    label = _label(status)
    for member in TaskStatus:
        if member.value.lower() == label and member is not TaskStatus.overdue:
            return member
    return TaskStatus.open


def effective_status(task: TaskResponse, today: date) -> TaskStatus:
    return derive_status(task.status, task.due_date, today)


def with_effective_status(task: TaskResponse, today: date) -> TaskResponse:
    status = effective_status(task, today)
    if status == task.status:
        return task
    return task.model_copy(update={"status": status})


def apply_write_rules(
    existing: Optional[TaskResponse],
    changes: Dict[str, Any],
    now: datetime,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Resolve the stored status and completion stamp for a create (existing is
    None) or an update. Returns a copy of `changes` with `status` always set
    and `completed_at` set whenever it has to change.
    """
    fields = dict(changes)
    requested = fields.get("status")
    if requested is None:
        requested = existing.status if existing else TaskStatus.open
    due_date = fields["due_date"] if "due_date" in fields else (existing.due_date if existing else None)

    status = derive_status(requested, due_date, today or now.date())
    fields["status"] = status

    was_completed = existing is not None and is_completed(existing.status)
    if is_completed(status):
        if not was_completed:
            fields["completed_at"] = now
        else:
            fields.pop("completed_at", None)
    else:
        fields["completed_at"] = None
    return fields


def completed_transition(before: Optional[TaskResponse], after: TaskResponse) -> bool:
    """True when a write moved the task into Completed."""
    was_completed = before is not None and is_completed(before.status)
    return is_completed(after.status) and not was_completed
