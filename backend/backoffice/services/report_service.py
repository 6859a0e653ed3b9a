"""
Reporting: per-employee / per-customer task summaries and dashboard stats.
"""
from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from backoffice.core.logger import logger
from backoffice.db.models import TaskStatus
from backoffice.db.schemas import (
    CustomerReportRow,
    DashboardStats,
    EmployeeReportRow,
    GroupSummary,
    TaskResponse,
    UpcomingHearing,
)
from backoffice.services.task_lifecycle import effective_status, is_completed
from backoffice.store.base import Store, StoreError

UPCOMING_HEARINGS_LIMIT = 5


def completion_rate(completed: int, pending: int) -> int:
    total = completed + pending
    if total == 0:
        return 0
    return round(completed / total * 100)


def summarize(
    tasks: Iterable[TaskResponse],
    group_by: str,
    known_ids: Iterable[str],
    include_idle: bool = False,
) -> Dict[str, GroupSummary]:
    """
    Group tasks by the foreign key named `group_by`. Tasks without the key,
    or pointing at an id outside `known_ids`, are left out.
    """
    known = set(known_ids)
    totals: Dict[str, dict] = {}
    if include_idle:
        totals = {key: {"billing": 0.0, "paid": 0.0, "completed": 0, "pending": 0} for key in known}

    for task in tasks:
        key = getattr(task, group_by)
        if not key or key not in known:
            continue
        group = totals.setdefault(key, {"billing": 0.0, "paid": 0.0, "completed": 0, "pending": 0})
        group["billing"] += task.billing_amount or 0
        group["paid"] += task.paid_amount or 0
        if is_completed(task.status):
            group["completed"] += 1
        else:
            group["pending"] += 1

    return {
        key: GroupSummary(
            total_billing=group["billing"],
            total_paid=group["paid"],
            balance_due=group["billing"] - group["paid"],
            completed_tasks=group["completed"],
            pending_tasks=group["pending"],
            completion_rate=completion_rate(group["completed"], group["pending"]),
        )
        for key, group in totals.items()
    }


class ReportService:
    def __init__(self, store: Store, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    def _tasks(self, from_date: Optional[date], to_date: Optional[date]) -> List[TaskResponse]:
        ranges = None
        if from_date or to_date:
            ranges = {"due_date": (from_date, to_date)}
        return self.store.tasks.list(None, ranges)

    def employee_report(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        include_idle: bool = False,
    ) -> List[EmployeeReportRow]:
        try:
            employees = {e.id: e.full_name for e in self.store.employees.list()}
            groups = summarize(self._tasks(from_date, to_date), "assign_to_employee", employees, include_idle)
        except StoreError as e:
            logger.error(f"Failed to build employee report: {e.message}")
            return []
        return [
            EmployeeReportRow(employee_id=key, employee=employees[key], **summary.model_dump())
            for key, summary in groups.items()
        ]

    def customer_report(
        self,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        include_idle: bool = False,
    ) -> List[CustomerReportRow]:
        try:
            customers = {c.id: c.company_name for c in self.store.customers.list()}
            groups = summarize(self._tasks(from_date, to_date), "assign_to_customer", customers, include_idle)
        except StoreError as e:
            logger.error(f"Failed to build customer report: {e.message}")
            return []
        return [
            CustomerReportRow(customer_id=key, customer=customers[key], **summary.model_dump())
            for key, summary in groups.items()
        ]

    def dashboard_stats(self) -> DashboardStats:
        today = self.today()
        try:
            tasks = self.store.tasks.list()
            invoices = self.store.invoices.list()
            hearings = self.store.hearings.list()
            stats = DashboardStats(
                total_employees=self.store.employees.count(),
                total_customers=self.store.customers.count(),
                total_invoices=len(invoices),
                total_cases=self.store.legal_cases.count(),
                total_hearings=len(hearings),
            )
            upcoming = sorted((h for h in hearings if h.hearing_date >= today), key=lambda h: h.hearing_date)
            upcoming = upcoming[:UPCOMING_HEARINGS_LIMIT]
            cases = {}
            for hearing in upcoming:
                if hearing.legal_case_id not in cases:
                    cases[hearing.legal_case_id] = self.store.legal_cases.get(hearing.legal_case_id)
        except StoreError as e:
            logger.error(f"Failed to compute dashboard stats: {e.message}")
            return DashboardStats()

        statuses = [effective_status(task, today) for task in tasks]
        completed = sum(1 for s in statuses if is_completed(s))
        stats.tasks_in_progress = sum(1 for s in statuses if s == TaskStatus.in_progress)
        stats.tasks_completed = completed
        stats.tasks_overdue = sum(1 for s in statuses if s == TaskStatus.overdue)
        stats.completion_rate = completion_rate(completed, len(statuses) - completed)

        stats.total_paid = sum(inv.paid_amount or 0 for inv in invoices)
        stats.total_outstanding = sum((inv.total_amount or 0) - (inv.paid_amount or 0) for inv in invoices)

        stats.upcoming_hearings = [
            UpcomingHearing(
                id=h.id,
                hearing_date=h.hearing_date,
                legal_case_id=h.legal_case_id,
                case_number=cases[h.legal_case_id].case_number if cases[h.legal_case_id] else None,
                court_name=cases[h.legal_case_id].court_name if cases[h.legal_case_id] else None,
            )
            for h in upcoming
        ]
        return stats
