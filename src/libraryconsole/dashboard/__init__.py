"""Dashboard, activity feed and audit log."""

from .schemas import (
    Activity,
    ActivityType,
    AuditLog,
    AuditUser,
    DashboardSummary,
    MonthlyLending,
)
from .summary import DashboardLoader

__all__ = [
    "Activity",
    "ActivityType",
    "AuditLog",
    "AuditUser",
    "DashboardSummary",
    "MonthlyLending",
    "DashboardLoader",
]
