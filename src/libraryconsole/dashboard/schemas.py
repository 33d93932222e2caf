"""Pydantic schemas for the dashboard, activity feed and audit log."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityType(str, Enum):
    """Kind of recent-activity entry."""

    LEND = "LEND"
    RETURN = "RETURN"
    READER = "READER"
    BOOK = "BOOK"
    OVERDUE = "OVERDUE"


class Activity(BaseModel):
    """One entry of the recent-activity feed."""

    type: ActivityType = ActivityType.LEND
    message: str = ""
    timestamp: datetime

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_lend(cls, v):
        """The feed shows unrecognised types as lendings."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v in ActivityType.__members__:
                return v
        return ActivityType.LEND


class AuditUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None


class AuditLog(BaseModel):
    """One audit trail entry."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    timestamp: datetime
    user: Optional[AuditUser] = None
    action: str
    entity: str = ""
    description: Optional[str] = None

    @property
    def user_name(self) -> str:
        return (self.user.name if self.user else None) or "Unknown"


class MonthlyLending(BaseModel):
    """Lending count for one month of the summary series."""

    month: str
    count: int = Field(0, ge=0)

    @field_validator("month", mode="before")
    @classmethod
    def month_as_text(cls, v):
        return str(v)


class DashboardSummary(BaseModel):
    """Everything the dashboard shows.

    A count is None when its fetch failed; `errors` names each failure.
    """

    book_count: Optional[int] = None
    reader_count: Optional[int] = None
    lending_count: Optional[int] = None
    overdue_count: Optional[int] = None
    monthly_lendings: list[MonthlyLending] = Field(default_factory=list)
    recent_activities: list[Activity] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.errors
