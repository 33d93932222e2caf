"""Dashboard summary loading.

All six dashboard figures are fetched concurrently. Each fetch fails on its
own: the dashboard still shows whatever did load and names what did not.
"""

from typing import TYPE_CHECKING

from ..api.parallel import fetch_all
from .schemas import DashboardSummary

if TYPE_CHECKING:
    from ..api.services import Services

COUNT_FIELDS = {
    "books": "book_count",
    "readers": "reader_count",
    "lendings": "lending_count",
    "overdue": "overdue_count",
}


class DashboardLoader:
    """Builds a DashboardSummary from the backend services."""

    def __init__(self, services: "Services", max_workers: int = 4):
        self.services = services
        self.max_workers = max_workers

    def load(self) -> DashboardSummary:
        s = self.services
        results = fetch_all(
            {
                "books": s.books.count,
                "readers": s.readers.count,
                "lendings": s.lendings.count_total,
                "overdue": s.lendings.count_overdue,
                "monthly": s.lendings.monthly_summary,
                "activity": s.activity.recent,
            },
            max_workers=self.max_workers,
        )

        summary = DashboardSummary()
        for name, result in results.items():
            if not result.ok:
                summary.errors[name] = str(result.error)
            elif name in COUNT_FIELDS:
                setattr(summary, COUNT_FIELDS[name], result.value)
            elif name == "monthly":
                summary.monthly_lendings = result.value
            elif name == "activity":
                summary.recent_activities = result.value
        return summary
