"""Backend service access.

Provides the HTTP client, typed service facades and concurrent fetching.
"""

from .client import (
    BackendAuthError,
    BackendClient,
    BackendConflictError,
    BackendError,
    BackendNotFoundError,
    BackendResponseError,
)
from .parallel import FetchResult, fetch_all
from .services import (
    ActivityService,
    AuditService,
    AuthService,
    BookService,
    CategoryService,
    EmailService,
    LendingService,
    ReaderService,
    Services,
)

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendAuthError",
    "BackendNotFoundError",
    "BackendConflictError",
    "BackendResponseError",
    "FetchResult",
    "fetch_all",
    "Services",
    "AuthService",
    "BookService",
    "CategoryService",
    "ReaderService",
    "LendingService",
    "AuditService",
    "ActivityService",
    "EmailService",
]
