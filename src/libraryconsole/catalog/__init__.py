"""Books, categories and readers."""

from .filters import email_domains, filter_books, filter_categories, filter_readers
from .schemas import (
    Book,
    BookCreate,
    BookUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    Reader,
    ReaderCreate,
    ReaderUpdate,
)

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "Reader",
    "ReaderCreate",
    "ReaderUpdate",
    "email_domains",
    "filter_books",
    "filter_categories",
    "filter_readers",
]
