"""List filtering for the catalog views."""

from typing import Iterable, Optional

from .schemas import Book, Category, Reader


def filter_books(
    books: Iterable[Book],
    search: Optional[str] = None,
    category_id: Optional[str] = None,
) -> list[Book]:
    """Match title, author or ISBN, optionally within one category."""
    term = (search or "").strip().lower()
    results = []
    for book in books:
        if category_id and book.category_id != category_id:
            continue
        if term and not any(
            term in (value or "").lower()
            for value in (book.title, book.author, book.isbn)
        ):
            continue
        results.append(book)
    return results


def filter_categories(
    categories: Iterable[Category],
    search: Optional[str] = None,
) -> list[Category]:
    term = (search or "").strip().lower()
    return [
        c for c in categories
        if not term
        or term in c.name.lower()
        or term in (c.description or "").lower()
    ]


def email_domains(readers: Iterable[Reader]) -> list[str]:
    """Distinct e-mail domains in first-seen order; malformed addresses are skipped."""
    domains: list[str] = []
    for reader in readers:
        domain = reader.email_domain
        if domain and domain not in domains:
            domains.append(domain)
    return domains


def filter_readers(
    readers: Iterable[Reader],
    search: Optional[str] = None,
    domain: Optional[str] = None,
) -> list[Reader]:
    """Match name or e-mail (case-insensitive) or phone, optionally by e-mail domain."""
    raw = (search or "").strip()
    term = raw.lower()
    results = []
    for reader in readers:
        if domain and not (reader.email or "").endswith("@" + domain):
            continue
        if term and not (
            term in reader.name.lower()
            or term in (reader.email or "").lower()
            or raw in (reader.phone or "")
        ):
            continue
        results.append(reader)
    return results
