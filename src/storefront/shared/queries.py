"""Helpers for reading whole result sets and pages out of Protean querysets."""

from math import ceil

_BATCH_SIZE = 100


def fetch_all(queryset, batch_size: int = _BATCH_SIZE) -> list:
    """Return every record matching ``queryset``, reading it a batch at a time.

    Querysets are capped at a default limit, so a single ``.all()`` cannot be
    trusted to return the complete set.
    """
    records = []
    offset = 0
    while True:
        batch = queryset.offset(offset).limit(batch_size).all().items
        records.extend(batch)
        if len(batch) < batch_size:
            return records
        offset += batch_size


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Return the ``(start, stop)`` slice for a 1-based page."""
    start = (page - 1) * page_size
    return start, start + page_size


def total_pages(total_count: int, page_size: int) -> int:
    return ceil(total_count / page_size) if page_size else 0


def fetch_page(queryset, page: int, page_size: int) -> tuple[list, int]:
    """Read one 1-based page from ``queryset``; returns ``(items, total_count)``."""
    start, _ = page_bounds(page, page_size)
    results = queryset.offset(start).limit(page_size).all()
    return results.items, results.total


def paginate(records: list, page: int, page_size: int) -> tuple[list, int]:
    """Slice an in-memory list to a page; returns ``(items, total_count)``."""
    start, stop = page_bounds(page, page_size)
    return records[start:stop], len(records)
