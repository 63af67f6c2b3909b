"""Text and category filtering of occurrences."""

from collections.abc import Collection, Iterable

from .model import Category, Occurrence


def search_text(occurrence: Occurrence) -> str:
    """Return the lower-cased text a query is matched against."""
    return " ".join(
        (
            occurrence.title,
            " ".join(occurrence.tags),
            occurrence.location or "",
            occurrence.notes or "",
        )
    ).lower()


def filter_occurrences(
    occurrences: Iterable[Occurrence],
    query: str | None = None,
    categories: Collection[Category] | None = None,
) -> list[Occurrence]:
    """Return the occurrences matching `query` and `categories`, in input order.

    A blank query matches everything. A non-empty `categories` collection is
    an allow-list; occurrences without a category never pass it.
    """
    needle = (query or "").strip().lower()
    allowed = frozenset(categories or ())
    return [
        occurrence
        for occurrence in occurrences
        if (not allowed or occurrence.category in allowed)
        and (not needle or needle in search_text(occurrence))
    ]
