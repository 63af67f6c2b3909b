"""Unit tests for text and category filtering."""

import pytest

from calgrid.domain.filtering import filter_occurrences, search_text
from calgrid.domain.model import Category
from tests.helpers.builders import build_occurrence

LECTURE = build_occurrence(
    id="lecture",
    title="Algorithms Lecture",
    tags=("cs", "exam"),
    category=Category.COLLEGE,
    location="Hall B",
)
GYM = build_occurrence(
    id="gym", title="Gym", category=Category.PERSONAL, notes="Bring towel"
)
UNFILED = build_occurrence(id="unfiled", title="Call plumber")
ALL = [LECTURE, GYM, UNFILED]


def test_search_text_joins_fields_lowercased():
    """Title, tags, location and notes are searchable."""
    assert search_text(LECTURE) == "algorithms lecture cs exam hall b "


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("lecture", ["lecture"]),
        ("EXAM", ["lecture"]),
        ("hall", ["lecture"]),
        ("towel", ["gym"]),
        ("nothing matches", []),
    ],
)
def test_query_matches_any_searchable_field(query, expected):
    """Queries are case-insensitive substring matches."""
    assert [o.id for o in filter_occurrences(ALL, query)] == expected


@pytest.mark.parametrize("query", [None, "", "   "])
def test_blank_query_matches_everything(query):
    """No query means no text filtering."""
    assert filter_occurrences(ALL, query) == ALL


def test_category_allow_list():
    """Only listed categories pass; uncategorized occurrences never do."""
    result = filter_occurrences(ALL, categories=[Category.PERSONAL, Category.OTHER])
    assert [o.id for o in result] == ["gym"]


def test_empty_category_list_matches_everything():
    """An empty allow-list disables category filtering."""
    assert filter_occurrences(ALL, categories=[]) == ALL


def test_query_and_categories_combine():
    """Both filters must match."""
    assert not filter_occurrences(ALL, "gym", [Category.COLLEGE])
    assert filter_occurrences(ALL, "gym", [Category.PERSONAL]) == [GYM]
