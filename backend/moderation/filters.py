"""
Search and facet filtering over the moderation working set.

Everything here is pure: functions take a sequence of ideas and return a new
list, never touching the input. The same functions back the admin API's
server-side filtering and the in-memory moderation queue.
"""

import enum
from collections.abc import Iterable, Sequence
from typing import Optional

from models.schemas import Idea

ALL_CATEGORIES = "all"


class FeaturedFilter(str, enum.Enum):
    ALL = "all"
    FEATURED = "featured"
    STANDARD = "standard"


def normalize_search_term(term: Optional[str]) -> str:
    """Trim and lower-case a search term; None becomes empty."""
    return (term or "").strip().lower()


def searchable_fields(idea: Idea) -> list[Optional[str]]:
    """
    Fields a search term is matched against, in display order.

    Absent fields come back as None and are skipped by the matcher.
    """
    author = idea.author
    return [
        idea.title,
        idea.problem_statement,
        idea.solution,
        author.full_name if author else None,
        author.email if author else None,
        idea.category,
        " ".join(idea.tags or []),
    ]


def matches_search(idea: Idea, normalized_term: str) -> bool:
    """True if the term is empty or a substring of any present field."""
    if not normalized_term:
        return True
    return any(
        normalized_term in field.lower()
        for field in searchable_fields(idea)
        if field
    )


def matches_category(idea: Idea, category_filter: str) -> bool:
    """True for "all", otherwise case-insensitive equality with the category."""
    if category_filter == ALL_CATEGORIES:
        return True
    return (idea.category or "").lower() == category_filter.lower()


def matches_featured(idea: Idea, featured_filter: FeaturedFilter | str) -> bool:
    """
    Featured facet.

    Raises:
        ValueError: If the filter is not all/featured/standard.
    """
    featured_filter = FeaturedFilter(featured_filter)
    if featured_filter == FeaturedFilter.ALL:
        return True
    if featured_filter == FeaturedFilter.FEATURED:
        return idea.is_featured
    return not idea.is_featured


def filter_ideas(
    ideas: Iterable[Idea],
    search_term: Optional[str] = "",
    category_filter: str = ALL_CATEGORIES,
    featured_filter: FeaturedFilter | str = FeaturedFilter.ALL,
) -> list[Idea]:
    """
    Return the ideas matching all three predicates, in their original order.

    Args:
        ideas: Working set
        search_term: Free text; trimmed and lower-cased before matching
        category_filter: Category label or "all"
        featured_filter: "all", "featured" or "standard"

    Returns:
        New list; the input is not modified
    """
    term = normalize_search_term(search_term)
    featured_filter = FeaturedFilter(featured_filter)
    return [
        idea
        for idea in ideas
        if matches_search(idea, term)
        and matches_category(idea, category_filter)
        and matches_featured(idea, featured_filter)
    ]


def derive_categories(ideas: Sequence[Idea]) -> list[str]:
    """Distinct non-empty categories, case-sensitive, sorted ascending."""
    return sorted({idea.category for idea in ideas if idea.category})
