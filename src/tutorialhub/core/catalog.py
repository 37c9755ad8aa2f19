"""Catalog queries and listing pages.

Category listings with pagination, the home page, and the filter/search
helpers used by them.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from tutorialhub.core.content import Category, ContentStore, Tutorial
from tutorialhub.core.resolver import NotFound

TUTORIALS_PER_PAGE = 12


def filter_by_category(tutorials: Iterable[Tutorial], category: str) -> list[Tutorial]:
    """Tutorials of a category, compared case-insensitively."""
    wanted = category.lower()
    return [tutorial for tutorial in tutorials if tutorial.category.lower() == wanted]


def filter_by_difficulty(tutorials: Iterable[Tutorial], difficulty: str) -> list[Tutorial]:
    """Tutorials of a difficulty tier, compared case-insensitively."""
    wanted = difficulty.lower()
    return [tutorial for tutorial in tutorials if tutorial.difficulty.value.lower() == wanted]


def search_tutorials(tutorials: Iterable[Tutorial], query: str) -> list[Tutorial]:
    """Tutorials whose title, description or any tag contains the query."""
    needle = query.lower()
    return [
        tutorial
        for tutorial in tutorials
        if needle in tutorial.title.lower()
        or needle in tutorial.description.lower()
        or any(needle in tag.lower() for tag in tutorial.tags)
    ]


def sort_by_date(tutorials: Iterable[Tutorial]) -> list[Tutorial]:
    """Tutorials ordered newest first; ties keep their input order."""
    return sorted(tutorials, key=lambda tutorial: tutorial.published_at, reverse=True)


def featured_tutorials(tutorials: Iterable[Tutorial]) -> list[Tutorial]:
    return [tutorial for tutorial in tutorials if tutorial.featured]


def related_tutorials(tutorials: Iterable[Tutorial], current: Tutorial, limit: int = 3) -> list[Tutorial]:
    """Tutorials sharing tags with the current one.

    Args:
        tutorials: Candidate tutorials
        current: Tutorial being viewed (excluded from the result)
        limit: Maximum number of results

    Returns:
        Tutorials with at least one shared tag, most shared tags first
    """
    current_tags = set(current.tags)
    scored = []
    for tutorial in tutorials:
        if tutorial.id == current.id:
            continue
        match_count = sum(1 for tag in tutorial.tags if tag in current_tags)
        if match_count > 0:
            scored.append((match_count, tutorial))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [tutorial for _, tutorial in scored[:limit]]


@dataclass(frozen=True)
class CategoryPage:
    """One page of a category listing."""

    category: Category
    tutorials: list[Tutorial]
    total_tutorials: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_tutorials / self.per_page))

    @property
    def first_index(self) -> int:
        """1-based index of the first tutorial shown (0 when empty)."""
        if self.total_tutorials == 0:
            return 0
        return (self.page - 1) * self.per_page + 1

    @property
    def last_index(self) -> int:
        """1-based index of the last tutorial shown."""
        return min(self.page * self.per_page, self.total_tutorials)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "category": self.category.to_dict(),
            "tutorials": [tutorial.to_dict(include_content=False) for tutorial in self.tutorials],
            "totalTutorials": self.total_tutorials,
            "pagination": {
                "page": self.page,
                "perPage": self.per_page,
                "totalPages": self.total_pages,
                "firstIndex": self.first_index,
                "lastIndex": self.last_index,
            },
        }


def build_category_page(
    store: ContentStore,
    category: str,
    page: int = 1,
    per_page: int = TUTORIALS_PER_PAGE,
) -> CategoryPage | NotFound:
    """Build one page of a category listing.

    Returns:
        CategoryPage, or NotFound for unknown categories and out-of-range pages
    """
    record = store.get_category(category)
    if record is None:
        return NotFound(category=category, slug="")

    tutorials = store.in_category(category)
    total_pages = max(1, math.ceil(len(tutorials) / per_page))
    if page < 1 or page > total_pages:
        return NotFound(category=category, slug=f"page/{page}")

    start = (page - 1) * per_page
    return CategoryPage(
        category=record,
        tutorials=tutorials[start : start + per_page],
        total_tutorials=len(tutorials),
        page=page,
        per_page=per_page,
    )


@dataclass(frozen=True)
class HomePage:
    """Featured tutorials and category overview."""

    featured: list[Tutorial]
    categories: list[tuple[Category, int]]

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "featuredTutorials": [tutorial.to_dict(include_content=False) for tutorial in self.featured],
            "categories": [
                {**category.to_dict(), "tutorialCount": count} for category, count in self.categories
            ],
        }


def build_home_page(store: ContentStore) -> HomePage:
    tutorials = store.tutorials()
    return HomePage(
        featured=sort_by_date(featured_tutorials(tutorials)),
        categories=[(category, len(store.in_category(category.slug))) for category in store.categories()],
    )
