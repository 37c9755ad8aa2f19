"""Sidebar navigation builder.

Groups the tutorials of one category by difficulty for the sidebar shown next
to a tutorial. Groups appear in the order their difficulty is first seen in
the input, not in canonical Beginner -> Advanced order.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypedDict

from tutorialhub.core.content import TutorialSummary
from tutorialhub.core.text import difficulty_color
from tutorialhub.core.types import Difficulty


class SidebarItemDict(TypedDict):
    """Dictionary representation of a sidebar item."""

    id: str
    title: str
    slug: str
    category: str
    difficulty: str
    isActive: bool


@dataclass(frozen=True)
class SidebarItem:
    """One tutorial link in the sidebar."""

    summary: TutorialSummary
    is_active: bool

    @property
    def slug(self) -> str:
        return self.summary.slug

    @property
    def href(self) -> str:
        """Link target of the item."""
        return f"/tutorials/{self.summary.category}/{self.summary.slug}"

    def to_dict(self) -> SidebarItemDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.summary.id,
            "title": self.summary.title,
            "slug": self.summary.slug,
            "category": self.summary.category,
            "difficulty": self.summary.difficulty.value,
            "isActive": self.is_active,
        }


@dataclass
class SidebarGroup:
    """Tutorials of one difficulty tier, in input order."""

    difficulty: Difficulty
    items: list[SidebarItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of tutorials in the group."""
        return len(self.items)

    @property
    def color(self) -> str:
        """Display color token of the group heading."""
        return difficulty_color(self.difficulty.value)

    def to_dict(self) -> list[SidebarItemDict]:
        """Convert to list of item dictionaries for JSON serialization."""
        return [item.to_dict() for item in self.items]


def group_by_difficulty(
    summaries: Iterable[TutorialSummary],
    active_slug: str,
) -> dict[Difficulty, SidebarGroup]:
    """Partition summaries into difficulty groups.

    Single pass over the input: each summary is appended to the group of its
    difficulty, created on first encounter.

    Args:
        summaries: Tutorials of one category in store order
        active_slug: Slug of the tutorial being viewed

    Returns:
        Groups keyed by difficulty, in first-seen order
    """
    groups: dict[Difficulty, SidebarGroup] = {}
    for summary in summaries:
        group = groups.get(summary.difficulty)
        if group is None:
            group = SidebarGroup(difficulty=summary.difficulty)
            groups[summary.difficulty] = group
        group.items.append(SidebarItem(summary=summary, is_active=summary.slug == active_slug))
    return groups


def groups_to_dict(groups: dict[Difficulty, SidebarGroup]) -> dict[str, list[SidebarItemDict]]:
    """Convert grouped sidebar to dictionary, preserving group order."""
    return {difficulty.value: group.to_dict() for difficulty, group in groups.items()}
