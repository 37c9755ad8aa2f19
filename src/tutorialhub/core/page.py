"""Tutorial page assembly.

Combines route resolution and sidebar grouping into the render model handed
to the presentation layer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from tutorialhub.core.catalog import related_tutorials
from tutorialhub.core.content import Category, ContentStore, Tutorial, TutorialSummary
from tutorialhub.core.resolver import ContentResolver, NotFound
from tutorialhub.core.sidebar import SidebarGroup, group_by_difficulty, groups_to_dict
from tutorialhub.core.types import Difficulty

Grouper = Callable[[Iterable[TutorialSummary], str], dict[Difficulty, SidebarGroup]]


@dataclass(frozen=True)
class SidebarState:
    """Open/closed state of the mobile sidebar.

    View state only: never persisted.
    """

    open: bool = False

    def toggle(self) -> SidebarState:
        return replace(self, open=not self.open)

    def close(self) -> SidebarState:
        return replace(self, open=False)


@dataclass(frozen=True)
class TutorialPage:
    """Render model of a tutorial page."""

    tutorial: Tutorial
    category: Category
    sidebar_groups: dict[Difficulty, SidebarGroup]
    related: list[Tutorial]
    sidebar_state: SidebarState = SidebarState()

    @property
    def sidebar_title(self) -> str:
        return f"{self.category.name} Tutorials"

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tutorial": self.tutorial.to_dict(),
            "sidebarGroups": groups_to_dict(self.sidebar_groups),
            "sidebar": {
                "title": self.sidebar_title,
                "open": self.sidebar_state.open,
                "groups": [
                    {"difficulty": group.difficulty.value, "count": group.count, "color": group.color}
                    for group in self.sidebar_groups.values()
                ],
            },
            "related": [tutorial.to_dict(include_content=False) for tutorial in self.related],
        }


class PageAssembler:
    """Builds tutorial page render models.

    Pure composition over the immutable store; safe to call from several
    threads at once.
    """

    def __init__(
        self,
        store: ContentStore,
        resolver: ContentResolver | None = None,
        *,
        grouper: Grouper = group_by_difficulty,
        related_limit: int = 3,
    ) -> None:
        self._store = store
        self._resolver = resolver if resolver is not None else ContentResolver(store)
        self._grouper = grouper
        self._related_limit = related_limit

    @property
    def resolver(self) -> ContentResolver:
        return self._resolver

    def assemble(self, category: str, slug: str) -> TutorialPage | NotFound:
        """Assemble the page for a route.

        Args:
            category: Category path segment
            slug: Slug path segment

        Returns:
            TutorialPage, or NotFound without grouping the sidebar
        """
        resolution = self._resolver.resolve(category, slug)
        if isinstance(resolution, NotFound):
            return resolution

        tutorial = resolution.tutorial
        # Sidebar follows the stored category, which only differs from the
        # requested one when strict_category is off.
        siblings = self._store.in_category(tutorial.category)
        groups = self._grouper([sibling.summary() for sibling in siblings], tutorial.slug)
        record = self._store.get_category(tutorial.category) or Category(
            slug=tutorial.category, name=tutorial.category.upper()
        )

        return TutorialPage(
            tutorial=tutorial,
            category=record,
            sidebar_groups=groups,
            related=related_tutorials(self._store.tutorials(), tutorial, self._related_limit),
        )
