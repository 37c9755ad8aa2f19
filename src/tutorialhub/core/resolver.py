"""Route resolution.

Resolves a (category, slug) route to a tutorial. The not-found outcome is a
value, not an exception: callers branch on the result type.
"""

from dataclasses import dataclass

from tutorialhub.core.content import ContentStore, Tutorial


@dataclass(frozen=True)
class Found:
    """Route resolved to a tutorial."""

    tutorial: Tutorial


@dataclass(frozen=True)
class NotFound:
    """Route has no corresponding content.

    Unknown categories and unknown slugs are not distinguished.
    """

    category: str
    slug: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"error": "Page not found", "path": f"/tutorials/{self.category}/{self.slug}"}


Resolution = Found | NotFound


class ContentResolver:
    """Looks up tutorials by slug.

    Slug is the sole content key. With strict_category enabled the stored
    category must also equal the requested one; otherwise any category
    segment resolves a known slug.
    """

    def __init__(self, store: ContentStore, *, strict_category: bool = True) -> None:
        self._store = store
        self._strict_category = strict_category

    @property
    def strict_category(self) -> bool:
        """Whether the requested category is cross-checked."""
        return self._strict_category

    def resolve(self, category: str, slug: str) -> Resolution:
        """Resolve a route.

        Args:
            category: Category path segment (untrusted)
            slug: Slug path segment (untrusted)

        Returns:
            Found with the tutorial, or NotFound
        """
        if not category or not slug:
            return NotFound(category=category, slug=slug)

        tutorial = self._store.get(slug)
        if tutorial is None:
            return NotFound(category=category, slug=slug)

        if self._strict_category and tutorial.category != category:
            return NotFound(category=category, slug=slug)

        return Found(tutorial=tutorial)
