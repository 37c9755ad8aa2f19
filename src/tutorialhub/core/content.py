"""Content store and repository.

The repository reads a TOML manifest describing categories, tutorials and
(optionally) the explicit route list, and builds an immutable ContentStore
once. The store is keyed by slug and is safe to share between threads.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from types import MappingProxyType

from tutorialhub.core.text import calculate_read_time, generate_excerpt, is_url_segment
from tutorialhub.core.types import CategorySlug, Difficulty, RouteKey, Slug

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "tutorials.toml"


class ContentError(ValueError):
    """Raised when the content bundle is malformed."""


@dataclass(frozen=True)
class Tutorial:
    """One published tutorial.

    The content payload is opaque: it is carried through to the render model
    unchanged.
    """

    id: str
    title: str
    description: str
    content: str
    slug: Slug
    category: CategorySlug
    author: str
    read_time: str
    difficulty: Difficulty
    published_at: str
    tags: tuple[str, ...] = ()
    featured: bool = False

    @property
    def route(self) -> RouteKey:
        """Route key under which the tutorial is published."""
        return RouteKey(category=self.category, slug=self.slug)

    def summary(self) -> TutorialSummary:
        """Lightweight summary used for navigation."""
        return TutorialSummary(
            id=self.id,
            title=self.title,
            slug=self.slug,
            category=self.category,
            difficulty=self.difficulty,
        )

    def to_dict(self, *, include_content: bool = True) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, object] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "slug": self.slug,
            "category": self.category,
            "author": self.author,
            "readTime": self.read_time,
            "difficulty": self.difficulty.value,
            "publishedAt": self.published_at,
            "tags": list(self.tags),
            "featured": self.featured,
        }
        if include_content:
            result["content"] = self.content
        return result


@dataclass(frozen=True)
class TutorialSummary:
    """Tutorial fields needed by the sidebar, without the content payload."""

    id: str
    title: str
    slug: Slug
    category: CategorySlug
    difficulty: Difficulty


@dataclass(frozen=True)
class Category:
    """Category of tutorials."""

    slug: CategorySlug
    name: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"slug": self.slug, "name": self.name, "description": self.description}


class ContentStore(Mapping[str, Tutorial]):
    """Immutable slug -> Tutorial mapping.

    Iteration follows the order in which tutorials were added, which is the
    order of the manifest.
    """

    __slots__ = ("_categories", "_routes", "_tutorials")

    def __init__(
        self,
        tutorials: list[Tutorial],
        categories: list[Category] | None = None,
        routes: list[RouteKey] | None = None,
    ) -> None:
        """Initialize store.

        Args:
            tutorials: Tutorials in insertion order
            categories: Declared categories, in declaration order
            routes: Explicitly declared routes, None when not declared

        Raises:
            ContentError: If two tutorials share a slug or an id
        """
        by_slug: dict[str, Tutorial] = {}
        seen_ids: dict[str, str] = {}
        for tutorial in tutorials:
            if tutorial.slug in by_slug:
                raise ContentError(f"Duplicate tutorial slug: {tutorial.slug}")
            previous = seen_ids.get(tutorial.id)
            if previous is not None:
                raise ContentError(f"Duplicate tutorial id: {tutorial.id} (in {previous} and {tutorial.slug})")
            by_slug[tutorial.slug] = tutorial
            seen_ids[tutorial.id] = tutorial.slug

        declared: dict[str, Category] = {}
        for category in categories or []:
            if category.slug in declared:
                raise ContentError(f"Duplicate category slug: {category.slug}")
            declared[category.slug] = category

        self._tutorials: Mapping[str, Tutorial] = MappingProxyType(by_slug)
        self._categories: Mapping[str, Category] = MappingProxyType(declared)
        self._routes: tuple[RouteKey, ...] | None = tuple(routes) if routes is not None else None

    def __getitem__(self, slug: str) -> Tutorial:
        return self._tutorials[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tutorials)

    def __len__(self) -> int:
        return len(self._tutorials)

    @property
    def declared_routes(self) -> tuple[RouteKey, ...] | None:
        """Routes listed explicitly in the manifest, or None."""
        return self._routes

    def tutorials(self) -> list[Tutorial]:
        """All tutorials in insertion order."""
        return list(self._tutorials.values())

    def in_category(self, category: str) -> list[Tutorial]:
        """Tutorials of one category in insertion order."""
        return [tutorial for tutorial in self._tutorials.values() if tutorial.category == category]

    def summaries(self, category: str) -> list[TutorialSummary]:
        """Navigation summaries of one category in insertion order."""
        return [tutorial.summary() for tutorial in self.in_category(category)]

    def get_category(self, slug: str) -> Category | None:
        """Get category record by slug.

        Categories that are only referenced by tutorials get a derived record.

        Returns:
            Category if declared or referenced, None otherwise
        """
        declared = self._categories.get(slug)
        if declared is not None:
            return declared
        if any(tutorial.category == slug for tutorial in self._tutorials.values()):
            return Category(slug=CategorySlug(slug), name=slug.upper())
        return None

    def categories(self) -> list[Category]:
        """Declared categories followed by categories only referenced by tutorials."""
        result = list(self._categories.values())
        for tutorial in self._tutorials.values():
            if tutorial.category not in self._categories and all(
                category.slug != tutorial.category for category in result
            ):
                result.append(Category(slug=tutorial.category, name=tutorial.category.upper()))
        return result


class ContentRepository:
    """Loads the content bundle into a ContentStore.

    The store is built once on first access and reused afterwards.
    """

    def __init__(self, manifest_path: Path) -> None:
        """Initialize repository.

        Args:
            manifest_path: Path to the TOML manifest; content_file entries are
                resolved relative to its directory
        """
        self._manifest_path = manifest_path
        self._store: ContentStore | None = None

    @property
    def manifest_path(self) -> Path:
        """Path to the content manifest."""
        return self._manifest_path

    def load(self) -> ContentStore:
        """Load and validate the content bundle.

        Returns:
            Immutable ContentStore

        Raises:
            FileNotFoundError: If the manifest does not exist
            ContentError: If the manifest is malformed
        """
        if self._store is not None:
            return self._store

        if not self._manifest_path.exists():
            raise FileNotFoundError(f"Content manifest not found: {self._manifest_path}")

        logger.info(f"Loading content from {self._manifest_path}")
        try:
            with self._manifest_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ContentError(f"Invalid content manifest {self._manifest_path}: {e}") from e

        self._store = self.from_dict(data, self._manifest_path.parent)
        logger.info(f"Loaded {len(self._store)} tutorials in {len(self._store.categories())} categories")
        return self._store

    @classmethod
    def from_dict(cls, data: Mapping[str, object], base_dir: Path) -> ContentStore:
        """Build a store from parsed manifest data.

        Args:
            data: Parsed manifest
            base_dir: Directory against which content_file paths are resolved

        Returns:
            Immutable ContentStore
        """
        categories = [_parse_category(item, i) for i, item in enumerate(_table_list(data, "categories"))]
        tutorials = [_parse_tutorial(item, i, base_dir) for i, item in enumerate(_table_list(data, "tutorials"))]

        routes: list[RouteKey] | None = None
        if "routes" in data:
            routes = [_parse_route(item, i) for i, item in enumerate(_table_list(data, "routes"))]

        declared = {category.slug for category in categories}
        for tutorial in tutorials:
            if declared and tutorial.category not in declared:
                logger.warning(f"Tutorial '{tutorial.slug}' uses undeclared category '{tutorial.category}'")

        return ContentStore(tutorials, categories, routes)


def _table_list(data: Mapping[str, object], key: str) -> list[dict[str, object]]:
    """Return an array of tables from the manifest, empty when absent."""
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise ContentError(f"{key} must be an array of tables")
    for item in raw:
        if not isinstance(item, dict):
            raise ContentError(f"{key} entries must be tables")
    return raw


def _require_str(raw: dict[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ContentError(f"{where}.{key} must be a non-empty string")
    return value.strip()


def _require_segment(raw: dict[str, object], key: str, where: str) -> str:
    value = _require_str(raw, key, where)
    if not is_url_segment(value):
        raise ContentError(f"{where}.{key} must contain only letters, digits, underscores and hyphens: {value!r}")
    return value


def _optional_str(raw: dict[str, object], key: str, where: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContentError(f"{where}.{key} must be a string")
    return value


def _parse_category(raw: dict[str, object], index: int) -> Category:
    where = f"categories[{index}]"
    slug = _require_segment(raw, "slug", where)
    return Category(
        slug=CategorySlug(slug),
        name=_optional_str(raw, "name", where) or slug.upper(),
        description=_optional_str(raw, "description", where) or "",
    )


def _parse_route(raw: dict[str, object], index: int) -> RouteKey:
    where = f"routes[{index}]"
    return RouteKey(
        category=CategorySlug(_require_segment(raw, "category", where)),
        slug=Slug(_require_segment(raw, "slug", where)),
    )


def _parse_tutorial(raw: dict[str, object], index: int, base_dir: Path) -> Tutorial:
    """Build a tutorial from one manifest entry."""
    slug = raw.get("slug")
    where = f"tutorials[{slug if isinstance(slug, str) else index}]"

    content = _load_content(raw, where, base_dir)

    try:
        difficulty = Difficulty.parse(raw.get("difficulty"))
    except ValueError as e:
        raise ContentError(f"{where}.difficulty: {e}") from e

    tags_raw = raw.get("tags", [])
    if not isinstance(tags_raw, list) or not all(isinstance(tag, str) for tag in tags_raw):
        raise ContentError(f"{where}.tags must be a list of strings")

    featured = raw.get("featured", False)
    if not isinstance(featured, bool):
        raise ContentError(f"{where}.featured must be a boolean")

    tutorial_id = raw.get("id")
    if isinstance(tutorial_id, int) and not isinstance(tutorial_id, bool):
        tutorial_id = str(tutorial_id)
    if not isinstance(tutorial_id, str) or not tutorial_id:
        raise ContentError(f"{where}.id must be a non-empty string")

    return Tutorial(
        id=tutorial_id,
        title=_require_str(raw, "title", where),
        description=_optional_str(raw, "description", where) or generate_excerpt(content),
        content=content,
        slug=Slug(_require_segment(raw, "slug", where)),
        category=CategorySlug(_require_segment(raw, "category", where)),
        author=_require_str(raw, "author", where),
        read_time=_optional_str(raw, "read_time", where) or calculate_read_time(content),
        difficulty=difficulty,
        published_at=_parse_date(raw.get("published_at"), where),
        tags=tuple(tags_raw),
        featured=featured,
    )


def _load_content(raw: dict[str, object], where: str, base_dir: Path) -> str:
    """Return inline content or the text of content_file."""
    inline = _optional_str(raw, "content", where)
    content_file = _optional_str(raw, "content_file", where)
    if inline is not None and content_file is not None:
        raise ContentError(f"{where} must set only one of content and content_file")
    if content_file is None:
        return inline or ""

    path = base_dir / content_file
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentError(f"{where}.content_file cannot be read: {path}") from e


def _parse_date(value: object, where: str) -> str:
    """Normalize published_at to an ISO date string."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError as e:
            raise ContentError(f"{where}.published_at must be an ISO date: {value!r}") from e
    raise ContentError(f"{where}.published_at must be a date")
