"""Build-time route enumeration.

Every page that is generated must be known in advance; any route outside the
enumerated set renders as not found (no on-demand fallback).
"""

import logging
from collections.abc import Iterable, Iterator

from tutorialhub.core.content import ContentStore
from tutorialhub.core.resolver import ContentResolver, NotFound
from tutorialhub.core.types import CategorySlug, RouteKey, Slug

logger = logging.getLogger(__name__)


class RouteError(ValueError):
    """Raised when the route list is inconsistent with the content."""


def enumerate_routes(store: ContentStore, declared: Iterable[RouteKey] | None = None) -> list[RouteKey]:
    """Enumerate routes to pre-render.

    Args:
        store: Loaded content store
        declared: Explicit route list; when None, the manifest's declared
            routes are used if present, otherwise one route per tutorial

    Returns:
        Deduplicated routes in first-occurrence order
    """
    if declared is None:
        declared = store.declared_routes
    if declared is None:
        candidates: Iterable[RouteKey] = (tutorial.route for tutorial in store.tutorials())
    else:
        candidates = declared

    routes = list(dict.fromkeys(candidates))
    logger.debug(f"Enumerated {len(routes)} routes")
    return routes


def validate_routes(routes: Iterable[RouteKey], resolver: ContentResolver) -> None:
    """Check that every route resolves to a tutorial.

    Raises:
        RouteError: If any route resolves to NotFound
    """
    dangling = [route for route in routes if isinstance(resolver.resolve(route.category, route.slug), NotFound)]
    if dangling:
        paths = ", ".join(route.path for route in dangling)
        raise RouteError(f"Routes without content: {paths}")


def require_categories(routes: Iterable[RouteKey], expected: Iterable[str]) -> None:
    """Check that every expected category has at least one route.

    Raises:
        RouteError: If an expected category has no routes
    """
    present = {route.category for route in routes}
    missing = [category for category in expected if category not in present]
    if missing:
        raise RouteError(f"No routes for expected categories: {', '.join(missing)}")


class RouteTable:
    """Frozen set of pre-rendered routes."""

    __slots__ = ("_keys", "_routes")

    def __init__(self, routes: Iterable[RouteKey]) -> None:
        self._routes = tuple(dict.fromkeys(routes))
        self._keys = frozenset(self._routes)

    def __contains__(self, route: object) -> bool:
        return route in self._keys

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def is_generated(self, category: str, slug: str) -> bool:
        """Check whether a route was pre-rendered."""
        return RouteKey(category=CategorySlug(category), slug=Slug(slug)) in self._keys

    def categories(self) -> list[str]:
        """Categories with at least one route, in first-occurrence order."""
        return list(dict.fromkeys(route.category for route in self._routes))

    def to_list(self) -> list[dict[str, str]]:
        """Convert to list of dictionaries for JSON serialization."""
        return [route.to_dict() for route in self._routes]
