"""Core type definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import NewType

# Slug of a tutorial (e.g., "gcp-compute-engine-vms")
Slug = NewType("Slug", str)

# Slug of a category (e.g., "gcp"), first path segment of a tutorial route
CategorySlug = NewType("CategorySlug", str)


class Difficulty(StrEnum):
    """Difficulty tier of a tutorial, in declaration order."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def parse(cls, value: object) -> Difficulty:
        """Parse a difficulty label.

        Args:
            value: Raw label from content (e.g., "Beginner")

        Returns:
            Matching Difficulty member

        Raises:
            ValueError: If the label is not one of the known tiers
        """
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown difficulty {value!r} (expected one of: {choices})")


@dataclass(frozen=True, order=True)
class RouteKey:
    """Composite key of a pre-rendered tutorial page."""

    category: CategorySlug
    slug: Slug

    @property
    def path(self) -> str:
        """URL path of the route."""
        return f"/tutorials/{self.category}/{self.slug}"

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"category": self.category, "slug": self.slug}
