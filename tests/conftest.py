"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tutorialhub.config import BuildConfig, Config, ContentConfig, SiteConfig
from tutorialhub.core.content import ContentStore, Tutorial
from tutorialhub.core.types import CategorySlug, Difficulty, Slug

TutorialFactory = Callable[..., Tutorial]

SAMPLE_MANIFEST = """
[[categories]]
slug = "gcp"
name = "Google Cloud Platform"
description = "Google Cloud services"

[[categories]]
slug = "java"
name = "Java"
description = "Java programming"

[[tutorials]]
id = "16"
title = "GCP Fundamentals"
description = "Core concepts"
slug = "gcp-fundamentals"
category = "gcp"
author = "Google Cloud Expert"
read_time = "20 min"
difficulty = "Beginner"
published_at = 2024-11-01
tags = ["gcp", "cloud"]
featured = true
content = "<h2>Welcome</h2>"

[[tutorials]]
id = "17"
title = "BigQuery Analytics"
description = "Data warehousing"
slug = "gcp-bigquery"
category = "gcp"
author = "Data Team"
read_time = "35 min"
difficulty = "Intermediate"
published_at = 2024-11-03
tags = ["gcp", "bigquery"]
content = "<h2>BigQuery</h2>"

[[tutorials]]
id = "24"
title = "Kubernetes Engine"
description = "Managed Kubernetes"
slug = "gcp-gke"
category = "gcp"
author = "Platform Team"
read_time = "45 min"
difficulty = "Advanced"
published_at = 2024-11-08
tags = ["kubernetes"]
content = "<h2>GKE</h2>"

[[tutorials]]
id = "1"
title = "Java Basics"
description = "Fundamentals of Java"
slug = "java-basics"
category = "java"
author = "John Doe"
read_time = "15 min"
difficulty = "Beginner"
published_at = 2024-01-15
tags = ["java"]
content = "<h2>Java</h2>"
"""


@pytest.fixture
def make_tutorial() -> TutorialFactory:
    """Return a factory building tutorials with sensible defaults."""

    def factory(slug: str, difficulty: str = "Beginner", category: str = "gcp", **overrides: object) -> Tutorial:
        fields: dict[str, object] = {
            "id": slug,
            "title": slug.replace("-", " ").title(),
            "description": f"About {slug}",
            "content": f"<p>{slug}</p>",
            "slug": Slug(slug),
            "category": CategorySlug(category),
            "author": "Author",
            "read_time": "5 min",
            "difficulty": Difficulty(difficulty),
            "published_at": "2024-11-01",
        }
        fields.update(overrides)
        return Tutorial(**fields)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def store(make_tutorial: TutorialFactory) -> ContentStore:
    """Small in-memory store with two categories."""
    return ContentStore(
        [
            make_tutorial("a", "Beginner"),
            make_tutorial("b", "Advanced"),
            make_tutorial("c", "Beginner"),
            make_tutorial("java-basics", "Beginner", category="java"),
        ],
    )


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper writing a manifest into tmp_path/content."""

    def write(text: str) -> Path:
        content_dir = tmp_path / "content"
        content_dir.mkdir(exist_ok=True)
        manifest = content_dir / "tutorials.toml"
        manifest.write_text(text, encoding="utf-8")
        return manifest

    return write


@pytest.fixture
def test_config(tmp_path: Path, write_manifest: Callable[[str], Path]) -> Config:
    """Create a test configuration with the sample manifest and tmp_path directories."""
    manifest = write_manifest(SAMPLE_MANIFEST)
    return Config(
        site=SiteConfig(),
        content=ContentConfig(manifest=manifest),
        build=BuildConfig(output_dir=tmp_path / "dist", cache_dir=tmp_path / ".cache"),
    )
