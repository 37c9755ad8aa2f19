"""Configuration management for TutorialHub.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from tutorialhub.core.catalog import TUTORIALS_PER_PAGE
from tutorialhub.core.content import MANIFEST_FILENAME

CONFIG_FILENAME = "tutorialhub.toml"


@dataclass
class SiteConfig:
    """Site-wide configuration."""

    title: str = "TutorialHub"
    tutorials_per_page: int = TUTORIALS_PER_PAGE
    expected_categories: list[str] = field(default_factory=list)


@dataclass
class ContentConfig:
    """Content bundle configuration."""

    manifest: Path = field(default_factory=lambda: Path("content") / MANIFEST_FILENAME)
    strict_category: bool = True


@dataclass
class BuildConfig:
    """Static build configuration."""

    output_dir: Path = field(default_factory=lambda: Path("dist"))
    cache_dir: Path = field(default_factory=lambda: Path(".cache"))
    cache_enabled: bool = True
    jobs: int = 1


@dataclass
class Config:
    """Application configuration."""

    site: SiteConfig
    content: ContentConfig
    build: BuildConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for tutorialhub.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(site=SiteConfig(), content=ContentConfig(), build=BuildConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e

        config_dir = path.parent

        return cls(
            site=cls._parse_site(data.get("site")),
            content=cls._parse_content(data.get("content"), config_dir),
            build=cls._parse_build(data.get("build"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section."""
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        title = data.get("title", "TutorialHub")
        if not isinstance(title, str):
            raise ValueError("site.title must be a string")

        per_page = data.get("tutorials_per_page", TUTORIALS_PER_PAGE)
        if not isinstance(per_page, int) or isinstance(per_page, bool) or per_page < 1:
            raise ValueError("site.tutorials_per_page must be a positive integer")

        expected_raw = data.get("expected_categories", [])
        if not isinstance(expected_raw, list):
            raise ValueError("site.expected_categories must be a list")
        expected: list[str] = []
        for item in expected_raw:
            if not isinstance(item, str):
                raise ValueError("site.expected_categories items must be strings")
            expected.append(item)

        return SiteConfig(title=title, tutorials_per_page=per_page, expected_categories=expected)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)
        """
        if data is None:
            return ContentConfig(manifest=config_dir / "content" / MANIFEST_FILENAME)

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        manifest = data.get("manifest", f"content/{MANIFEST_FILENAME}")
        if not isinstance(manifest, str):
            raise ValueError("content.manifest must be a string")

        strict_category = data.get("strict_category", True)
        if not isinstance(strict_category, bool):
            raise ValueError("content.strict_category must be a boolean")

        return ContentConfig(manifest=config_dir / manifest, strict_category=strict_category)

    @classmethod
    def _parse_build(cls, data: object, config_dir: Path) -> BuildConfig:
        """Parse build configuration section.

        Args:
            data: Raw build section data
            config_dir: Directory containing config file (for relative paths)
        """
        if data is None:
            return BuildConfig(output_dir=config_dir / "dist", cache_dir=config_dir / ".cache")

        if not isinstance(data, dict):
            raise ValueError("build section must be a dictionary")

        output_dir = data.get("output_dir", "dist")
        if not isinstance(output_dir, str):
            raise ValueError("build.output_dir must be a string")

        cache_dir = data.get("cache_dir", ".cache")
        if not isinstance(cache_dir, str):
            raise ValueError("build.cache_dir must be a string")

        cache_enabled = data.get("cache_enabled", True)
        if not isinstance(cache_enabled, bool):
            raise ValueError("build.cache_enabled must be a boolean")

        jobs = data.get("jobs", 1)
        if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1:
            raise ValueError("build.jobs must be a positive integer")

        return BuildConfig(
            output_dir=config_dir / output_dir,
            cache_dir=config_dir / cache_dir,
            cache_enabled=cache_enabled,
            jobs=jobs,
        )

    def with_overrides(
        self,
        *,
        manifest: Path | None = None,
        output_dir: Path | None = None,
        cache_enabled: bool | None = None,
        jobs: int | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config; the original
        Config is not modified.

        Args:
            manifest: Override content.manifest
            output_dir: Override build.output_dir
            cache_enabled: Override build.cache_enabled
            jobs: Override build.jobs

        Returns:
            New Config instance with overrides applied
        """
        content = self.content
        if manifest is not None:
            content = replace(self.content, manifest=manifest)

        build = self.build
        if output_dir is not None or cache_enabled is not None or jobs is not None:
            build = replace(
                self.build,
                output_dir=output_dir if output_dir is not None else self.build.output_dir,
                cache_enabled=cache_enabled if cache_enabled is not None else self.build.cache_enabled,
                jobs=jobs if jobs is not None else self.build.jobs,
            )

        return replace(self, content=content, build=build)
