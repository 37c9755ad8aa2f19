"""Static site builder.

Enumerates routes, assembles every tutorial page and writes the render models
as JSON. Output layout:
    dist/
    ├── index.json                          # Home page
    ├── routes.json                         # Enumerated routes
    ├── 404.json                            # Generic not-found model
    └── tutorials/
        ├── gcp.json                        # Category listing, page 1
        └── gcp/
            ├── page/2.json                 # Category listing, page 2+
            └── gcp-compute-engine-vms.json # Tutorial page
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from tutorialhub.config import Config
from tutorialhub.core.cache import BuildCache, compute_fingerprint
from tutorialhub.core.catalog import CategoryPage, build_category_page, build_home_page
from tutorialhub.core.content import ContentRepository, ContentStore
from tutorialhub.core.page import PageAssembler, TutorialPage
from tutorialhub.core.resolver import ContentResolver, NotFound
from tutorialhub.core.routes import RouteTable, enumerate_routes, require_categories, validate_routes
from tutorialhub.core.types import RouteKey

logger = logging.getLogger(__name__)

NOT_FOUND_PAYLOAD = {"error": "Page not found"}


@dataclass
class BuildReport:
    """Summary of one build."""

    routes: int = 0
    written: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SitePlan:
    """Loaded content with its validated route table."""

    store: ContentStore
    routes: RouteTable
    assembler: PageAssembler


def plan_site(config: Config) -> SitePlan:
    """Load content and validate routes without writing anything.

    Raises:
        FileNotFoundError: If the content manifest is missing
        ContentError: If the content bundle is malformed
        RouteError: If routes are inconsistent with the content
    """
    store = ContentRepository(config.content.manifest).load()
    resolver = ContentResolver(store, strict_category=config.content.strict_category)

    routes = enumerate_routes(store)
    validate_routes(routes, resolver)
    require_categories(routes, config.site.expected_categories)
    logger.info(f"{len(routes)} routes in {len({route.category for route in routes})} categories")

    return SitePlan(store=store, routes=RouteTable(routes), assembler=PageAssembler(store, resolver))


class SiteBuilder:
    """Writes the render models of every enumerated route."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._output_dir = config.build.output_dir
        self._cache = BuildCache(config.build.cache_dir) if config.build.cache_enabled else None

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def build(self, *, clean: bool = False) -> BuildReport:
        """Build the whole site.

        Args:
            clean: Drop cached fingerprints and rewrite every output

        Returns:
            BuildReport listing written, unchanged and removed outputs
        """
        plan = plan_site(self._config)
        report = BuildReport(routes=len(plan.routes))
        previous = set(self._cache.relpaths()) if self._cache is not None else set()
        if clean and self._cache is not None:
            self._cache.clear()

        for relpath, page in self._assemble_all(plan):
            self._write(relpath, page.to_dict(), report)

        for relpath, listing in self._category_pages(plan):
            self._write(relpath, listing.to_dict(), report)

        self._write("index.json", build_home_page(plan.store).to_dict(), report)
        self._write("routes.json", {"routes": plan.routes.to_list()}, report)
        self._write("404.json", NOT_FOUND_PAYLOAD, report)
        self._remove_stale(previous, report)

        if self._cache is not None:
            self._cache.save()

        logger.info(
            f"Build finished: {len(report.written)} written, "
            f"{len(report.unchanged)} unchanged, {len(report.removed)} removed"
        )
        return report

    def _assemble_all(self, plan: SitePlan) -> list[tuple[str, TutorialPage]]:
        """Assemble all route pages, in route order."""
        routes = list(plan.routes)

        def assemble(route: RouteKey) -> tuple[str, TutorialPage]:
            result = plan.assembler.assemble(route.category, route.slug)
            if isinstance(result, NotFound):
                # Routes were validated in plan_site
                raise RuntimeError(f"Route disappeared during build: {route.path}")
            return f"tutorials/{route.category}/{route.slug}.json", result

        jobs = self._config.build.jobs
        if jobs <= 1:
            return [assemble(route) for route in routes]

        logger.debug(f"Assembling {len(routes)} pages with {jobs} workers")
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            return list(executor.map(assemble, routes))

    def _category_pages(self, plan: SitePlan) -> list[tuple[str, CategoryPage]]:
        """Build listing pages for every category that has routes."""
        per_page = self._config.site.tutorials_per_page
        pages: list[tuple[str, CategoryPage]] = []
        for category in plan.routes.categories():
            page_number = 1
            while True:
                listing = build_category_page(plan.store, category, page_number, per_page)
                if isinstance(listing, NotFound):
                    break
                relpath = f"tutorials/{category}.json"
                if page_number > 1:
                    relpath = f"tutorials/{category}/page/{page_number}.json"
                pages.append((relpath, listing))
                page_number += 1
        return pages

    def _write(self, relpath: str, data: object, report: BuildReport) -> None:
        """Write one output unless the cache says it is unchanged."""
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        output_path = self._output_dir / relpath
        fingerprint = compute_fingerprint(payload)

        if self._cache is not None and self._cache.is_fresh(relpath, fingerprint, output_path):
            logger.debug(f"Unchanged: {relpath}")
            report.unchanged.append(relpath)
            return

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
        if self._cache is not None:
            self._cache.set(relpath, fingerprint)
        logger.debug(f"Wrote {relpath}")
        report.written.append(relpath)

    def _remove_stale(self, previous: set[str], report: BuildReport) -> None:
        """Delete outputs of an earlier build that this build did not produce."""
        produced = set(report.written) | set(report.unchanged)
        for relpath in sorted(previous - produced):
            (self._output_dir / relpath).unlink(missing_ok=True)
            if self._cache is not None:
                self._cache.invalidate(relpath)
            logger.debug(f"Removed stale {relpath}")
            report.removed.append(relpath)
