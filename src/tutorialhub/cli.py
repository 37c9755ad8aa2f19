"""CLI interface for TutorialHub.

Command-line tool for compiling tutorial content into a static site.
"""

import json
import logging
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import ParamSpec, TypeVar

import click

from tutorialhub.builder import SiteBuilder, plan_site
from tutorialhub.config import Config
from tutorialhub.core.resolver import NotFound

P = ParamSpec("P")
R = TypeVar("R")


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover tutorialhub.toml)",
)

manifest_option = click.option(
    "--manifest",
    "-m",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Content manifest (overrides config)",
)

verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (per-page build details)",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _report_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Print content, route and configuration errors and exit with status 1."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except (FileNotFoundError, ValueError) as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            sys.exit(1)

    return wrapper


@click.group()
def cli() -> None:
    """TutorialHub - static tutorial site compiler."""


@cli.command()
@config_option
@manifest_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of parallel page workers (overrides config)",
)
@click.option(
    "--cache/--no-cache",
    default=None,
    help="Enable/disable incremental output (overrides config, default: enabled)",
)
@click.option("--clean", is_flag=True, help="Clear cached fingerprints before building")
@verbose_option
@_report_errors
def build(
    config_path: Path | None,
    manifest: Path | None,
    output_dir: Path | None,
    jobs: int | None,
    cache: bool | None,
    clean: bool,
    verbose: bool,
) -> None:
    """Compile every tutorial route into the output directory."""
    _setup_logging(verbose)
    config = Config.load(config_path).with_overrides(
        manifest=manifest,
        output_dir=output_dir,
        cache_enabled=cache,
        jobs=jobs,
    )

    click.echo(f"Content manifest: {config.content.manifest}")
    click.echo(f"Output directory: {config.build.output_dir}")
    if config.build.cache_enabled:
        click.echo(f"Cache directory: {config.build.cache_dir}")
    else:
        click.echo("Cache: disabled")

    report = SiteBuilder(config).build(clean=clean)

    click.echo(
        click.style(f"\nBuilt {report.routes} tutorial pages.", fg="green", bold=True),
    )
    click.echo(f"Written: {len(report.written)}")
    click.echo(f"Unchanged: {len(report.unchanged)}")
    click.echo(f"Removed: {len(report.removed)}")


@cli.command()
@config_option
@manifest_option
@verbose_option
@_report_errors
def routes(config_path: Path | None, manifest: Path | None, verbose: bool) -> None:
    """List every pre-rendered tutorial route."""
    _setup_logging(verbose)
    config = Config.load(config_path).with_overrides(manifest=manifest)
    plan = plan_site(config)
    for route in plan.routes:
        click.echo(route.path)


@cli.command()
@click.argument("category")
@click.argument("slug")
@config_option
@manifest_option
@verbose_option
@_report_errors
def show(category: str, slug: str, config_path: Path | None, manifest: Path | None, verbose: bool) -> None:
    """Print the render model of one tutorial page."""
    _setup_logging(verbose)
    config = Config.load(config_path).with_overrides(manifest=manifest)
    plan = plan_site(config)

    # Routes outside the enumerated set are not found, even if the slug exists
    page = plan.assembler.assemble(category, slug)
    if not plan.routes.is_generated(category, slug) or isinstance(page, NotFound):
        click.echo(click.style(f"Page not found: /tutorials/{category}/{slug}", fg="yellow"), err=True)
        sys.exit(1)

    click.echo(json.dumps(page.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
@config_option
@manifest_option
@verbose_option
@_report_errors
def check(config_path: Path | None, manifest: Path | None, verbose: bool) -> None:
    """Validate content and routes without writing output."""
    _setup_logging(verbose)
    config = Config.load(config_path).with_overrides(manifest=manifest)
    plan = plan_site(config)
    click.echo(
        click.style(
            f"OK: {len(plan.store)} tutorials, {len(plan.routes)} routes",
            fg="green",
        ),
    )
