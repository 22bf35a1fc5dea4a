"""CLI interface for sitenav.

Command-line tool for printing navigation menus and breadcrumbs of a
content file as JSON.
"""

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import cast

import click

from sitenav.config import Config
from sitenav.core.navigation import NavigationItem
from sitenav.core.repository import ContentRepository, load_repository
from sitenav.core.service import NavigationService
from sitenav.errors import SitenavError


@click.group()
def cli() -> None:
    """sitenav - navigation menus and breadcrumbs for content trees."""


def _config_option(func: Callable[..., None]) -> Callable[..., None]:
    return click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, path_type=Path),
        default=None,
        help="Path to configuration file (default: auto-discover sitenav.toml)",
    )(func)


def _content_options(func: Callable[..., None]) -> Callable[..., None]:
    func = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output (debug logging)",
    )(func)
    func = click.option(
        "--locale",
        "-l",
        default=None,
        help="Content locale (overrides config)",
    )(func)
    func = click.option(
        "--webspace",
        "-w",
        default=None,
        help="Webspace key (overrides config, default: the only webspace)",
    )(func)
    return _config_option(func)


@cli.command()
@click.argument(
    "content_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--parent",
    "-p",
    default=None,
    help="Uuid of the page whose subtree is shown (default: whole webspace)",
)
@click.option(
    "--depth",
    "-d",
    type=click.IntRange(min=0),
    default=None,
    help="Levels below the webspace root (overrides config, default: 1)",
)
@click.option(
    "--unlimited",
    is_flag=True,
    help="Do not limit the navigation depth",
)
@click.option(
    "--flat/--nested",
    default=None,
    help="Print a flat list instead of a tree (overrides config)",
)
@click.option(
    "--context",
    default=None,
    help="Navigation context to filter by, e.g. main or footer (overrides config)",
)
@_content_options
def navigation(
    content_file: Path | None,
    parent: str | None,
    depth: int | None,
    unlimited: bool,
    flat: bool | None,
    context: str | None,
    config_path: Path | None,
    webspace: str | None,
    locale: str | None,
    verbose: bool,
) -> None:
    """Print the navigation of a content file as JSON."""
    _setup_logging(verbose)
    try:
        config = Config.load(config_path).with_overrides(
            depth=depth,
            unlimited_depth=unlimited,
            flat=flat,
            context=context,
            source=content_file,
            webspace=webspace,
            locale=locale,
        )
        repository = _load_content(config)
        webspace_key = _resolve_webspace(config, repository)
        service = _create_service(repository)

        items = service.get_navigation(
            parent,
            webspace_key,
            config.content.locale,
            config.navigation.to_options(),
        )
    except (SitenavError, FileNotFoundError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    _print_items(items)


@cli.command()
@click.argument("uuid")
@click.argument(
    "content_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@_content_options
def breadcrumb(
    uuid: str,
    content_file: Path | None,
    config_path: Path | None,
    webspace: str | None,
    locale: str | None,
    verbose: bool,
) -> None:
    """Print the breadcrumb of a page as JSON."""
    _setup_logging(verbose)
    try:
        config = Config.load(config_path).with_overrides(
            source=content_file,
            webspace=webspace,
            locale=locale,
        )
        repository = _load_content(config)
        webspace_key = _resolve_webspace(config, repository)
        service = _create_service(repository)

        items = service.get_breadcrumb(uuid, webspace_key, config.content.locale)
    except (SitenavError, FileNotFoundError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    _print_items(items)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_content(config: Config) -> ContentRepository:
    """Load the content repository named by the config.

    Raises:
        SystemExit: If no content file is given
    """
    if config.content.source is None:
        click.echo(
            click.style(
                "Error: content file required (via argument or content.source in sitenav.toml)",
                fg="red",
            ),
            err=True,
        )
        sys.exit(1)
    return load_repository(cast(Path, config.content.source))  # narrowing after sys.exit


def _resolve_webspace(config: Config, repository: ContentRepository) -> str:
    """Get effective webspace key or exit with error.

    Falls back to the only webspace of the repository when none is configured.

    Raises:
        SystemExit: If the webspace is ambiguous
    """
    if config.content.webspace is not None:
        return config.content.webspace

    keys = repository.webspace_keys
    if len(keys) != 1:
        click.echo(
            click.style(
                f"Error: webspace required (via --webspace or config), available: {', '.join(keys)}",
                fg="red",
            ),
            err=True,
        )
        sys.exit(1)
    return keys[0]


def _create_service(repository: ContentRepository) -> NavigationService:
    return NavigationService(
        content_mapper=repository,
        content_query=repository,
        session_manager=repository,
    )


def _print_items(items: list[NavigationItem]) -> None:
    click.echo(json.dumps({"items": [item.to_dict() for item in items]}, indent=2))
