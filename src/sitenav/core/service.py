"""Navigation and breadcrumb service.

Resolves request parameters, delegates fetching to the content
collaborators and turns their results into NavigationItem lists.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from sitenav.core.content import ContentNode, ContentRecord
from sitenav.core.navigation import (
    NavigationItem,
    NavigationOptions,
    convert_records,
    generate_navigation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOptions:
    """Options handed to the query executor for one navigation query.

    Attributes:
        depth: Absolute maximum node depth, None for unlimited
        context: Navigation context filter
        parent: Uuid of the page whose subtree is queried, None for the webspace root
    """

    depth: int | None
    context: str | None = None
    parent: str | None = None


@dataclass(frozen=True)
class BreadcrumbEntry:
    """Ancestor reference returned by the content mapper."""

    uuid: str
    depth: int


class ContentQueryExecutor(Protocol):
    """Executes navigation queries against the content repository."""

    def execute(
        self,
        webspace_key: str,
        locales: Sequence[str],
        options: QueryOptions,
        flat: bool = False,
    ) -> Sequence[ContentRecord]: ...


class ContentMapper(Protocol):
    """Loads live content objects."""

    def load(self, uuid: str, webspace_key: str, locale: str) -> ContentNode: ...

    def load_breadcrumb(
        self,
        uuid: str,
        locale: str,
        webspace_key: str,
    ) -> Sequence[BreadcrumbEntry]: ...

    def load_start_page(self, webspace_key: str, locale: str) -> ContentNode: ...


class SessionManager(Protocol):
    """Provides workspace information."""

    def get_content_root_depth(self, webspace_key: str) -> int: ...


class NavigationService:
    """Builds navigation menus and breadcrumbs for a webspace.

    Menus come from the query executor as records that are already
    filtered. Breadcrumbs are built from live content objects and filtered
    here, stopping at the first ancestor hidden from navigation.
    """

    def __init__(
        self,
        content_mapper: ContentMapper,
        content_query: ContentQueryExecutor,
        session_manager: SessionManager,
    ) -> None:
        """Initialize service.

        Args:
            content_mapper: Loads content objects and ancestor chains
            content_query: Executes navigation queries
            session_manager: Provides the content root depth of webspaces
        """
        self._content_mapper = content_mapper
        self._content_query = content_query
        self._session_manager = session_manager

    def get_navigation(
        self,
        parent: str | None,
        webspace_key: str,
        locale: str,
        options: NavigationOptions | None = None,
    ) -> list[NavigationItem]:
        """Get navigation below a parent page.

        The requested depth counts from the webspace's content root, not
        from the parent.

        Args:
            parent: Uuid of the parent page, None for the whole webspace
            webspace_key: Webspace to query
            locale: Content locale
            options: Depth, flat and context settings (defaults if None)

        Returns:
            List of NavigationItem, nested or flat depending on options

        Raises:
            NotFoundError: If the webspace or parent is unknown
        """
        options = options or NavigationOptions()
        depth = options.depth
        if depth is not None:
            depth += self._session_manager.get_content_root_depth(webspace_key)

        logger.debug(
            f"Navigation query for {webspace_key}/{locale}: "
            f"parent={parent} depth={depth} context={options.context} flat={options.flat}",
        )
        query = QueryOptions(depth=depth, context=options.context, parent=parent)
        records = self._content_query.execute(
            webspace_key,
            [locale],
            query,
            options.flat,
        )
        return convert_records(records)

    def get_root_navigation(
        self,
        webspace_key: str,
        locale: str,
        options: NavigationOptions | None = None,
    ) -> list[NavigationItem]:
        """Get navigation for the whole webspace.

        Args:
            webspace_key: Webspace to query
            locale: Content locale
            options: Depth, flat and context settings (defaults if None)

        Returns:
            List of NavigationItem, nested or flat depending on options
        """
        return self.get_navigation(None, webspace_key, locale, options)

    def get_breadcrumb(
        self,
        uuid: str,
        webspace_key: str,
        locale: str,
    ) -> list[NavigationItem]:
        """Build the breadcrumb trail for a page.

        The trail runs from the start page down to the page itself and ends
        early at the first page hidden from navigation.

        Args:
            uuid: Uuid of the current page
            webspace_key: Webspace of the page
            locale: Content locale

        Returns:
            List of NavigationItem from root to the current page

        Raises:
            NotFoundError: If the page or one of its ancestors is unknown
        """
        entries = self._content_mapper.load_breadcrumb(uuid, locale, webspace_key)

        chain: list[ContentNode] = []
        for entry in entries:
            if entry.depth == 0:
                chain.append(self._content_mapper.load_start_page(webspace_key, locale))
            else:
                chain.append(self._content_mapper.load(entry.uuid, webspace_key, locale))
        chain.append(self._content_mapper.load(uuid, webspace_key, locale))

        logger.debug(f"Breadcrumb chain for {uuid}: {len(chain)} pages")
        return generate_navigation(chain, break_on_hidden=True)
