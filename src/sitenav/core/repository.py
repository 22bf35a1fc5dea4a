"""In-memory content repository.

Holds the page trees of one or more webspaces and implements the content
mapper, query executor and session manager protocols on top of them.
Pages are stored in a flat list with parent/children relationships
tracked by indices, like a site structure loaded once and queried often.

Content file format (JSON):

    {
        "webspaces": {
            "example": {
                "root_depth": 3,
                "start_page": {
                    "uuid": "home",
                    "title": "Home",
                    "url": "/",
                    "children": [
                        {"uuid": "about", "title": "About", "url": "/about",
                         "nav_contexts": ["main", "footer"]}
                    ]
                }
            }
        }
    }

Locales are accepted by every operation but not resolved: a repository
holds a single translation of each page.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from sitenav.core.content import ContentRecord, PublicationState
from sitenav.core.navigation import in_navigation
from sitenav.core.service import BreadcrumbEntry, QueryOptions
from sitenav.core.types import URLPath, Uuid
from sitenav.errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ROOT_DEPTH = 3


@dataclass(frozen=True)
class Page:
    """Content page data."""

    uuid: Uuid
    title: str
    url: URLPath
    node_type: str
    state: PublicationState
    nav_contexts: tuple[str, ...] | None
    depth: int
    children: tuple[Page, ...] = ()


@dataclass(frozen=True)
class Webspace:
    """Webspace root information."""

    key: str
    root_depth: int
    start_idx: int


class ContentRepository:
    """Page trees of several webspaces with uuid lookups.

    Provides O(1) uuid lookups and O(d) breadcrumb building where d is the
    page depth.
    """

    __slots__ = ("_index", "_pages", "_parents", "_webspaces")

    def __init__(
        self,
        pages: list[Page],
        parents: list[int | None],
        webspaces: dict[str, Webspace],
        index: dict[tuple[str, str], int],
    ) -> None:
        """Initialize repository.

        Args:
            pages: Flat list of all pages, each holding its subtree
            parents: Parent index for each page (None for start pages)
            webspaces: Webspaces by key
            index: Page index by (webspace key, uuid)
        """
        self._pages = pages
        self._parents = parents
        self._webspaces = webspaces
        self._index = index

    @property
    def webspace_keys(self) -> list[str]:
        """Keys of all webspaces in insertion order."""
        return list(self._webspaces)

    def get_tree(self, webspace_key: str) -> Page:
        """Get the webspace's start page with its full subtree.

        Raises:
            NotFoundError: If the webspace is unknown
        """
        return self._pages[self._get_webspace(webspace_key).start_idx]

    def get_content_root_depth(self, webspace_key: str) -> int:
        """Get the depth of the webspace's start page."""
        return self._get_webspace(webspace_key).root_depth

    def load(self, uuid: str, webspace_key: str, locale: str) -> Page:
        """Load a single page without its subtree.

        Raises:
            NotFoundError: If the webspace or page is unknown
        """
        return replace(self._pages[self._get_index(uuid, webspace_key)], children=())

    def load_start_page(self, webspace_key: str, locale: str) -> Page:
        """Load the webspace's start page without its subtree."""
        webspace = self._get_webspace(webspace_key)
        return replace(self._pages[webspace.start_idx], children=())

    def load_breadcrumb(
        self,
        uuid: str,
        locale: str,
        webspace_key: str,
    ) -> list[BreadcrumbEntry]:
        """List the ancestors of a page, start page first.

        Depths are relative to the content root, so the start page has
        depth 0. The page itself is not included.

        Raises:
            NotFoundError: If the webspace or page is unknown
        """
        webspace = self._get_webspace(webspace_key)
        idx = self._get_index(uuid, webspace_key)

        entries: list[BreadcrumbEntry] = []
        current = self._parents[idx]
        while current is not None:
            page = self._pages[current]
            entries.append(
                BreadcrumbEntry(uuid=page.uuid, depth=page.depth - webspace.root_depth),
            )
            current = self._parents[current]

        entries.reverse()
        return entries

    def execute(
        self,
        webspace_key: str,
        locales: Sequence[str],
        options: QueryOptions,
        flat: bool = False,
    ) -> list[ContentRecord]:
        """Query pages below a parent as navigation records.

        Applies the navigation filter, the absolute depth limit and the
        parent scope. Hidden pages drop their subtree, except in flat mode
        where their visible descendants are kept.

        Raises:
            NotFoundError: If the webspace or parent page is unknown
        """
        webspace = self._get_webspace(webspace_key)
        if options.parent is None:
            root = self._pages[webspace.start_idx]
        else:
            root = self._pages[self._get_index(options.parent, webspace_key)]

        return self._collect(root.children, options, flat)

    def _collect(
        self,
        pages: Sequence[Page],
        options: QueryOptions,
        flat: bool,
    ) -> list[ContentRecord]:
        records: list[ContentRecord] = []
        for page in pages:
            if options.depth is not None and page.depth > options.depth:
                continue

            record: ContentRecord = {
                "title": page.title,
                "url": page.url,
                "uuid": page.uuid,
                "nodeType": page.node_type,
            }
            if in_navigation(page, options.context):
                children = self._collect(page.children, options, flat)
                if flat:
                    records.append(record)
                    records.extend(children)
                else:
                    record["children"] = children
                    records.append(record)
            elif flat:
                records.extend(self._collect(page.children, options, flat))

        return records

    def _get_webspace(self, webspace_key: str) -> Webspace:
        webspace = self._webspaces.get(webspace_key)
        if webspace is None:
            raise NotFoundError(f"Webspace not found: {webspace_key}")
        return webspace

    def _get_index(self, uuid: str, webspace_key: str) -> int:
        self._get_webspace(webspace_key)
        idx = self._index.get((webspace_key, uuid))
        if idx is None:
            raise NotFoundError(f"Page not found: {uuid} in webspace {webspace_key}")
        return idx


class ContentRepositoryBuilder:
    """Builder for constructing ContentRepository instances.

    Pages must be added parent first; the first page of a webspace is its
    start page.
    """

    def __init__(self) -> None:
        self._pages: list[Page] = []
        self._children: list[list[int]] = []
        self._parents: list[int | None] = []
        self._webspaces: dict[str, Webspace] = {}
        self._root_depths: dict[str, int] = {}
        self._owners: list[str] = []
        self._index: dict[tuple[str, str], int] = {}

    def add_webspace(self, key: str, root_depth: int = DEFAULT_ROOT_DEPTH) -> None:
        """Register a webspace.

        Raises:
            ConfigurationError: If the webspace already exists
        """
        if key in self._root_depths:
            raise ConfigurationError(f"Duplicate webspace: {key}")
        self._root_depths[key] = root_depth

    def add_page(
        self,
        webspace_key: str,
        uuid: str,
        title: str,
        url: str,
        *,
        node_type: str = "page",
        state: PublicationState = PublicationState.PUBLISHED,
        nav_contexts: Sequence[str] | None = (),
        parent_idx: int | None = None,
    ) -> int:
        """Add a page to a webspace.

        Args:
            webspace_key: Webspace the page belongs to
            uuid: Page uuid, unique within the webspace
            title: Page title
            url: Page URL
            node_type: Node type tag
            state: Publication state
            nav_contexts: Navigation contexts, None for no navigation at all
            parent_idx: Index of parent page, None for the start page

        Returns:
            Index of the added page

        Raises:
            ConfigurationError: If the page cannot be placed
        """
        if webspace_key not in self._root_depths:
            raise ConfigurationError(f"Unknown webspace: {webspace_key}")
        if (webspace_key, uuid) in self._index:
            raise ConfigurationError(f"Duplicate page uuid in {webspace_key}: {uuid}")

        if parent_idx is None:
            if webspace_key in self._webspaces:
                raise ConfigurationError(f"Webspace {webspace_key} already has a start page")
            depth = self._root_depths[webspace_key]
        else:
            if self._owners[parent_idx] != webspace_key:
                raise ConfigurationError(f"Parent of {uuid} belongs to another webspace")
            depth = self._pages[parent_idx].depth + 1

        idx = len(self._pages)
        self._pages.append(
            Page(
                uuid=Uuid(uuid),
                title=title,
                url=URLPath(url),
                node_type=node_type,
                state=state,
                nav_contexts=None if nav_contexts is None else tuple(nav_contexts),
                depth=depth,
            ),
        )
        self._children.append([])
        self._parents.append(parent_idx)
        self._owners.append(webspace_key)
        self._index[(webspace_key, uuid)] = idx

        if parent_idx is None:
            self._webspaces[webspace_key] = Webspace(
                key=webspace_key,
                root_depth=depth,
                start_idx=idx,
            )
        else:
            self._children[parent_idx].append(idx)

        return idx

    def build(self) -> ContentRepository:
        """Build the ContentRepository instance.

        Raises:
            ConfigurationError: If a webspace has no start page
        """
        for key in self._root_depths:
            if key not in self._webspaces:
                raise ConfigurationError(f"Webspace {key} has no start page")

        # Children always come after their parent, so build back to front
        pages = list(self._pages)
        for idx in reversed(range(len(pages))):
            children = tuple(pages[i] for i in self._children[idx])
            pages[idx] = replace(pages[idx], children=children)

        return ContentRepository(
            pages=pages,
            parents=list(self._parents),
            webspaces=dict(self._webspaces),
            index=dict(self._index),
        )


def load_repository(path: Path) -> ContentRepository:
    """Load a content repository from a JSON content file.

    Args:
        path: Path to the content file

    Returns:
        ContentRepository with all webspaces of the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file content is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Content file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid content file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Content file must contain an object")

    webspaces = data.get("webspaces")
    if not isinstance(webspaces, dict):
        raise ConfigurationError("webspaces must be an object")

    builder = ContentRepositoryBuilder()
    for key, webspace in webspaces.items():
        if not isinstance(webspace, dict):
            raise ConfigurationError(f"webspaces.{key} must be an object")

        root_depth = webspace.get("root_depth", DEFAULT_ROOT_DEPTH)
        if not isinstance(root_depth, int) or isinstance(root_depth, bool):
            raise ConfigurationError(f"webspaces.{key}.root_depth must be an integer")

        builder.add_webspace(key, root_depth)
        _add_page_tree(builder, key, webspace.get("start_page"), None, f"webspaces.{key}.start_page")

    repository = builder.build()
    logger.info(f"Loaded content for {len(webspaces)} webspace(s) from {path}")
    return repository


def _add_page_tree(
    builder: ContentRepositoryBuilder,
    webspace_key: str,
    data: object,
    parent_idx: int | None,
    location: str,
) -> None:
    """Add a page and its children from raw content file data."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{location} must be an object")

    uuid = data.get("uuid")
    if not isinstance(uuid, str) or not uuid:
        raise ConfigurationError(f"{location}.uuid must be a non-empty string")

    title = data.get("title")
    if not isinstance(title, str) or not title:
        raise ConfigurationError(f"{location}.title must be a non-empty string")

    url = data.get("url", "")
    if not isinstance(url, str):
        raise ConfigurationError(f"{location}.url must be a string")

    node_type = data.get("type", "page")
    if not isinstance(node_type, str):
        raise ConfigurationError(f"{location}.type must be a string")

    state_raw = data.get("state", PublicationState.PUBLISHED.value)
    try:
        state = PublicationState(state_raw)
    except ValueError as e:
        allowed = ", ".join(s.value for s in PublicationState)
        raise ConfigurationError(f"{location}.state must be one of: {allowed}") from e

    nav_contexts = data.get("nav_contexts", [])
    if nav_contexts is not None:
        if not isinstance(nav_contexts, list):
            raise ConfigurationError(f"{location}.nav_contexts must be a list")
        for item in nav_contexts:
            if not isinstance(item, str):
                raise ConfigurationError(f"{location}.nav_contexts items must be strings")

    children = data.get("children", [])
    if not isinstance(children, list):
        raise ConfigurationError(f"{location}.children must be a list")

    idx = builder.add_page(
        webspace_key,
        uuid,
        title,
        url,
        node_type=node_type,
        state=state,
        nav_contexts=nav_contexts,
        parent_idx=parent_idx,
    )
    for i, child in enumerate(children):
        _add_page_tree(builder, webspace_key, child, idx, f"{location}.children[{i}]")
