"""Shared test fixtures."""

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from sitenav.core.content import PublicationState
from sitenav.core.repository import ContentRepository, ContentRepositoryBuilder, Page

SAMPLE_CONTENT = {
    "webspaces": {
        "example": {
            "root_depth": 3,
            "start_page": {
                "uuid": "home",
                "title": "Home",
                "url": "/",
                "nav_contexts": ["main"],
                "children": [
                    {
                        "uuid": "products",
                        "title": "Products",
                        "url": "/products",
                        "nav_contexts": ["main", "footer"],
                        "children": [
                            {
                                "uuid": "shoes",
                                "title": "Shoes",
                                "url": "/products/shoes",
                                "nav_contexts": ["main"],
                                "children": [
                                    {
                                        "uuid": "sneakers",
                                        "title": "Sneakers",
                                        "url": "/products/shoes/sneakers",
                                        "nav_contexts": ["main"],
                                    },
                                ],
                            },
                            {
                                "uuid": "hats",
                                "title": "Hats",
                                "url": "/products/hats",
                                "state": "draft",
                                "nav_contexts": ["main"],
                            },
                        ],
                    },
                    {
                        "uuid": "about",
                        "title": "About",
                        "url": "/about",
                        "nav_contexts": ["footer"],
                    },
                    {
                        "uuid": "internal",
                        "title": "Internal",
                        "url": "/internal",
                        "nav_contexts": None,
                        "children": [
                            {
                                "uuid": "team",
                                "title": "Team",
                                "url": "/internal/team",
                                "nav_contexts": ["main"],
                            },
                        ],
                    },
                    {
                        "uuid": "news",
                        "title": "News",
                        "url": "/news",
                        "state": "unpublished",
                        "nav_contexts": ["main"],
                    },
                ],
            },
        },
    },
}


@pytest.fixture
def content_file(tmp_path: Path) -> Path:
    """Write the sample content tree to a JSON file."""
    path = tmp_path / "content.json"
    path.write_text(json.dumps(SAMPLE_CONTENT))
    return path


@pytest.fixture
def repository() -> ContentRepository:
    """Build the sample content tree with the repository builder.

    home (main)
    ├── products (main, footer)
    │   ├── shoes (main)
    │   │   └── sneakers (main)
    │   └── hats (draft)
    ├── about (footer)
    ├── internal (no navigation)
    │   └── team (main)
    └── news (unpublished)
    """
    builder = ContentRepositoryBuilder()
    builder.add_webspace("example", root_depth=3)
    home = builder.add_page("example", "home", "Home", "/", nav_contexts=["main"])
    products = builder.add_page(
        "example", "products", "Products", "/products",
        nav_contexts=["main", "footer"], parent_idx=home,
    )
    shoes = builder.add_page(
        "example", "shoes", "Shoes", "/products/shoes",
        nav_contexts=["main"], parent_idx=products,
    )
    builder.add_page(
        "example", "sneakers", "Sneakers", "/products/shoes/sneakers",
        nav_contexts=["main"], parent_idx=shoes,
    )
    builder.add_page(
        "example", "hats", "Hats", "/products/hats",
        state=PublicationState.DRAFT, nav_contexts=["main"], parent_idx=products,
    )
    builder.add_page(
        "example", "about", "About", "/about",
        nav_contexts=["footer"], parent_idx=home,
    )
    internal = builder.add_page(
        "example", "internal", "Internal", "/internal",
        nav_contexts=None, parent_idx=home,
    )
    builder.add_page(
        "example", "team", "Team", "/internal/team",
        nav_contexts=["main"], parent_idx=internal,
    )
    builder.add_page(
        "example", "news", "News", "/news",
        state=PublicationState.UNPUBLISHED, nav_contexts=["main"], parent_idx=home,
    )
    return builder.build()


@pytest.fixture
def make_page() -> Callable[..., Page]:
    """Factory for standalone pages used as live content nodes."""

    def _make_page(
        uuid: str,
        *,
        title: str | None = None,
        state: PublicationState = PublicationState.PUBLISHED,
        nav_contexts: Sequence[str] | None = ("main",),
        depth: int = 4,
        children: Sequence[Page] = (),
    ) -> Page:
        return Page(
            uuid=uuid,
            title=title or uuid.title(),
            url=f"/{uuid}",
            node_type="page",
            state=state,
            nav_contexts=nav_contexts,
            depth=depth,
            children=tuple(children),
        )

    return _make_page
