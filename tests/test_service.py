"""Tests for NavigationService."""

from collections.abc import Callable
from unittest.mock import Mock, call

import pytest
from sitenav.core.content import PublicationState
from sitenav.core.navigation import NavigationOptions
from sitenav.core.repository import ContentRepository, Page
from sitenav.core.service import BreadcrumbEntry, NavigationService, QueryOptions
from sitenav.errors import NotFoundError

MakePage = Callable[..., Page]

RECORDS = [
    {
        "title": "Products",
        "url": "/products",
        "uuid": "products",
        "nodeType": "page",
        "children": [
            {"title": "Shoes", "url": "/products/shoes", "uuid": "shoes", "nodeType": "page"},
        ],
    },
]


@pytest.fixture
def content_mapper() -> Mock:
    return Mock()


@pytest.fixture
def content_query() -> Mock:
    query = Mock()
    query.execute.return_value = RECORDS
    return query


@pytest.fixture
def session_manager() -> Mock:
    manager = Mock()
    manager.get_content_root_depth.return_value = 3
    return manager


@pytest.fixture
def service(
    content_mapper: Mock,
    content_query: Mock,
    session_manager: Mock,
) -> NavigationService:
    return NavigationService(content_mapper, content_query, session_manager)


class TestGetNavigation:
    """Tests for NavigationService.get_navigation()."""

    def test__depth__offset_by_content_root(
        self,
        service: NavigationService,
        content_query: Mock,
        session_manager: Mock,
    ) -> None:
        """Add the content root depth to the requested depth."""
        service.get_navigation(
            "products",
            "example",
            "en",
            NavigationOptions(depth=2, context="main"),
        )

        session_manager.get_content_root_depth.assert_called_once_with("example")
        content_query.execute.assert_called_once_with(
            "example",
            ["en"],
            QueryOptions(depth=5, context="main", parent="products"),
            False,
        )

    def test__default_options__depth_one(
        self,
        service: NavigationService,
        content_query: Mock,
    ) -> None:
        """Use depth 1, nested and no context by default."""
        service.get_navigation("products", "example", "en")

        content_query.execute.assert_called_once_with(
            "example",
            ["en"],
            QueryOptions(depth=4, context=None, parent="products"),
            False,
        )

    def test__unlimited_depth__not_offset(
        self,
        service: NavigationService,
        content_query: Mock,
        session_manager: Mock,
    ) -> None:
        """Leave depth unset and skip the root depth lookup."""
        service.get_navigation("products", "example", "en", NavigationOptions(depth=None))

        session_manager.get_content_root_depth.assert_not_called()
        options = content_query.execute.call_args.args[2]
        assert options.depth is None

    def test__flat__passed_to_query(
        self,
        service: NavigationService,
        content_query: Mock,
    ) -> None:
        """Forward the flat flag to the query executor."""
        service.get_navigation(None, "example", "de", NavigationOptions(flat=True))

        assert content_query.execute.call_args.args[3] is True
        assert content_query.execute.call_args.args[1] == ["de"]

    def test__records__converted_to_items(self, service: NavigationService) -> None:
        """Convert query records into navigation items."""
        result = service.get_navigation("products", "example", "en")

        assert [item.id for item in result] == ["products"]
        assert result[0].children[0].title == "Shoes"
        assert result[0].reference is None

    def test__empty_result__returns_empty_list(
        self,
        service: NavigationService,
        content_query: Mock,
    ) -> None:
        """Return empty list when the query finds nothing."""
        content_query.execute.return_value = []

        assert service.get_navigation("products", "example", "en") == []

    def test__query_error__propagates(
        self,
        service: NavigationService,
        content_query: Mock,
    ) -> None:
        """Let collaborator errors reach the caller unchanged."""
        error = NotFoundError("Page not found: missing")
        content_query.execute.side_effect = error

        with pytest.raises(NotFoundError) as exc_info:
            service.get_navigation("missing", "example", "en")

        assert exc_info.value is error


class TestGetRootNavigation:
    """Tests for NavigationService.get_root_navigation()."""

    def test__no_parent__queries_whole_webspace(
        self,
        service: NavigationService,
        content_query: Mock,
    ) -> None:
        """Query without parent scope."""
        service.get_root_navigation("example", "en", NavigationOptions(depth=1, context="footer"))

        content_query.execute.assert_called_once_with(
            "example",
            ["en"],
            QueryOptions(depth=4, context="footer", parent=None),
            False,
        )


class TestGetBreadcrumb:
    """Tests for NavigationService.get_breadcrumb()."""

    def test__depth_zero__loads_start_page(
        self,
        service: NavigationService,
        content_mapper: Mock,
        make_page: MakePage,
    ) -> None:
        """Load start page for depth 0 and other pages by uuid."""
        start_page = make_page("home", depth=3)
        u2 = make_page("u2", depth=4)
        u3 = make_page("u3", depth=5)
        content_mapper.load_breadcrumb.return_value = [
            BreadcrumbEntry(uuid="root", depth=0),
            BreadcrumbEntry(uuid="u2", depth=1),
        ]
        content_mapper.load_start_page.return_value = start_page
        content_mapper.load.side_effect = [u2, u3]

        result = service.get_breadcrumb("u3", "example", "en")

        content_mapper.load_breadcrumb.assert_called_once_with("u3", "en", "example")
        content_mapper.load_start_page.assert_called_once_with("example", "en")
        assert content_mapper.load.call_args_list == [
            call("u2", "example", "en"),
            call("u3", "example", "en"),
        ]
        assert [item.id for item in result] == ["home", "u2", "u3"]
        assert [item.reference for item in result] == [start_page, u2, u3]

    def test__hidden_ancestor__truncates_breadcrumb(
        self,
        service: NavigationService,
        content_mapper: Mock,
        make_page: MakePage,
    ) -> None:
        """Stop the trail at the first hidden ancestor."""
        content_mapper.load_breadcrumb.return_value = [
            BreadcrumbEntry(uuid="home", depth=0),
            BreadcrumbEntry(uuid="internal", depth=1),
        ]
        content_mapper.load_start_page.return_value = make_page("home", depth=3)
        content_mapper.load.side_effect = [
            make_page("internal", nav_contexts=None),
            make_page("team", depth=5),
        ]

        result = service.get_breadcrumb("team", "example", "en")

        assert [item.id for item in result] == ["home"]

    def test__hidden_start_page__returns_empty(
        self,
        service: NavigationService,
        content_mapper: Mock,
        make_page: MakePage,
    ) -> None:
        """Return nothing when the first chain element is hidden."""
        content_mapper.load_breadcrumb.return_value = [BreadcrumbEntry(uuid="home", depth=0)]
        content_mapper.load_start_page.return_value = make_page(
            "home", state=PublicationState.DRAFT,
        )
        content_mapper.load.return_value = make_page("about")

        assert service.get_breadcrumb("about", "example", "en") == []

    def test__unknown_page__propagates_not_found(
        self,
        service: NavigationService,
        content_mapper: Mock,
    ) -> None:
        """Let NotFoundError from the content mapper reach the caller."""
        content_mapper.load_breadcrumb.side_effect = NotFoundError("Page not found: nope")

        with pytest.raises(NotFoundError, match="nope"):
            service.get_breadcrumb("nope", "example", "en")


class TestServiceWithRepository:
    """Tests for NavigationService backed by ContentRepository."""

    @pytest.fixture
    def repo_service(self, repository: ContentRepository) -> NavigationService:
        return NavigationService(repository, repository, repository)

    def test__root_navigation__first_level(self, repo_service: NavigationService) -> None:
        """Return the start page's visible children."""
        result = repo_service.get_root_navigation("example", "en")

        assert [item.id for item in result] == ["products", "about"]
        assert all(item.children == () for item in result)

    def test__root_navigation__main_context_two_levels(
        self,
        repo_service: NavigationService,
    ) -> None:
        """Limit depth relative to the content root."""
        result = repo_service.get_root_navigation(
            "example",
            "en",
            NavigationOptions(depth=2, context="main"),
        )

        assert [item.id for item in result] == ["products"]
        assert [child.id for child in result[0].children] == ["shoes"]
        assert result[0].children[0].children == ()

    def test__navigation__depth_is_absolute(self, repo_service: NavigationService) -> None:
        """Count depth from the webspace root, not from the parent."""
        result = repo_service.get_navigation(
            "products",
            "example",
            "en",
            NavigationOptions(depth=2),
        )

        assert [item.id for item in result] == ["shoes"]
        assert result[0].children == ()

    def test__navigation__flat_unlimited(self, repo_service: NavigationService) -> None:
        """Flatten the whole webspace."""
        result = repo_service.get_root_navigation(
            "example",
            "en",
            NavigationOptions(depth=None, flat=True, context="main"),
        )

        assert [item.id for item in result] == ["products", "shoes", "sneakers", "team"]

    def test__breadcrumb__full_chain(self, repo_service: NavigationService) -> None:
        """Build the trail from the start page to the page."""
        result = repo_service.get_breadcrumb("sneakers", "example", "en")

        assert [item.id for item in result] == ["home", "products", "shoes", "sneakers"]
        assert all(item.children == () for item in result)

    def test__breadcrumb__stops_at_hidden_ancestor(
        self,
        repo_service: NavigationService,
    ) -> None:
        """Cut the trail at a page without navigation contexts."""
        result = repo_service.get_breadcrumb("team", "example", "en")

        assert [item.id for item in result] == ["home"]

    def test__breadcrumb__unknown_page__raises_not_found(
        self,
        repo_service: NavigationService,
    ) -> None:
        """Raise NotFoundError for unknown uuid."""
        with pytest.raises(NotFoundError, match="missing"):
            repo_service.get_breadcrumb("missing", "example", "en")

    def test__navigation__unknown_webspace__raises_not_found(
        self,
        repo_service: NavigationService,
    ) -> None:
        """Raise NotFoundError for unknown webspace."""
        with pytest.raises(NotFoundError, match="Webspace not found"):
            repo_service.get_root_navigation("other", "en")
