"""Navigation menus and breadcrumbs for content page trees.

This package turns content trees into NavigationItem trees, filtered by
publication state and navigation context.
"""

from .core.content import ContentRecord, LiveTree, PublicationState, RecordTree
from .core.navigation import (
    NavigationItem,
    NavigationOptions,
    build_navigation,
    convert_records,
    generate_navigation,
    in_navigation,
)
from .core.service import BreadcrumbEntry, NavigationService, QueryOptions
from .errors import ConfigurationError, NotFoundError, SitenavError

__all__ = [
    "BreadcrumbEntry",
    "ConfigurationError",
    "ContentRecord",
    "LiveTree",
    "NavigationItem",
    "NavigationOptions",
    "NavigationService",
    "NotFoundError",
    "PublicationState",
    "QueryOptions",
    "RecordTree",
    "SitenavError",
    "build_navigation",
    "convert_records",
    "generate_navigation",
    "in_navigation",
]
