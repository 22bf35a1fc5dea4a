"""Navigation tree builder.

Builds navigation trees from content nodes for menus and breadcrumbs.
Navigation is a view layer over the content hierarchy: input nodes are
never modified, every call produces a new tree of NavigationItem.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypedDict

from sitenav.core.content import (
    ContentNode,
    ContentRecord,
    LiveTree,
    PublicationState,
    RecordTree,
)
from sitenav.errors import ConfigurationError


class NavigationItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    title: str
    url: str
    id: str
    type: str
    children: list[NavigationItemDict]


@dataclass(frozen=True)
class NavigationItem:
    """Navigation item with children for menus and breadcrumbs."""

    title: str
    url: str
    id: str
    type: str
    children: tuple[NavigationItem, ...] = ()
    reference: ContentNode | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> NavigationItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavigationItemDict = {
            "title": self.title,
            "url": self.url,
            "id": self.id,
            "type": self.type,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class NavigationOptions:
    """Parameters of a navigation request.

    Attributes:
        depth: Levels below the webspace root to include, None for unlimited
        flat: Return a single ordered list instead of a nested tree
        context: Navigation context to filter by, None for any context
    """

    depth: int | None = 1
    flat: bool = False
    context: str | None = None


def in_navigation(node: ContentNode, context: str | None = None) -> bool:
    """Check whether a content node should be shown in navigation.

    Unpublished nodes are always hidden. Published nodes are shown when no
    context is requested or when the requested context is one of theirs.

    Args:
        node: Content node to check
        context: Navigation context (e.g., "main", "footer") or None

    Returns:
        True if the node belongs in navigation

    Raises:
        ConfigurationError: If the node's navigation contexts are not a list
    """
    if node.state is not PublicationState.PUBLISHED:
        return False

    contexts = node.nav_contexts
    if contexts is None:
        return False
    if not isinstance(contexts, (list, tuple)):
        raise ConfigurationError(
            f"nav_contexts of node {node.uuid!r} must be a list, "
            f"got {type(contexts).__name__}",
        )

    return context is None or context in contexts


def generate_navigation(
    nodes: Iterable[ContentNode],
    *,
    flat: bool = False,
    context: str | None = None,
    break_on_hidden: bool = False,
) -> list[NavigationItem]:
    """Build navigation items from live content nodes.

    Hidden nodes are dropped together with their subtree, except in flat
    mode where their visible descendants move up to the hidden node's place.
    With break_on_hidden the first hidden node ends this level; it is meant
    for linear breadcrumb chains and is not passed down to children.

    Args:
        nodes: Content nodes in document order
        flat: Produce a depth-first list with empty children
        context: Navigation context filter
        break_on_hidden: Stop at the first hidden node (non-flat only)

    Returns:
        List of NavigationItem in document order
    """
    result: list[NavigationItem] = []

    for node in nodes:
        if in_navigation(node, context):
            children = generate_navigation(node.children, flat=flat, context=context)
            if flat:
                result.append(_to_item(node, ()))
                result.extend(children)
            else:
                result.append(_to_item(node, tuple(children)))
        elif flat:
            result.extend(generate_navigation(node.children, flat=True, context=context))
        elif break_on_hidden:
            break

    return result


def _to_item(node: ContentNode, children: tuple[NavigationItem, ...]) -> NavigationItem:
    return NavigationItem(
        title=node.title,
        url=node.url,
        id=node.uuid,
        type=node.node_type,
        children=children,
        reference=node,
    )


def convert_records(records: Sequence[ContentRecord]) -> list[NavigationItem]:
    """Convert query records into navigation items.

    The query executor has already applied visibility and depth limits,
    so records are converted as they are. Items carry no reference.

    Args:
        records: Records with title, url, uuid, nodeType and optional children

    Returns:
        List of NavigationItem trees

    Raises:
        ConfigurationError: If a record lacks a required key
    """
    return [_record_to_item(record) for record in records]


def _record_to_item(record: ContentRecord) -> NavigationItem:
    """Recursively build NavigationItem from a record."""
    try:
        children = convert_records(record.get("children", []))
        return NavigationItem(
            title=record["title"],
            url=record["url"],
            id=record["uuid"],
            type=record["nodeType"],
            children=tuple(children),
        )
    except KeyError as e:
        raise ConfigurationError(f"Navigation record is missing {e.args[0]!r}") from e


def build_navigation(
    tree: RecordTree | LiveTree,
    options: NavigationOptions | None = None,
) -> list[NavigationItem]:
    """Build navigation from either input shape.

    Record trees are converted directly. Live trees are filtered with the
    flat and context settings from options.
    """
    if isinstance(tree, RecordTree):
        return convert_records(tree.records)

    options = options or NavigationOptions()
    return generate_navigation(tree.nodes, flat=options.flat, context=options.context)
