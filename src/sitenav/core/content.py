"""Content shapes consumed by the navigation builder.

Content is owned by the repository. Navigation only reads it, either as
live content objects that still need visibility filtering, or as plain
records already filtered by the query executor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import NotRequired, Protocol, TypedDict


class PublicationState(Enum):
    """Lifecycle state of a content node."""

    DRAFT = "draft"
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"


class ContentNode(Protocol):
    """Protocol for live content objects returned by the content mapper."""

    @property
    def uuid(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def url(self) -> str: ...

    @property
    def node_type(self) -> str: ...

    @property
    def state(self) -> PublicationState: ...

    @property
    def nav_contexts(self) -> Sequence[str] | None: ...

    @property
    def depth(self) -> int: ...

    @property
    def children(self) -> Sequence[ContentNode]: ...


class ContentRecord(TypedDict):
    """Row returned by the content query executor."""

    title: str
    url: str
    uuid: str
    nodeType: str
    children: NotRequired[list[ContentRecord]]


@dataclass(frozen=True)
class RecordTree:
    """Query result already filtered by the executor."""

    records: Sequence[ContentRecord]


@dataclass(frozen=True)
class LiveTree:
    """Live content objects that still need visibility filtering."""

    nodes: Sequence[ContentNode]
