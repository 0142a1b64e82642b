"""Core data models for Corporate Chronicles."""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class EventCategory(StrEnum):
    """Fixed set of timeline milestone categories."""

    FOUNDING = "founding"
    PRODUCT = "product"
    ACQUISITION = "acquisition"
    SCANDAL = "scandal"
    GENERAL = "general"


class NodeRole(StrEnum):
    """Role of a node in the organizational tree."""

    ROOT = "root"
    PARENT = "parent"
    SUBSIDIARY = "subsidiary"
    DEPARTMENT = "department"
    CHILD = "child"


class MessageRole(StrEnum):
    """Author of a chat message."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class TimelineEvent:
    """One historical milestone.

    ``date_str`` is an optional human-readable date that may be more precise
    than ``year`` (e.g. "Oct 2024").
    """

    year: int
    title: str = ""
    description: str = ""
    category: EventCategory = EventCategory.GENERAL
    date_str: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "year": self.year,
            "title": self.title,
            "description": self.description,
            "category": str(self.category),
        }
        if self.date_str:
            result["dateStr"] = self.date_str
        return result


@dataclass(frozen=True)
class OrgNode:
    """One node of the organizational structure tree."""

    name: str
    role: NodeRole = NodeRole.CHILD
    description: str | None = None
    children: tuple["OrgNode", ...] = ()

    def walk(self) -> Iterator["OrgNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> "OrgNode | None":
        """Return the first node with the given name (case-insensitive), or None."""
        wanted = name.casefold()
        for node in self.walk():
            if node.name.casefold() == wanted:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "role": str(self.role)}
        if self.description:
            result["description"] = self.description
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class GroundingSource:
    """A web citation the model attached to its answer."""

    title: str
    uri: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "uri": self.uri}


@dataclass(frozen=True)
class CompanyDataUpdate:
    """Partial replacement of :class:`CompanyData` requested by the chat model.

    A field set to ``None`` is absent from the update. Present fields are
    complete replacement values, never diffs.
    """

    timeline: tuple[TimelineEvent, ...] | None = None
    structure: OrgNode | None = None

    @property
    def is_empty(self) -> bool:
        return self.timeline is None and self.structure is None


@dataclass(frozen=True)
class CompanyData:
    """Everything displayed about one company."""

    company_name: str
    summary: str
    structure: OrgNode
    timeline: tuple[TimelineEvent, ...] = ()
    sources: tuple[GroundingSource, ...] = ()

    @property
    def founding_event(self) -> TimelineEvent | None:
        """The earliest founding milestone, if any."""
        founding = [e for e in self.timeline if e.category == EventCategory.FOUNDING]
        if not founding:
            return None
        return min(founding, key=lambda e: e.year)

    def apply_update(self, update: CompanyDataUpdate) -> "CompanyData":
        """Return a copy with every field present in ``update`` replaced wholesale."""
        changes: dict[str, Any] = {}
        if update.timeline is not None:
            changes["timeline"] = update.timeline
        if update.structure is not None:
            changes["structure"] = update.structure
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape exchanged with the model."""
        return {
            "companyName": self.company_name,
            "summary": self.summary,
            "timeline": [event.to_dict() for event in self.timeline],
            "structure": self.structure.to_dict(),
            "sources": [source.to_dict() for source in self.sources],
        }


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the conversation log."""

    id: str
    role: MessageRole
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    is_update: bool = False


@dataclass(frozen=True)
class APICallUsage:
    """Usage from a single API call, with the model id for price lookup."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0
    web_searches: int = 0

    @classmethod
    def from_response(cls, model: str, usage: Any) -> "APICallUsage":
        """Build from the ``usage`` object of a Messages API response."""
        web_searches = 0
        server_tool_use = getattr(usage, "server_tool_use", None)
        if server_tool_use is not None:
            web_searches = getattr(server_tool_use, "web_search_requests", 0) or 0

        return cls(
            model=model,
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
            cache_creation_input_tokens=getattr(usage, "cache_creation_input_tokens", 0) or 0,
            cache_read_input_tokens=getattr(usage, "cache_read_input_tokens", 0) or 0,
            web_searches=web_searches,
        )


@dataclass
class Usage:
    """Accumulated API usage across queries and chat turns."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    estimated_cost: float = 0.0

    @property
    def input_tokens(self) -> int:
        return sum(c.input_tokens for c in self.api_calls)

    @property
    def output_tokens(self) -> int:
        return sum(c.output_tokens for c in self.api_calls)

    @property
    def cache_creation_input_tokens(self) -> int:
        return sum(c.cache_creation_input_tokens for c in self.api_calls)

    @property
    def cache_read_input_tokens(self) -> int:
        return sum(c.cache_read_input_tokens for c in self.api_calls)

    @property
    def web_searches(self) -> int:
        return sum(c.web_searches for c in self.api_calls)

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            api_calls=self.api_calls + other.api_calls,
            estimated_cost=self.estimated_cost + other.estimated_cost,
        )

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        self.estimated_cost += other.estimated_cost
        return self
