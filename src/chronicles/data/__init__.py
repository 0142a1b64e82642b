"""Data models for Corporate Chronicles."""

from chronicles.data.coerce import (
    dedupe_sources,
    parse_company_data,
    parse_org_tree,
    parse_timeline,
    parse_timeline_event,
    parse_update,
)
from chronicles.data.models import (
    APICallUsage,
    ChatMessage,
    CompanyData,
    CompanyDataUpdate,
    EventCategory,
    GroundingSource,
    MessageRole,
    NodeRole,
    OrgNode,
    TimelineEvent,
    Usage,
)

__all__ = [
    "APICallUsage",
    "ChatMessage",
    "CompanyData",
    "CompanyDataUpdate",
    "EventCategory",
    "GroundingSource",
    "MessageRole",
    "NodeRole",
    "OrgNode",
    "TimelineEvent",
    "Usage",
    "dedupe_sources",
    "parse_company_data",
    "parse_org_tree",
    "parse_timeline",
    "parse_timeline_event",
    "parse_update",
]
