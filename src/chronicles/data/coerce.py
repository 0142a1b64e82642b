"""Coerce loosely typed model output into the domain model.

The model returns plain JSON (or tool arguments) whose shape is only
approximately what was asked for. Everything here is best-effort: bad
entries are dropped or defaulted and logged, never raised.
"""

import logging
from collections.abc import Iterable
from typing import Any

from chronicles.data.models import (
    CompanyData,
    CompanyDataUpdate,
    EventCategory,
    GroundingSource,
    NodeRole,
    OrgNode,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

UPDATE_FIELDS = frozenset({"timeline", "structure"})


def _str(value: object) -> str:
    return "" if value is None else str(value)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_year(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_timeline_event(raw: dict[str, Any]) -> TimelineEvent | None:
    """Parse a single timeline entry.

    Returns None when the entry has no usable integer year.
    """
    year = _parse_year(raw.get("year"))
    if year is None:
        logger.warning("Dropping timeline event without a valid year: %r", raw.get("title"))
        return None

    category_str = str(raw.get("category", "general")).strip().lower()
    try:
        category = EventCategory(category_str)
    except ValueError:
        category = EventCategory.GENERAL

    return TimelineEvent(
        year=year,
        title=_str(raw.get("title")),
        description=_str(raw.get("description")),
        category=category,
        date_str=_optional_str(raw.get("dateStr")),
    )


def parse_timeline(raw: object) -> tuple[TimelineEvent, ...]:
    if not isinstance(raw, list):
        return ()
    events: list[TimelineEvent] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        event = parse_timeline_event(item)
        if event is not None:
            events.append(event)
    return tuple(events)


def _parse_node(raw: dict[str, Any], *, is_root: bool) -> OrgNode:
    role_str = str(raw.get("role", "child")).strip().lower()
    try:
        role = NodeRole(role_str)
    except ValueError:
        role = NodeRole.CHILD

    if is_root:
        role = NodeRole.ROOT
    elif role == NodeRole.ROOT:
        # Only the top of the tree may be the root
        logger.warning("Demoting nested root node %r to child", raw.get("name"))
        role = NodeRole.CHILD

    raw_children = raw.get("children") or []
    children: list[OrgNode] = []
    if isinstance(raw_children, list):
        for child in raw_children:
            if isinstance(child, dict):
                children.append(_parse_node(child, is_root=False))

    return OrgNode(
        name=_str(raw.get("name")),
        role=role,
        description=_optional_str(raw.get("description")),
        children=tuple(children),
    )


def parse_org_tree(raw: object) -> OrgNode | None:
    """Parse an organizational tree; the top node always becomes the root."""
    if not isinstance(raw, dict):
        return None
    return _parse_node(raw, is_root=True)


def dedupe_sources(sources: Iterable[GroundingSource]) -> tuple[GroundingSource, ...]:
    """Drop sources whose uri was already seen, keeping first-appearance order."""
    seen_uris: set[str] = set()
    unique: list[GroundingSource] = []
    for source in sources:
        if source.uri in seen_uris:
            continue
        seen_uris.add(source.uri)
        unique.append(source)
    return tuple(unique)


def parse_company_data(
    raw: dict[str, Any],
    *,
    fallback_name: str,
    sources: Iterable[GroundingSource] = (),
) -> CompanyData:
    """Build CompanyData from the model's JSON object.

    Missing optional fields are defaulted rather than rejected.

    Args:
        raw: Parsed JSON object.
        fallback_name: Name used when ``companyName`` is missing.
        sources: Grounding citations to attach (deduplicated here).
    """
    company_name = _optional_str(raw.get("companyName")) or fallback_name

    structure = parse_org_tree(raw.get("structure"))
    if structure is None:
        logger.warning("Response for %r has no structure, using a lone root", company_name)
        structure = OrgNode(name=company_name, role=NodeRole.ROOT)

    return CompanyData(
        company_name=company_name,
        summary=_str(raw.get("summary")),
        timeline=parse_timeline(raw.get("timeline")),
        structure=structure,
        sources=dedupe_sources(sources),
    )


def parse_update(args: dict[str, Any]) -> CompanyDataUpdate:
    """Validate ``update_company_data`` tool arguments.

    Keys outside the tool schema are dropped. A field whose value has the
    wrong shape is treated as absent.
    """
    extra = set(args) - UPDATE_FIELDS
    if extra:
        logger.warning("Ignoring undeclared update fields: %s", ", ".join(sorted(extra)))

    timeline: tuple[TimelineEvent, ...] | None = None
    if "timeline" in args:
        if isinstance(args["timeline"], list):
            timeline = parse_timeline(args["timeline"])
        else:
            logger.warning("Ignoring timeline update that is not a list")

    structure: OrgNode | None = None
    if "structure" in args:
        structure = parse_org_tree(args["structure"])
        if structure is None:
            logger.warning("Ignoring structure update that is not an object")

    return CompanyDataUpdate(timeline=timeline, structure=structure)
