"""Plain-text rendering of company data for terminal front-ends."""

from collections.abc import Iterable

from chronicles.data import ChatMessage, CompanyData, GroundingSource, MessageRole, OrgNode, TimelineEvent

MAX_SOURCES = 6


def chronological(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Sort events by year, keeping source order within a year."""
    return sorted(events, key=lambda e: e.year)


def founding_label(data: CompanyData) -> str:
    event = data.founding_event
    if event is None:
        return "N/A"
    return event.date_str or str(event.year)


def render_summary(data: CompanyData) -> str:
    return "\n".join(
        [
            data.company_name,
            "=" * len(data.company_name),
            data.summary,
            f"Founding Date: {founding_label(data)}",
        ]
    )


def render_timeline(events: Iterable[TimelineEvent]) -> str:
    lines: list[str] = []
    for event in chronological(events):
        when = event.date_str or str(event.year)
        lines.append(f"{when:>12}  [{event.category}] {event.title}")
        if event.description:
            lines.append(f"{'':>12}  {event.description}")
    return "\n".join(lines) if lines else "(no timeline events)"


def _render_node(node: OrgNode, prefix: str, is_last: bool, lines: list[str]) -> None:
    connector = "└── " if is_last else "├── "
    label = f"{node.name} ({node.role})"
    if node.description:
        label += f" - {node.description}"
    lines.append(prefix + connector + label)
    child_prefix = prefix + ("    " if is_last else "│   ")
    for i, child in enumerate(node.children):
        _render_node(child, child_prefix, i == len(node.children) - 1, lines)


def render_org_tree(root: OrgNode) -> str:
    """Draw the structure as an indented tree, root first."""
    label = f"{root.name} ({root.role})"
    if root.description:
        label += f" - {root.description}"
    lines = [label]
    for i, child in enumerate(root.children):
        _render_node(child, "", i == len(root.children) - 1, lines)
    return "\n".join(lines)


def render_branch(root: OrgNode, name: str) -> str | None:
    """Draw the part of the tree under the unit called ``name``, or None if absent."""
    node = root.find(name.strip())
    return render_org_tree(node) if node is not None else None


def render_sources(sources: Iterable[GroundingSource], limit: int = MAX_SOURCES) -> str:
    items = list(sources)
    if not items:
        return "No specific source metadata returned."
    return "\n".join(f"- {s.title or s.uri} <{s.uri}>" for s in items[:limit])


def render_message(message: ChatMessage) -> str:
    speaker = "You" if message.role == MessageRole.USER else "Assistant"
    marker = " [charts updated]" if message.is_update else ""
    return f"{speaker}{marker}: {message.text}"
