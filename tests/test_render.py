"""Tests for plain-text rendering."""

from chronicles.data import (
    ChatMessage,
    CompanyData,
    EventCategory,
    GroundingSource,
    MessageRole,
    NodeRole,
    OrgNode,
    TimelineEvent,
)
from chronicles.render import (
    chronological,
    founding_label,
    render_branch,
    render_message,
    render_org_tree,
    render_sources,
    render_summary,
    render_timeline,
)

STRUCTURE = OrgNode(
    name="Alphabet",
    role=NodeRole.ROOT,
    children=(
        OrgNode(
            name="Google",
            role=NodeRole.SUBSIDIARY,
            children=(OrgNode(name="YouTube", role=NodeRole.SUBSIDIARY),),
        ),
        OrgNode(name="Waymo", role=NodeRole.SUBSIDIARY, description="Self-driving cars"),
    ),
)


def _company(timeline: tuple[TimelineEvent, ...] = ()) -> CompanyData:
    return CompanyData(
        company_name="Alphabet",
        summary="Holding company of Google.",
        structure=STRUCTURE,
        timeline=timeline,
    )


def test_chronological_is_stable_within_year() -> None:
    events = [
        TimelineEvent(year=2015, title="Alphabet formed"),
        TimelineEvent(year=1998, title="Google founded"),
        TimelineEvent(year=2015, title="Restructuring"),
    ]
    assert [e.title for e in chronological(events)] == [
        "Google founded",
        "Alphabet formed",
        "Restructuring",
    ]


def test_founding_label_prefers_date_string() -> None:
    data = _company(
        (
            TimelineEvent(
                year=1998,
                title="Founded",
                category=EventCategory.FOUNDING,
                date_str="September 4, 1998",
            ),
        )
    )
    assert founding_label(data) == "September 4, 1998"


def test_founding_label_without_founding_event() -> None:
    assert founding_label(_company()) == "N/A"


def test_render_summary() -> None:
    data = _company((TimelineEvent(year=2015, category=EventCategory.FOUNDING),))
    lines = render_summary(data).splitlines()
    assert lines[0] == "Alphabet"
    assert lines[1] == "========"
    assert lines[2] == "Holding company of Google."
    assert lines[3] == "Founding Date: 2015"


def test_render_timeline() -> None:
    text = render_timeline(
        [
            TimelineEvent(year=2006, title="Buys YouTube", category=EventCategory.ACQUISITION),
            TimelineEvent(year=1998, title="Founded", description="In a garage."),
        ]
    )
    lines = text.splitlines()
    assert lines[0].strip() == "1998  [general] Founded"
    assert lines[1].strip() == "In a garage."
    assert lines[2].strip() == "2006  [acquisition] Buys YouTube"


def test_render_empty_timeline() -> None:
    assert render_timeline([]) == "(no timeline events)"


def test_render_org_tree() -> None:
    assert render_org_tree(STRUCTURE).splitlines() == [
        "Alphabet (root)",
        "├── Google (subsidiary)",
        "│   └── YouTube (subsidiary)",
        "└── Waymo (subsidiary) - Self-driving cars",
    ]


def test_render_sources_limits_and_falls_back_to_uri() -> None:
    sources = [GroundingSource(title="", uri="https://a.example")] + [
        GroundingSource(title=f"S{i}", uri=f"https://s{i}.example") for i in range(10)
    ]
    lines = render_sources(sources).splitlines()
    assert len(lines) == 6
    assert lines[0] == "- https://a.example <https://a.example>"
    assert lines[1] == "- S0 <https://s0.example>"


def test_render_no_sources() -> None:
    assert render_sources([]) == "No specific source metadata returned."


def test_render_message() -> None:
    user = ChatMessage(id="1", role=MessageRole.USER, text="Add Fitbit")
    reply = ChatMessage(id="2", role=MessageRole.MODEL, text="Done.", is_update=True)
    assert render_message(user) == "You: Add Fitbit"
    assert render_message(reply) == "Assistant [charts updated]: Done."


def test_render_branch_finds_unit_case_insensitively() -> None:
    assert render_branch(STRUCTURE, " google ").splitlines() == [
        "Google (subsidiary)",
        "└── YouTube (subsidiary)",
    ]


def test_render_branch_unknown_unit_is_none() -> None:
    assert render_branch(STRUCTURE, "DeepMind") is None
