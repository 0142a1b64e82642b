"""Tests for RunLogger and serialization helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

from chronicles.data import (
    APICallUsage,
    CompanyData,
    EventCategory,
    NodeRole,
    OrgNode,
    TimelineEvent,
    Usage,
)
from chronicles.run_logger import RunLogger, _serialize


def _company() -> CompanyData:
    return CompanyData(
        company_name="Acme",
        summary="Maker of everything.",
        structure=OrgNode(
            name="Acme",
            role=NodeRole.ROOT,
            children=(OrgNode(name="Acme Rockets", role=NodeRole.SUBSIDIARY),),
        ),
        timeline=(TimelineEvent(year=1949, title="Founded", category=EventCategory.FOUNDING),),
    )


# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(True) is True


def test_serialize_company_data_uses_wire_shape() -> None:
    result = _serialize(_company())
    assert result["companyName"] == "Acme"
    assert result["structure"]["children"][0]["role"] == "subsidiary"
    assert result["timeline"][0]["category"] == "founding"


def test_serialize_dataclass_with_enum() -> None:
    event = TimelineEvent(year=1983, title="Famicom", category=EventCategory.PRODUCT)
    result = _serialize(event)
    assert result["year"] == 1983
    assert result["category"] == "product"


def test_serialize_usage_includes_computed_properties() -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="m1", input_tokens=100, output_tokens=50, web_searches=1),
            APICallUsage(model="m2", input_tokens=200, output_tokens=75, web_searches=2),
        ],
    )
    result = _serialize(usage)
    assert result["input_tokens"] == 300
    assert result["output_tokens"] == 125
    assert result["web_searches"] == 3
    assert result["estimated_cost"] == 0.0
    assert len(result["api_calls"]) == 2
    assert result["api_calls"][0]["model"] == "m1"


def test_serialize_datetime_and_path() -> None:
    when = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert _serialize(when) == "2026-01-02T03:04:05+00:00"
    assert _serialize(Path("/some/path")) == "/some/path"


# -- RunLogger tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    logger.start_run("Acme")
    logger.log_stage("research", "TestComponent", "Acme", _company(), None, 1.0)
    result = logger.finish_run(_company(), None)

    assert result is None
    assert not logger.active
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


def test_run_logger_records_session(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.start_run("acme")
    assert logger.active

    research_usage = Usage(
        api_calls=[APICallUsage(model="claude-haiku-4-5", input_tokens=100, output_tokens=50)],
        estimated_cost=0.00035,
    )
    logger.log_stage("research", "ClaudeCompanyResearcher", "acme", _company(), research_usage, 2.5)
    logger.log_stage("chat", "ClaudeChatSession", "Who founded it?", "Wile E.", None, 0.75)

    path = logger.finish_run(_company(), research_usage)

    assert path is not None
    assert path.exists()
    assert logger.last_log_path == path
    assert not logger.active

    data = json.loads(path.read_text())
    assert data["query"] == "acme"
    assert data["company_name"] == "Acme"
    assert data["completed_at"] is not None
    assert data["final_data"]["structure"]["name"] == "Acme"

    assert len(data["stages"]) == 2
    assert data["stages"][0]["stage"] == "research"
    assert data["stages"][0]["output"]["companyName"] == "Acme"
    assert data["stages"][0]["usage"]["input_tokens"] == 100
    assert data["stages"][0]["cost_usd"] == 0.00035
    assert data["stages"][0]["duration_seconds"] == 2.5
    assert data["stages"][1]["output"] == "Wile E."
    assert data["stages"][1]["usage"] is None
    assert data["stages"][1]["cost_usd"] is None

    assert data["total_usage"]["input_tokens"] == 100
    assert data["total_cost_usd"] == 0.00035


def test_run_logger_failed_query_has_no_final_data(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.start_run("Nowhere Inc")
    path = logger.finish_run(None, Usage())

    assert path is not None
    data = json.loads(path.read_text())
    assert data["company_name"] is None
    assert data["final_data"] is None
    assert data["stages"] == []


def test_run_logger_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    logger = RunLogger(log_dir=log_dir, enabled=True)

    logger.start_run("Acme")
    path = logger.finish_run(None, None)

    assert path is not None
    assert log_dir.exists()


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)

    logger.start_run("Acme")
    path = logger.finish_run(None, None)

    assert path is not None
    assert path.name.startswith("run_")
    assert path.name.endswith(".json")
    assert ":" not in path.name


def test_run_logger_log_stage_without_start(tmp_path: Path) -> None:
    """log_stage before start_run should be a no-op."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.log_stage("chat", "TestComponent", "input", "output", None, 1.0)
    assert not logger.active


def test_run_logger_finish_without_start(tmp_path: Path) -> None:
    """finish_run before start_run should return None."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    assert logger.finish_run(None, None) is None
