"""Run logger recording each company session (query plus chat turns) to JSON."""

import dataclasses
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from chronicles.data import CompanyData, Usage


class StageRecord(BaseModel):
    """Record of one operation within a session (research or a chat turn)."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    usage: dict[str, Any] | None = None
    cost_usd: float | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of a complete company session."""

    run_id: str
    query: str
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    company_name: str | None = None
    final_data: dict[str, Any] | None = None
    total_usage: dict[str, Any] | None = None
    total_cost_usd: float | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Company data uses its camelCase wire shape; Usage includes computed totals.
    """
    if obj is None:
        return None
    if isinstance(obj, CompanyData):
        return obj.to_dict()
    if isinstance(obj, Usage):
        return {
            "api_calls": [_serialize(c) for c in obj.api_calls],
            "input_tokens": obj.input_tokens,
            "output_tokens": obj.output_tokens,
            "cache_creation_input_tokens": obj.cache_creation_input_tokens,
            "cache_read_input_tokens": obj.cache_read_input_tokens,
            "web_searches": obj.web_searches,
            "estimated_cost": obj.estimated_cost,
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(dataclasses.asdict(obj))
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Accumulates stage records for one company session and writes them as JSON.

    When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._record: RunRecord | None = None
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def active(self) -> bool:
        """Whether a run has been started and not yet finished."""
        return self._record is not None

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, query: str) -> None:
        """Begin recording a new session for the given company query."""
        if not self._enabled:
            return

        self._record = RunRecord(
            run_id=str(uuid.uuid4()),
            query=query,
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_stage(
        self,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        usage: Usage | None,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to the current run.

        Args:
            stage: Stage name ("research", "chat").
            component: Class that produced the output.
            input_data: What went in (query, user message).
            output_data: What came out (company data, reply).
            usage: Usage for this stage, if any.
            duration_seconds: Wall-clock duration.
        """
        if not self._enabled or self._record is None:
            return

        self._record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                usage=_serialize(usage) if usage is not None else None,
                cost_usd=usage.estimated_cost if usage is not None else None,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, data: CompanyData | None, usage: Usage | None) -> Path | None:
        """Write the run record to a JSON file and close the run.

        Args:
            data: Company data as displayed at the end of the session.
            usage: Total accumulated usage.

        Returns:
            Path to the written JSON file, or None if logging is disabled
            or no run is active.
        """
        if not self._enabled or self._record is None:
            return None

        record = self._record
        self._record = None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        if data is not None:
            record.company_name = data.company_name
            record.final_data = _serialize(data)
        record.total_usage = _serialize(usage) if usage is not None else None
        record.total_cost_usd = usage.estimated_cost if usage is not None else None

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_1a2b3c4d.json (colons → dashes)
        ts = record.started_at.replace(":", "-").split(".")[0].split("+")[0]
        filepath = self._log_dir / f"run_{ts}_{record.run_id[:8]}.json"

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
