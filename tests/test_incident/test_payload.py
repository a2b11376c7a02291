"""Tests for incident_alert/incident/payload.py — validation and defaults."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from incident_alert.core.types import ActionInputs, AlertStatus, ExecutionContext
from incident_alert.incident.exceptions import InvalidMetadataError, InvalidStatusError
from incident_alert.incident.payload import (
    build_alert_request,
    default_deduplication_key,
    parse_metadata,
    parse_status,
)

# ── Helpers ─────────────────────────────────────────────────────


def _inputs(**kw: object) -> ActionInputs:
    defaults: dict[str, object] = {
        "token": SecretStr("test-token"),
        "title": "Test Alert",
        "status": "firing",
    }
    defaults.update(kw)
    return ActionInputs(**defaults)  # type: ignore[arg-type]


def _ctx(**kw: object) -> ExecutionContext:
    defaults: dict[str, object] = {
        "workflow": "Test Workflow",
        "workflow_id": "123456",
        "workflow_run_number": "1",
        "workflow_attempt": "1",
        "job": "test-job",
        "actor": "test-actor",
        "repository": "test-owner/test-repo",
        "ref": "refs/heads/main",
        "sha": "abc123",
        "event_name": "push",
        "run_id_available": True,
    }
    defaults.update(kw)
    return ExecutionContext(**defaults)  # type: ignore[arg-type]


def _clock() -> float:
    return 1_700_000_000.5


# ── parse_status ───────────────────────────────────────────────


class TestParseStatus:
    @pytest.mark.parametrize("value", ["firing", "resolved"])
    def test_valid(self, value: str) -> None:
        assert parse_status(value).value == value

    @pytest.mark.parametrize("value", ["FIRING", "Resolved", "open", "", " firing"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidStatusError, match="Invalid status"):
            parse_status(value)

    def test_message_names_value(self) -> None:
        with pytest.raises(InvalidStatusError) as exc_info:
            parse_status("acknowledged")
        assert str(exc_info.value) == (
            'Invalid status: acknowledged. Must be either "firing" or "resolved"'
        )


# ── parse_metadata ─────────────────────────────────────────────


class TestParseMetadata:
    def test_empty_is_empty_mapping(self) -> None:
        assert parse_metadata("") == {}

    def test_object(self) -> None:
        assert parse_metadata('{"service": "api", "count": 3}') == {
            "service": "api",
            "count": 3,
        }

    @pytest.mark.parametrize(
        "raw",
        [
            "{invalid",
            "not json",
            '{"a": }',
            '{"a": NaN}',
            '{"a": Infinity}',
            '{"a": [-Infinity]}',
        ],
    )
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(InvalidMetadataError, match="Failed to parse metadata JSON"):
            parse_metadata(raw)

    def test_non_finite_constant_named(self) -> None:
        with pytest.raises(InvalidMetadataError, match="NaN is not valid JSON"):
            parse_metadata('{"a": NaN}')

    def test_malformed_wraps_parser_message(self) -> None:
        with pytest.raises(InvalidMetadataError, match="Expecting"):
            parse_metadata("{invalid")

    @pytest.mark.parametrize("raw", ["[1, 2]", "42", '"text"', "null"])
    def test_non_object_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidMetadataError, match="expected a JSON object"):
            parse_metadata(raw)


# ── default_deduplication_key ──────────────────────────────────


class TestDefaultDeduplicationKey:
    def test_uses_run_id(self) -> None:
        assert default_deduplication_key(_ctx(), clock=_clock) == "123456"

    def test_falls_back_to_epoch_millis(self) -> None:
        ctx = ExecutionContext()
        assert default_deduplication_key(ctx, clock=_clock) == "1700000000500"


# ── build_alert_request ────────────────────────────────────────


class TestBuildAlertRequest:
    def test_user_values_win(self) -> None:
        req = build_alert_request(
            _inputs(
                description="Test description",
                deduplication_key="test-key",
                source_url="https://example.com",
            ),
            _ctx(),
            clock=_clock,
        )
        assert req.title == "Test Alert"
        assert req.status == AlertStatus.FIRING
        assert req.description == "Test description"
        assert req.deduplication_key == "test-key"
        assert req.source_url == "https://example.com"

    def test_resolved_status_verbatim(self) -> None:
        req = build_alert_request(_inputs(status="resolved"), _ctx(), clock=_clock)
        assert req.to_wire()["status"] == "resolved"

    def test_empty_description_omitted(self) -> None:
        req = build_alert_request(_inputs(description=""), _ctx(), clock=_clock)
        assert req.description is None
        assert "description" not in req.to_wire()

    def test_deduplication_key_defaults_to_run_id(self) -> None:
        req = build_alert_request(_inputs(), _ctx(), clock=_clock)
        assert req.deduplication_key == "123456"

    def test_deduplication_key_timestamp_without_run_id(self) -> None:
        ctx = _ctx(workflow_id="unknown", run_id_available=False)
        req = build_alert_request(_inputs(), ctx, clock=_clock)
        assert req.deduplication_key == "1700000000500"

    def test_source_url_defaults_to_run_url(self) -> None:
        req = build_alert_request(_inputs(), _ctx(), clock=_clock)
        assert req.source_url == "https://github.com/test-owner/test-repo/actions/runs/123456"

    def test_source_url_with_unknown_context(self) -> None:
        req = build_alert_request(_inputs(), ExecutionContext(), clock=_clock)
        assert req.source_url == "https://github.com/unknown/actions/runs/unknown"

    def test_metadata_merged_with_github_context(self) -> None:
        req = build_alert_request(
            _inputs(metadata='{"service": "test-service"}'),
            _ctx(),
            clock=_clock,
        )
        assert req.metadata["service"] == "test-service"
        assert req.metadata["github"] == {
            "workflow": "Test Workflow",
            "workflow_id": "123456",
            "workflow_run_number": "1",
            "workflow_attempt": "1",
            "job": "test-job",
            "actor": "test-actor",
            "repository": "test-owner/test-repo",
            "ref": "refs/heads/main",
            "sha": "abc123",
            "event_name": "push",
        }

    def test_user_github_key_overwritten(self) -> None:
        req = build_alert_request(
            _inputs(metadata='{"github": "mine", "team": "sre"}'),
            _ctx(),
            clock=_clock,
        )
        assert req.metadata["team"] == "sre"
        assert req.metadata["github"]["repository"] == "test-owner/test-repo"

    def test_invalid_status_raises_before_metadata(self) -> None:
        with pytest.raises(InvalidStatusError):
            build_alert_request(_inputs(status="bogus", metadata="{bad"), _ctx())

    def test_invalid_metadata_raises(self) -> None:
        with pytest.raises(InvalidMetadataError):
            build_alert_request(_inputs(metadata="{bad"), _ctx())
