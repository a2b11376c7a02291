"""Domain types for incident.io alert events and GitHub run context."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr

UNKNOWN = "unknown"

GITHUB_URL = "https://github.com"

# ExecutionContext field → environment variable set by the Actions runner.
_CONTEXT_ENV_VARS: dict[str, str] = {
    "workflow": "GITHUB_WORKFLOW",
    "workflow_id": "GITHUB_RUN_ID",
    "workflow_run_number": "GITHUB_RUN_NUMBER",
    "workflow_attempt": "GITHUB_RUN_ATTEMPT",
    "job": "GITHUB_JOB",
    "actor": "GITHUB_ACTOR",
    "repository": "GITHUB_REPOSITORY",
    "ref": "GITHUB_REF",
    "sha": "GITHUB_SHA",
    "event_name": "GITHUB_EVENT_NAME",
}


class AlertStatus(StrEnum):
    """Alert event status accepted by incident.io."""

    FIRING = "firing"
    RESOLVED = "resolved"


class ActionInputs(BaseModel):
    """Raw textual inputs as handed over by the workflow."""

    token: SecretStr
    alert_source_config_id: str = ""
    title: str
    status: str
    description: str = ""
    deduplication_key: str = ""
    source_url: str = ""
    metadata: str = ""


class ExecutionContext(BaseModel):
    """Immutable snapshot of the workflow run the alert originates from.

    Only the ten public fields are serialized into ``metadata.github``;
    ``run_id_available`` feeds the deduplication key default.
    """

    model_config = ConfigDict(frozen=True)

    workflow: str = UNKNOWN
    workflow_id: str = UNKNOWN
    workflow_run_number: str = UNKNOWN
    workflow_attempt: str = UNKNOWN
    job: str = UNKNOWN
    actor: str = UNKNOWN
    repository: str = UNKNOWN
    ref: str = UNKNOWN
    sha: str = UNKNOWN
    event_name: str = UNKNOWN

    run_id_available: bool = Field(default=False, exclude=True)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExecutionContext:
        """Read the run context from *environ* (defaults to ``os.environ``).

        Absent and empty variables both map to ``"unknown"``.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            field: env.get(var) or UNKNOWN
            for field, var in _CONTEXT_ENV_VARS.items()
        }
        values["run_id_available"] = bool(env.get("GITHUB_RUN_ID"))
        return cls(**values)

    @property
    def run_url(self) -> str:
        """Web URL of the workflow run."""
        return f"{GITHUB_URL}/{self.repository}/actions/runs/{self.workflow_id}"


class AlertRequest(BaseModel):
    """Request body for the Alert Events V2 HTTP endpoint."""

    title: str
    status: AlertStatus
    description: str | None = None
    deduplication_key: str
    source_url: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Body as sent on the wire; an unset description is left out."""
        body = self.model_dump(mode="json")
        if self.description is None:
            del body["description"]
        return body


class AlertResponse(BaseModel):
    """Body returned by incident.io when an event is accepted."""

    deduplication_key: str
    message: str = ""
    status: str
