"""Input validation and alert payload construction."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

import structlog

from incident_alert.core.types import (
    ActionInputs,
    AlertRequest,
    AlertStatus,
    ExecutionContext,
)
from incident_alert.incident.exceptions import (
    InvalidMetadataError,
    InvalidStatusError,
)

logger = structlog.stdlib.get_logger()

Clock = Callable[[], float]


def parse_status(value: str) -> AlertStatus:
    """Exact, case-sensitive match against the two accepted statuses."""
    try:
        return AlertStatus(value)
    except ValueError as exc:
        raise InvalidStatusError(value) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_metadata(raw: str) -> dict[str, Any]:
    """Decode the metadata input. Empty means no metadata.

    ``NaN`` and ``Infinity`` are rejected; they are not JSON.
    """
    if not raw:
        return {}
    try:
        metadata = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InvalidMetadataError(str(exc)) from exc
    if not isinstance(metadata, dict):
        raise InvalidMetadataError(
            f"expected a JSON object, got {type(metadata).__name__}"
        )
    return metadata


def default_deduplication_key(context: ExecutionContext, clock: Clock = time.time) -> str:
    """Run id when the runner provides one, else the current epoch millis."""
    if context.run_id_available:
        return context.workflow_id
    return str(int(clock() * 1000))


def build_alert_request(
    inputs: ActionInputs,
    context: ExecutionContext,
    clock: Clock = time.time,
) -> AlertRequest:
    """Validate *inputs* and merge them with defaults and the run context.

    Raises:
        InvalidStatusError: status is not "firing" or "resolved".
        InvalidMetadataError: metadata is not a JSON object.
    """
    status = parse_status(inputs.status)
    metadata = parse_metadata(inputs.metadata)

    # The run context always wins over a user-supplied "github" key.
    metadata = {**metadata, "github": context.model_dump()}

    request = AlertRequest(
        title=inputs.title,
        status=status,
        description=inputs.description or None,
        deduplication_key=inputs.deduplication_key
        or default_deduplication_key(context, clock),
        source_url=inputs.source_url or context.run_url,
        metadata=metadata,
    )
    logger.debug(
        "alert_request_built",
        deduplication_key=request.deduplication_key,
        source_url=request.source_url,
        metadata_keys=sorted(metadata),
    )
    return request
