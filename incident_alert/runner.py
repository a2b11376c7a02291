"""Action entry point — validate, build, dispatch, report."""

from __future__ import annotations

import time

import httpx
import structlog

from incident_alert.actions.runtime import ActionsRuntime
from incident_alert.core.config import Settings, get_settings
from incident_alert.core.types import ExecutionContext
from incident_alert.incident.client import IncidentIoClient
from incident_alert.incident.payload import Clock, build_alert_request

logger = structlog.stdlib.get_logger()


async def run(
    runtime: ActionsRuntime | None = None,
    http: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    clock: Clock = time.time,
) -> int:
    """Send one alert event and report the outcome to the workflow.

    Every failure is reported through ``runtime.set_failed`` with the
    exception message; outputs are only set after a successful send.

    Returns:
        Process exit code (0 on success, 1 on failure).
    """
    runtime = runtime or ActionsRuntime()
    settings = settings or get_settings()

    try:
        inputs = runtime.read_inputs()
        context = ExecutionContext.from_env(runtime.environ)
        request = build_alert_request(inputs, context, clock=clock)
        config_id = (
            inputs.alert_source_config_id
            or settings.incident_io.default_alert_source_config_id
        )

        logger.info(
            "alert_sending",
            title=request.title,
            status=request.status.value,
            deduplication_key=request.deduplication_key,
            alert_source_config_id=config_id,
        )

        async with IncidentIoClient(config=settings.incident_io, http=http) as client:
            response = await client.send_alert(
                inputs.token.get_secret_value(),
                config_id,
                request,
            )

        logger.info("alert_sent", message=response.message, status=response.status)

        runtime.set_output("deduplication-key", response.deduplication_key)
        runtime.set_output("response-status", response.status)
    except Exception as exc:
        message = str(exc) or type(exc).__name__
        logger.error("alert_failed", error=message, error_type=type(exc).__name__)
        runtime.set_failed(message)

    return runtime.exit_code
