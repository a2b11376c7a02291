"""incident.io Alert Events V2 client — one POST per alert."""

from __future__ import annotations

from types import TracebackType
from urllib.parse import quote

import httpx
import pydantic
import structlog

from incident_alert.core.config import IncidentIoConfig, get_settings
from incident_alert.core.types import AlertRequest, AlertResponse
from incident_alert.incident.exceptions import (
    IncidentApiError,
    IncidentResponseError,
    IncidentTransportError,
)

logger = structlog.stdlib.get_logger()

_REDACTED = "***"


def _encode_token(token: str) -> str:
    # Every reserved character is escaped, including !*'() which
    # encodeURIComponent leaves alone; both decode to the same token.
    return quote(token, safe="")


class IncidentIoClient:
    """Async client for ``POST /v2/alert_events/http/{config_id}``.

    The token is only ever sent as the ``token`` query parameter, so the
    request URL must be treated as a secret. An ``httpx.AsyncClient`` may
    be injected; the caller then owns its lifecycle.

    Usage::

        async with IncidentIoClient() as client:
            response = await client.send_alert(token, config_id, request)
    """

    def __init__(
        self,
        config: IncidentIoConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_settings().incident_io
        self._http = http
        self._owns_http = http is None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        """Create the httpx async client with library-default timeouts."""
        if self._http is None:
            self._http = httpx.AsyncClient()
            self._owns_http = True

    async def close(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> IncidentIoClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def alert_url(self, alert_source_config_id: str, token: str) -> str:
        """Endpoint URL for *alert_source_config_id* with the token embedded."""
        base = self._config.base_url.rstrip("/")
        return (
            f"{base}/v2/alert_events/http/{alert_source_config_id}"
            f"?token={_encode_token(token)}"
        )

    async def send_alert(
        self,
        token: str,
        alert_source_config_id: str,
        request: AlertRequest,
    ) -> AlertResponse:
        """POST *request* once and return the parsed acceptance.

        Raises:
            IncidentApiError: non-2xx response (status code + raw body text).
            IncidentTransportError: no response was received.
            IncidentResponseError: 2xx response with an unexpected body.
        """
        await self.connect()
        if self._http is None:
            raise IncidentTransportError("HTTP client not connected")

        url = self.alert_url(alert_source_config_id, token)
        body = request.to_wire()
        logger.debug(
            "alert_request_sending",
            url=self.alert_url(alert_source_config_id, _REDACTED),
            payload=body,
        )

        try:
            response = await self._http.post(
                url,
                json=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            # httpx puts the full URL in some messages; keep the token out.
            message = str(exc)
            if token:
                message = message.replace(_encode_token(token), _REDACTED)
            raise IncidentTransportError(message or type(exc).__name__) from exc

        if not response.is_success:
            raise IncidentApiError(response.status_code, response.text)

        try:
            return AlertResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            raise IncidentResponseError(
                f"incident.io API returned an unexpected body: {response.text}"
            ) from exc
