"""Exception hierarchy for the alert action."""

from __future__ import annotations


class AlertActionError(Exception):
    """Base exception for all alert action errors."""


class MissingInputError(AlertActionError):
    """A required workflow input was empty or not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Input required and not supplied: {name}")
        self.name = name


class InvalidStatusError(AlertActionError):
    """Status input is neither "firing" nor "resolved"."""

    def __init__(self, status: str) -> None:
        super().__init__(
            f'Invalid status: {status}. Must be either "firing" or "resolved"'
        )
        self.status = status


class InvalidMetadataError(AlertActionError):
    """Metadata input is not a JSON object."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse metadata JSON: {reason}")


class IncidentApiError(AlertActionError):
    """incident.io answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(
            f"incident.io API request failed with status {status_code}: {body}"
        )
        self.status_code = status_code
        self.body = body


class IncidentTransportError(AlertActionError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


class IncidentResponseError(AlertActionError):
    """A 2xx response whose body is not the documented JSON shape."""
