"""incident.io alert events — payload building and delivery."""

from incident_alert.incident.client import IncidentIoClient
from incident_alert.incident.exceptions import (
    AlertActionError,
    IncidentApiError,
    IncidentResponseError,
    IncidentTransportError,
    InvalidMetadataError,
    InvalidStatusError,
    MissingInputError,
)
from incident_alert.incident.payload import build_alert_request

__all__ = [
    "AlertActionError",
    "IncidentApiError",
    "IncidentIoClient",
    "IncidentResponseError",
    "IncidentTransportError",
    "InvalidMetadataError",
    "InvalidStatusError",
    "MissingInputError",
    "build_alert_request",
]
