"""Core module — config, types, logging."""

from incident_alert.core.config import Settings, get_settings, load_settings, reset_settings
from incident_alert.core.logging import setup_logging
from incident_alert.core.types import (
    ActionInputs,
    AlertRequest,
    AlertResponse,
    AlertStatus,
    ExecutionContext,
)

__all__ = [
    "ActionInputs",
    "AlertRequest",
    "AlertResponse",
    "AlertStatus",
    "ExecutionContext",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
