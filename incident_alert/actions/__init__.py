from incident_alert.actions.runtime import ActionsRuntime

__all__ = ["ActionsRuntime"]
