"""GitHub Action that forwards alert events to incident.io."""
