#!/usr/bin/env python3
"""Action entrypoint — sends one alert event to incident.io.

Inputs are read from the ``INPUT_*`` environment variables the Actions
runner sets for the step (see ``action.yml``).

Usage::

    # As invoked by action.yml
    python scripts/run.py

    # Custom config file
    python scripts/run.py --config config/settings.yaml

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure project root is on sys.path when run from a checkout of the action.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from incident_alert.core.config import load_settings
from incident_alert.core.logging import setup_logging
from incident_alert.runner import run


async def _main(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, fmt=args.log_format)
    return await run(settings=settings)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send an alert event to incident.io from a GitHub workflow.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Log renderer override",
    )
    args = parser.parse_args()

    code = asyncio.run(_main(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
