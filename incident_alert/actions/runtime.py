"""GitHub Actions host adapter — inputs, outputs, masking, failure signal."""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import MutableMapping
from typing import TextIO

import structlog
from pydantic import SecretStr

from incident_alert.core.types import ActionInputs
from incident_alert.incident.exceptions import MissingInputError

logger = structlog.stdlib.get_logger()


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsRuntime:
    """Talks to the Actions runner through env vars, files and stdout.

    Inputs arrive as ``INPUT_<NAME>`` variables (upper-cased, spaces
    replaced by ``_``). Outputs are appended to the ``GITHUB_OUTPUT`` file.
    Workflow commands (``::error::``, ``::add-mask::``) go to *stream*.
    """

    def __init__(
        self,
        environ: MutableMapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._stream = stream
        self.failed = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def environ(self) -> MutableMapping[str, str]:
        return self._environ

    # ── Inputs ──────────────────────────────────────────────────

    def get_input(self, name: str, required: bool = False) -> str:
        """Trimmed input value; "" when absent unless *required*."""
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self._environ.get(key, "").strip()
        if required and not value:
            raise MissingInputError(name)
        return value

    def read_inputs(self) -> ActionInputs:
        """Collect every input of the action, masking the token first."""
        token = self.get_input("incident-io-token", required=True)
        self.add_mask(token)
        return ActionInputs(
            token=SecretStr(token),
            alert_source_config_id=self.get_input("alert-source-config-id"),
            title=self.get_input("title", required=True),
            status=self.get_input("status", required=True),
            description=self.get_input("description"),
            deduplication_key=self.get_input("deduplication-key"),
            source_url=self.get_input("source-url"),
            metadata=self.get_input("metadata"),
        )

    # ── Outputs / commands ──────────────────────────────────────

    def issue_command(
        self,
        command: str,
        message: str = "",
        properties: dict[str, str] | None = None,
    ) -> None:
        line = f"::{command}"
        if properties:
            line += " " + ",".join(
                f"{k}={_escape_property(v)}" for k, v in properties.items()
            )
        self.stream.write(f"{line}::{_escape_data(message)}\n")
        self.stream.flush()

    def add_mask(self, secret: str) -> None:
        """Ask the runner to scrub *secret* from all later log output."""
        if secret:
            self.issue_command("add-mask", secret)

    def set_output(self, name: str, value: str) -> None:
        """Publish a step output via ``GITHUB_OUTPUT`` (legacy command otherwise)."""
        output_file = self._environ.get("GITHUB_OUTPUT")
        if not output_file:
            self.issue_command("set-output", value, {"name": name})
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError("output name or value contains the heredoc delimiter")
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        logger.debug("output_set", name=name)

    def set_failed(self, message: str) -> None:
        """Emit an error annotation and mark the step as failed."""
        self.failed = True
        self.issue_command("error", message)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
