"""GitHub Actions runner integration.

Reads step inputs from ``INPUT_*`` variables and publishes step outputs,
exported variables and error annotations using the runner's file and
workflow-command conventions.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from typing import Mapping, Optional, TextIO

from build_metadata.lib.metadata import MetadataInputs

logger = logging.getLogger(__name__)

__all__ = [
    "INPUT_NAMES",
    "error",
    "escape_data",
    "escape_property",
    "export_variable",
    "get_input",
    "read_action_inputs",
    "set_output",
]

# Declared inputs of the action, in the order they are documented.
INPUT_NAMES = (
    "branch",
    "filePath",
    "metadataFileName",
    "product",
    "repo",
    "org",
    "sha",
    "version",
)


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read a step input.

    The runner exposes ``with:`` values as ``INPUT_<NAME>`` where the name
    is upper-cased and spaces become underscores. Unset inputs read as "".
    """
    key = "INPUT_" + name.replace(" ", "_").upper()
    return _environ(environ).get(key, "").strip()


def escape_data(value: str) -> str:
    """Escape a workflow-command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow-command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def _file_entry(name: str, value: str) -> str:
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def _publish(
    file_var: str,
    command: str,
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]],
    stream: Optional[TextIO],
) -> None:
    target = _environ(environ).get(file_var, "")
    if target:
        with open(target, "a", encoding="utf-8") as handle:
            handle.write(_file_entry(name, value))
        logger.debug("Wrote %s to %s", name, file_var)
        return

    out = stream or sys.stdout
    out.write(f"::{command} name={escape_property(name)}::{escape_data(value)}\n")
    out.flush()


def set_output(
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Publish a step output.

    Appends to the file named by ``GITHUB_OUTPUT``; without it, prints the
    legacy ``::set-output`` workflow command.
    """
    _publish("GITHUB_OUTPUT", "set-output", name, value, environ, stream)


def export_variable(
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Export an environment variable to subsequent steps of the job.

    Appends to the file named by ``GITHUB_ENV``; without it, prints the
    legacy ``::set-env`` workflow command.
    """
    _publish("GITHUB_ENV", "set-env", name, value, environ, stream)


def error(message: str, stream: Optional[TextIO] = None) -> None:
    """Emit an error annotation for the current step."""
    out = stream or sys.stdout
    out.write(f"::error::{escape_data(message)}\n")
    out.flush()


def read_action_inputs(environ: Optional[Mapping[str, str]] = None) -> MetadataInputs:
    """Collect the declared step inputs into a ``MetadataInputs``."""
    return MetadataInputs.from_mapping(
        {name: get_input(name, environ) for name in INPUT_NAMES}
    )
