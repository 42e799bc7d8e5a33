"""External command execution for version discovery.

A version input containing a space is treated as a command line. The
command runs once, without a shell, and its standard output becomes
the version string.

Commands run through a ``ProcessRunner`` so callers (and tests) can
swap in a runner that never spawns a real process.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from build_metadata.lib.errors import VersionCommandFailed

logger = logging.getLogger(__name__)

__all__ = [
    "CompletedCommand",
    "ProcessRunner",
    "SubprocessRunner",
    "is_version_command",
    "resolve_version",
    "run_version_command",
]


@dataclass(frozen=True)
class CompletedCommand:
    """Captured result of a finished command."""

    stdout: str
    stderr: str
    returncode: int


class ProcessRunner(Protocol):
    """Anything that can run an argument list and capture its streams."""

    def run(self, args: Sequence[str]) -> CompletedCommand:
        ...


class SubprocessRunner:
    """Runs commands as child processes via ``subprocess.run``.

    Output that is not valid UTF-8 is decoded with replacement characters.
    """

    def run(self, args: Sequence[str]) -> CompletedCommand:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        return CompletedCommand(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )


def is_version_command(version: str) -> bool:
    """Whether a version input should be executed rather than used verbatim."""
    return " " in version


def run_version_command(command: str, runner: Optional[ProcessRunner] = None) -> str:
    """Run ``command`` and return its standard output, untrimmed.

    Raises:
        VersionCommandFailed: If the command cannot be started or exits non-zero.
    """
    args: List[str] = command.split()
    if not args:
        raise VersionCommandFailed(
            "Version command is blank",
            command=command,
        )

    name, rest = args[0], args[1:]
    runner = runner or SubprocessRunner()

    try:
        result = runner.run(args)
    except (OSError, subprocess.SubprocessError) as e:
        logger.info("Running %s command: %s\nstdout: \nstderr: ", name, command)
        raise VersionCommandFailed(
            f"Failed to run {name} command {command}: {e}",
            command=name,
            args=rest,
            cause=e,
        ) from e

    logger.info(
        "Running %s command: %s\nstdout: %s\nstderr: %s",
        name,
        command,
        result.stdout.strip(),
        result.stderr.strip(),
    )

    if result.returncode != 0:
        raise VersionCommandFailed(
            f"Failed to run {name} command {command}: exit status {result.returncode}",
            command=name,
            args=rest,
            stderr=result.stderr.strip() or None,
            details={"returncode": result.returncode},
        )

    return result.stdout


def resolve_version(version: str, runner: Optional[ProcessRunner] = None) -> str:
    """Resolve a version input to the version string.

    Literal versions are returned unchanged. Command versions are run and
    their output, minus one trailing newline, is returned.

    Raises:
        VersionCommandFailed: If the command fails or prints nothing.
    """
    if not is_version_command(version):
        return version

    output = run_version_command(version, runner)
    if output.endswith("\n"):
        output = output[:-1]
    if not output:
        raise VersionCommandFailed(
            f"Failed to setup version using {version} command",
            command=version.split()[0],
            args=version.split()[1:],
            suggestion="Make sure the command prints the version to standard output.",
        )
    return output
