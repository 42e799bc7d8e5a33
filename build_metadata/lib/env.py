"""Environment variable utilities.

Provides the per-field input resolution used by the generator,
expansion of ${VAR_NAME} patterns in configuration values, and
loading of .env files.

Uses python-dotenv for .env file loading.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from dotenv import load_dotenv

from build_metadata.lib.errors import MissingRequiredInput

__all__ = [
    "env_lookup",
    "expand_env_vars",
    "expand_options",
    "load_env_file",
    "resolve",
]

# Pattern for ${VAR_NAME} or $VAR_NAME
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def load_env_file(path: Optional[Union[str, Path]] = None) -> bool:
    """Load environment variables from a .env file.

    Variables already set in the environment are kept.

    Args:
        path: Path to .env file. If None, searches for .env in current
              directory and parent directories.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    return load_dotenv(dotenv_path=path)


def env_lookup(name: str, environ: Optional[Mapping[str, str]] = None) -> Callable[[], str]:
    """Return a zero-argument callable reading ``name`` from ``environ``.

    The read is deferred so that ``resolve`` only touches the environment
    when the explicit value is empty.
    """

    def lookup() -> str:
        source = os.environ if environ is None else environ
        return source.get(name, "")

    return lookup


def resolve(
    explicit: Optional[str],
    lookup: Optional[Callable[[], str]] = None,
    default: Optional[str] = "",
    *,
    field: Optional[str] = None,
) -> str:
    """Resolve a single input value.

    Returns ``explicit`` when non-empty, else the non-empty result of
    ``lookup()``, else ``default``. A ``default`` of None marks the value
    as required.

    Example:
        >>> resolve("", env_lookup("GITHUB_SHA", {"GITHUB_SHA": "abc"}))
        'abc'
        >>> resolve("", None, "hashicorp")
        'hashicorp'

    Raises:
        MissingRequiredInput: If the value is required and nothing resolved.
    """
    if explicit:
        return explicit
    if lookup is not None:
        value = lookup()
        if value:
            return value
    if default is None:
        raise MissingRequiredInput(field or "value")
    return default


def expand_env_vars(
    value: str,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Expand environment variables in a string.

    Supports both ${VAR_NAME} and $VAR_NAME syntax.

    Args:
        value: String potentially containing env var references
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        String with environment variables expanded

    Example:
        >>> expand_env_vars("${RUNNER}-build", environ={"RUNNER": "linux"})
        'linux-build'
    """
    source = os.environ if environ is None else environ

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1) or match.group(2)
        env_value = source.get(var_name)
        if env_value is None:
            # Unknown variables are left as written
            return str(match.group(0))
        return env_value

    return ENV_VAR_PATTERN.sub(replacer, value)


def expand_options(
    options: Dict[str, Any],
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Expand environment variables in the string values of an options dict."""
    result: Dict[str, Any] = {}

    for key, value in options.items():
        if isinstance(value, str):
            result[key] = expand_env_vars(value, environ=environ)
        else:
            result[key] = value

    return result
