"""YAML inputs loader.

Lets the metadata inputs be kept in a file next to the workflow, which is
handy for running the generator locally or from other CI systems.

Example YAML (metadata-inputs.yaml):
    product: vault
    version: make version
    filePath: ./dist
    org: ${GITHUB_REPOSITORY_OWNER}

Usage:
    generate-metadata --config metadata-inputs.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from build_metadata.lib.actions import read_action_inputs
from build_metadata.lib.env import expand_options
from build_metadata.lib.errors import ConfigurationError
from build_metadata.lib.metadata import MetadataInputs

logger = logging.getLogger(__name__)

__all__ = [
    "collect_inputs",
    "load_inputs_file",
    "load_inputs_from_yaml",
]


def load_inputs_from_yaml(
    config: Any,
    *,
    environ: Optional[Mapping[str, str]] = None,
    source: Optional[str] = None,
) -> MetadataInputs:
    """Create MetadataInputs from parsed YAML.

    Args:
        config: Parsed YAML document
        environ: Mapping used for ${VAR} expansion (defaults to os.environ)
        source: File the document came from, for error messages

    Raises:
        ConfigurationError: If the document is not a mapping or has unknown keys
    """
    if config is None:
        return MetadataInputs()
    if not isinstance(config, dict):
        raise ConfigurationError(
            "Inputs file must contain a mapping of input names to values",
            path=source,
        )

    for key, value in config.items():
        if MetadataInputs.field_name(str(key)) is None:
            raise ConfigurationError(
                f"Unknown input '{key}'",
                path=source,
                key=str(key),
                suggestion="Valid inputs: branch, filePath, metadataFileName, "
                "product, repo, org, sha, version",
            )
        if isinstance(value, (dict, list)):
            raise ConfigurationError(
                f"Input '{key}' must be a scalar value",
                path=source,
                key=str(key),
            )

    values = {str(k): ("" if v is None else str(v)) for k, v in config.items()}
    return MetadataInputs.from_mapping(expand_options(values, environ=environ))


def load_inputs_file(
    path: Union[str, Path],
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> MetadataInputs:
    """Load MetadataInputs from a YAML file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read inputs file: {e}", path=str(path)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in inputs file: {e}", path=str(path)
        ) from e

    logger.debug("Loaded inputs from %s", path)
    return load_inputs_from_yaml(config, environ=environ, source=str(path))


def collect_inputs(
    overrides: Optional[MetadataInputs] = None,
    config_path: Optional[Union[str, Path]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> MetadataInputs:
    """Combine the input layers, highest precedence last applied.

    Precedence: ``overrides`` (command line), then the YAML inputs file,
    then the step's ``INPUT_*`` variables.
    """
    inputs = read_action_inputs(environ)
    if config_path:
        inputs = inputs.merged_with(load_inputs_file(config_path, environ=environ))
    if overrides is not None:
        inputs = inputs.merged_with(overrides)
    return inputs
