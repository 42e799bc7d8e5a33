"""Library modules for the metadata generator."""

from build_metadata.lib.actions import (
    error,
    export_variable,
    get_input,
    read_action_inputs,
    set_output,
)
from build_metadata.lib.config_loader import collect_inputs, load_inputs_file
from build_metadata.lib.env import env_lookup, expand_env_vars, load_env_file, resolve
from build_metadata.lib.errors import (
    ConfigurationError,
    MalformedRepositoryReference,
    MetadataError,
    MissingRequiredInput,
    MissingRunIdentifier,
    PostWriteCheckFailure,
    SerializationFailure,
    VersionCommandFailed,
    WriteFailure,
)
from build_metadata.lib.metadata import (
    DEFAULT_METADATA_FILE_NAME,
    DEFAULT_REPOSITORY_OWNER,
    MetadataInputs,
    MetadataRecord,
    generate_metadata,
)
from build_metadata.lib.process import CompletedCommand, ProcessRunner, SubprocessRunner

__all__ = [
    # Actions
    "error",
    "export_variable",
    "get_input",
    "read_action_inputs",
    "set_output",
    # Config
    "collect_inputs",
    "load_inputs_file",
    # Env
    "env_lookup",
    "expand_env_vars",
    "load_env_file",
    "resolve",
    # Errors
    "ConfigurationError",
    "MalformedRepositoryReference",
    "MetadataError",
    "MissingRequiredInput",
    "MissingRunIdentifier",
    "PostWriteCheckFailure",
    "SerializationFailure",
    "VersionCommandFailed",
    "WriteFailure",
    # Metadata
    "DEFAULT_METADATA_FILE_NAME",
    "DEFAULT_REPOSITORY_OWNER",
    "MetadataInputs",
    "MetadataRecord",
    "generate_metadata",
    # Process
    "CompletedCommand",
    "ProcessRunner",
    "SubprocessRunner",
]
