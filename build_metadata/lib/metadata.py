"""Build metadata generation.

Resolves the step inputs against the CI environment, assembles a
``MetadataRecord`` and writes it as JSON for later pipeline steps.

Usage:
    from build_metadata.lib.metadata import MetadataInputs, generate_metadata

    path = generate_metadata(
        MetadataInputs(product="vault", version="1.15.0", file_path="/tmp/out"),
    )
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from build_metadata.lib.env import env_lookup, resolve
from build_metadata.lib.errors import (
    ConfigurationError,
    MalformedRepositoryReference,
    MissingRunIdentifier,
    PostWriteCheckFailure,
    SerializationFailure,
    WriteFailure,
)
from build_metadata.lib.process import ProcessRunner, resolve_version

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_METADATA_FILE_NAME",
    "DEFAULT_REPOSITORY_OWNER",
    "MetadataInputs",
    "MetadataRecord",
    "generate_metadata",
    "resolve_branch",
    "resolve_record",
    "resolve_repo",
    "serialize_record",
    "verify_written_file",
    "write_metadata_file",
]

DEFAULT_REPOSITORY_OWNER = "hashicorp"
DEFAULT_METADATA_FILE_NAME = "metadata.json"
JSON_INDENT = "\t\t"
FILE_MODE = 0o644


@dataclass(frozen=True)
class MetadataInputs:
    """Declared inputs of a run. Empty strings mean "not supplied"."""

    branch: str = ""
    file_path: str = ""
    metadata_file_name: str = ""
    product: str = ""
    repo: str = ""
    org: str = ""
    sha: str = ""
    version: str = ""

    # External (action.yml) input names mapped to field names
    ALIASES: ClassVar[Dict[str, str]] = {
        "filePath": "file_path",
        "metadataFileName": "metadata_file_name",
    }

    @classmethod
    def field_name(cls, key: str) -> Optional[str]:
        """Map an external or snake_case key to a field name, or None."""
        name = cls.ALIASES.get(key, key)
        return name if name in {f.name for f in fields(cls)} else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MetadataInputs":
        """Create from a mapping keyed by input or field names.

        Raises:
            ConfigurationError: If a key is not a known input.
        """
        values: Dict[str, str] = {}
        for key, value in data.items():
            name = cls.field_name(str(key))
            if name is None:
                raise ConfigurationError(f"Unknown input '{key}'", key=str(key))
            values[name] = "" if value is None else str(value)
        return cls(**values)

    def merged_with(self, other: "MetadataInputs") -> "MetadataInputs":
        """Return a copy where non-empty values of ``other`` take precedence."""
        overrides = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name)}
        return replace(self, **overrides)


@dataclass(frozen=True)
class MetadataRecord:
    """The metadata written for a single build.

    Field order is the key order of the serialized JSON.
    """

    branch: str
    build_workflow_id: str
    product: str
    repo: str
    org: str
    revision: str
    version: str

    # Field name -> JSON key
    JSON_KEYS: ClassVar[Dict[str, str]] = {
        "branch": "branch",
        "build_workflow_id": "buildworkflowid",
        "product": "product",
        "repo": "repo",
        "org": "org",
        "revision": "sha",
        "version": "version",
    }

    def to_dict(self) -> Dict[str, str]:
        """Convert to a dictionary keyed by JSON key, in field order."""
        return {self.JSON_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}


def resolve_branch(branch: str, environ: Mapping[str, str]) -> str:
    """Resolve the working branch.

    The supplied branch wins only while GITHUB_HEAD_REF is empty. Otherwise
    GITHUB_HEAD_REF is used, and when that is empty too the branch comes
    from GITHUB_REF with its ``refs/heads/`` prefix removed.
    """
    head_ref = environ.get("GITHUB_HEAD_REF", "")
    ref = environ.get("GITHUB_REF", "")
    logger.info("GITHUB_HEAD_REF %s", head_ref)
    logger.info("GITHUB_REF %s", ref)

    if branch and not head_ref:
        return branch
    if head_ref:
        return head_ref
    prefix = "refs/heads/"
    return ref[len(prefix):] if ref.startswith(prefix) else ref


def resolve_repo(repo: str, environ: Mapping[str, str]) -> str:
    """Resolve the repository name, deriving it from GITHUB_REPOSITORY if needed.

    Raises:
        MalformedRepositoryReference: If the variable has no ``org/repo`` form.
    """
    if repo:
        return repo
    repository = environ.get("GITHUB_REPOSITORY", "")
    parts = repository.split("/")
    if len(parts) < 2:
        raise MalformedRepositoryReference(repository)
    return parts[1]


def resolve_record(
    inputs: MetadataInputs,
    *,
    environ: Optional[Mapping[str, str]] = None,
    runner: Optional[ProcessRunner] = None,
) -> Tuple[MetadataRecord, Path]:
    """Resolve inputs into a record and the path it should be written to.

    Raises:
        MissingRequiredInput: If product or version is empty.
        MissingRunIdentifier: If GITHUB_RUN_ID is empty.
        MalformedRepositoryReference: If repo must be derived and cannot be.
        VersionCommandFailed: If the version command fails.
    """
    env = os.environ if environ is None else environ

    branch = resolve_branch(inputs.branch, env)
    logger.info("Working branch %s", branch)

    file_name = resolve(inputs.metadata_file_name, None, DEFAULT_METADATA_FILE_NAME)
    # A leading separator must not discard the output directory
    file_path = Path(inputs.file_path) / file_name.lstrip("/" + os.sep)

    product = resolve(inputs.product, None, None, field="product")

    sha = resolve(inputs.sha, env_lookup("GITHUB_SHA", env))
    logger.info("Working sha %s", sha)

    org = resolve(inputs.org, None, DEFAULT_REPOSITORY_OWNER)
    repo = resolve_repo(inputs.repo, env)

    run_id = env.get("GITHUB_RUN_ID", "")
    if not run_id:
        raise MissingRunIdentifier()

    version = resolve(inputs.version, None, None, field="version")
    version = resolve_version(version, runner)
    logger.info("Working version %s", version)

    record = MetadataRecord(
        branch=branch,
        build_workflow_id=run_id,
        product=product,
        repo=repo,
        org=org,
        revision=sha,
        version=version,
    )
    return record, file_path


def serialize_record(record: MetadataRecord) -> str:
    """Serialize a record to tab-indented JSON.

    The result is guaranteed to be encodable as UTF-8, which rules out
    lone surrogates left by undecodable environment values or arguments.

    Raises:
        SerializationFailure: If the record cannot be converted.
    """
    try:
        content = json.dumps(record.to_dict(), indent=JSON_INDENT, ensure_ascii=False)
        content.encode("utf-8")
    except (TypeError, ValueError) as e:
        # UnicodeEncodeError is a ValueError
        raise SerializationFailure("JSON marshal failure", cause=e) from e
    return content


def write_metadata_file(record: MetadataRecord, path: Path) -> Path:
    """Write ``record`` to ``path``, replacing any existing file.

    The content goes to a temporary file in the same directory first and
    is moved into place once complete.

    Raises:
        SerializationFailure: If the record cannot be serialized.
        WriteFailure: If the file cannot be written.
    """
    content = serialize_record(record)
    logger.info("Creating metadata file in %s", path)

    directory = path.parent
    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(directory)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise WriteFailure(
            f"Failed writing data into {path.name} file",
            path=str(path),
            cause=e,
        ) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    return path


def verify_written_file(path: Path) -> None:
    """Confirm ``path`` exists and is a regular file.

    Raises:
        PostWriteCheckFailure: If the path cannot be statted or is not a file.
    """
    try:
        mode = os.stat(path).st_mode
    except OSError as e:
        raise PostWriteCheckFailure(f"Failed to read file {path}", path=str(path), cause=e) from e

    if not stat.S_ISREG(mode):
        raise PostWriteCheckFailure(f"Path is not a regular file: {path}", path=str(path))


def generate_metadata(
    inputs: MetadataInputs,
    *,
    environ: Optional[Mapping[str, str]] = None,
    runner: Optional[ProcessRunner] = None,
) -> Path:
    """Resolve, write and verify the metadata file for a run.

    Args:
        inputs: Declared inputs of the run
        environ: Environment to resolve fallbacks from (defaults to os.environ)
        runner: Process runner for version commands

    Returns:
        Path of the written metadata file
    """
    record, path = resolve_record(inputs, environ=environ, runner=runner)
    write_metadata_file(record, path)
    verify_written_file(path)
    return path
