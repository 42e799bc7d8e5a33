"""Build metadata generator for CI pipelines.

Writes a small JSON descriptor (branch, commit, version, repository and
run id) of the current build for downstream workflow steps.

Usage:
    python -m build_metadata --product vault --version 1.15.0 --file-path ./dist
    generate-metadata --config metadata-inputs.yaml
"""

from build_metadata.lib.metadata import MetadataInputs, MetadataRecord, generate_metadata

__all__ = [
    "MetadataInputs",
    "MetadataRecord",
    "generate_metadata",
]
