"""CLI entry point for generating build metadata.

Usage:
    python -m build_metadata --product vault --version 1.15.0
    python -m build_metadata --product vault --version "make version" --file-path ./dist
    python -m build_metadata --config metadata-inputs.yaml --json-log

Inside a GitHub Actions step the inputs are read from the step's ``with:``
block (``INPUT_*`` variables); command line flags override them.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from build_metadata.lib import actions
from build_metadata.lib.config_loader import collect_inputs
from build_metadata.lib.env import load_env_file
from build_metadata.lib.errors import MetadataError
from build_metadata.lib.metadata import DEFAULT_METADATA_FILE_NAME, MetadataInputs, generate_metadata
from build_metadata.lib.observability import setup_logging

logger = logging.getLogger("build_metadata")

OUTPUT_NAME = "filepath"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="generate-metadata",
        description="Write a JSON metadata file describing the current CI build.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --product vault --version 1.15.0
  %(prog)s --product vault --version "make version" --file-path ./dist
  %(prog)s --config metadata-inputs.yaml
""",
    )

    inputs = parser.add_argument_group("inputs")
    inputs.add_argument("--product", default="", help="Product name (required)")
    inputs.add_argument(
        "--version",
        default="",
        help="Version string, or a command printing it when it contains a space (required)",
    )
    inputs.add_argument("--branch", default="", help="Branch name (default: from GITHUB_HEAD_REF/GITHUB_REF)")
    inputs.add_argument(
        "--file-path",
        dest="file_path",
        default="",
        help="Directory to write the metadata file to (default: current directory)",
    )
    inputs.add_argument(
        "--metadata-file-name",
        dest="metadata_file_name",
        default="",
        help=f"Metadata file name (default: {DEFAULT_METADATA_FILE_NAME})",
    )
    inputs.add_argument("--repo", default="", help="Repository name (default: from GITHUB_REPOSITORY)")
    inputs.add_argument("--org", default="", help="Repository owner (default: hashicorp)")
    inputs.add_argument("--sha", default="", help="Commit SHA (default: from GITHUB_SHA)")

    parser.add_argument("--config", help="YAML file with input values")
    parser.add_argument("--env-file", dest="env_file", help="Load environment variables from a .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json-log", action="store_true", help="Output logs in JSON format")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def inputs_from_args(args: argparse.Namespace) -> MetadataInputs:
    """Collect the input flags given on the command line."""
    return MetadataInputs(
        branch=args.branch,
        file_path=args.file_path,
        metadata_file_name=args.metadata_file_name,
        product=args.product,
        repo=args.repo,
        org=args.org,
        sha=args.sha,
        version=args.version,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log,
        log_file=args.log_file,
    )

    try:
        if args.env_file and not load_env_file(args.env_file):
            logger.warning("No variables loaded from %s", args.env_file)

        inputs = collect_inputs(inputs_from_args(args), args.config)
        generated_file = generate_metadata(inputs)

        actions.set_output(OUTPUT_NAME, str(generated_file))
        actions.export_variable(OUTPUT_NAME, str(generated_file))
        logger.info("Successfully created %s file", generated_file)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)

    except MetadataError as e:
        logger.error("Metadata generation failed: %s", e.message, extra={"error": e.to_dict()})
        actions.error(str(e))
        sys.exit(1)

    except OSError as e:
        # Publishing outputs to GITHUB_OUTPUT/GITHUB_ENV failed
        logger.error("Failed to publish step outputs: %s", e)
        actions.error(f"Failed to publish step outputs: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
