"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional, Sequence

import pytest

from build_metadata.lib.process import CompletedCommand

# Variables the generator reads from the runner environment
CI_VARIABLES = (
    "GITHUB_HEAD_REF",
    "GITHUB_REF",
    "GITHUB_SHA",
    "GITHUB_REPOSITORY",
    "GITHUB_RUN_ID",
    "GITHUB_OUTPUT",
    "GITHUB_ENV",
)

INPUT_VARIABLES = (
    "INPUT_BRANCH",
    "INPUT_FILEPATH",
    "INPUT_METADATAFILENAME",
    "INPUT_PRODUCT",
    "INPUT_REPO",
    "INPUT_ORG",
    "INPUT_SHA",
    "INPUT_VERSION",
)


class FakeRunner:
    """Process runner returning a canned result and recording calls."""

    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        error: Optional[Exception] = None,
    ):
        self.result = CompletedCommand(stdout=stdout, stderr=stderr, returncode=returncode)
        self.error = error
        self.calls: List[List[str]] = []

    def run(self, args: Sequence[str]) -> CompletedCommand:
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def ci_environ() -> Dict[str, str]:
    """A push build environment as GitHub Actions provides it."""
    return {
        "GITHUB_HEAD_REF": "",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_SHA": "6f1c2a9e0b7d4c3f8a5e2b1d0c9f8e7a6b5c4d3e",
        "GITHUB_REPOSITORY": "hashicorp/vault",
        "GITHUB_RUN_ID": "4242424242",
    }


@pytest.fixture
def clean_env(monkeypatch):
    """Remove runner variables from os.environ so tests see only what they set."""
    for name in CI_VARIABLES + INPUT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
