"""Tests for YAML inputs loading and input precedence."""

import pytest

from build_metadata.lib.config_loader import (
    collect_inputs,
    load_inputs_file,
    load_inputs_from_yaml,
)
from build_metadata.lib.errors import ConfigurationError
from build_metadata.lib.metadata import MetadataInputs


class TestLoadInputsFromYaml:
    """Tests for loading inputs from parsed YAML."""

    def test_action_style_keys(self):
        inputs = load_inputs_from_yaml(
            {"product": "vault", "version": "make version", "filePath": "./dist"}
        )
        assert inputs.product == "vault"
        assert inputs.version == "make version"
        assert inputs.file_path == "./dist"

    def test_empty_document(self):
        assert load_inputs_from_yaml(None) == MetadataInputs()

    def test_scalars_become_strings(self):
        """Unquoted numbers are stringified."""
        inputs = load_inputs_from_yaml({"version": 2, "sha": None})
        assert inputs.version == "2"
        assert inputs.sha == ""

    def test_env_expansion(self):
        inputs = load_inputs_from_yaml(
            {"org": "${OWNER}", "repo": "$REPO_NAME-docs"},
            environ={"OWNER": "acme", "REPO_NAME": "vault"},
        )
        assert inputs.org == "acme"
        assert inputs.repo == "vault-docs"

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_inputs_from_yaml({"product": "vault", "workflow": "build"})
        assert exc_info.value.key == "workflow"
        assert "Valid inputs" in str(exc_info.value)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            load_inputs_from_yaml(["product", "vault"])

    def test_nested_value(self):
        with pytest.raises(ConfigurationError):
            load_inputs_from_yaml({"version": {"command": "make version"}})


class TestLoadInputsFile:
    """Tests for loading inputs from a YAML file."""

    def test_loads_file(self, tmp_path):
        config = tmp_path / "metadata-inputs.yaml"
        config.write_text("product: vault\nversion: '1.15.0'\nmetadataFileName: build.json\n", encoding="utf-8")
        inputs = load_inputs_file(config, environ={})
        assert inputs.product == "vault"
        assert inputs.version == "1.15.0"
        assert inputs.metadata_file_name == "build.json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_inputs_file(tmp_path / "nope.yaml")
        assert exc_info.value.path == str(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("product: [vault\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_inputs_file(config)
        assert "Invalid YAML" in str(exc_info.value)


class TestCollectInputs:
    """Tests for input precedence."""

    def test_action_inputs_only(self):
        inputs = collect_inputs(environ={"INPUT_PRODUCT": "vault", "INPUT_VERSION": "1.0.0"})
        assert inputs.product == "vault"
        assert inputs.version == "1.0.0"

    def test_file_overrides_action_inputs(self, tmp_path):
        config = tmp_path / "inputs.yaml"
        config.write_text("version: '2.0.0'\n", encoding="utf-8")
        inputs = collect_inputs(
            config_path=config,
            environ={"INPUT_PRODUCT": "vault", "INPUT_VERSION": "1.0.0"},
        )
        assert inputs.product == "vault"
        assert inputs.version == "2.0.0"

    def test_overrides_win(self, tmp_path):
        config = tmp_path / "inputs.yaml"
        config.write_text("version: '2.0.0'\norg: acme\n", encoding="utf-8")
        inputs = collect_inputs(
            MetadataInputs(version="3.0.0"),
            config,
            environ={"INPUT_VERSION": "1.0.0"},
        )
        assert inputs.version == "3.0.0"
        assert inputs.org == "acme"

    def test_empty_override_does_not_clear(self):
        inputs = collect_inputs(MetadataInputs(), environ={"INPUT_PRODUCT": "vault"})
        assert inputs.product == "vault"
