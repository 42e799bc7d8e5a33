"""Build metadata test suite.

- unit/test_metadata.py: input resolution, serialization and file writing
- unit/test_process.py: version command execution
- unit/test_actions.py: GitHub Actions inputs and outputs
- unit/test_config_loader.py: YAML inputs and input precedence
- unit/test_cli.py: command line entry point
"""
