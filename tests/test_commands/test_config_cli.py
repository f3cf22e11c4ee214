"""Tests for the ``khipu-docs config`` command group."""

from __future__ import annotations

import json
from pathlib import Path

from khipu_docs.app import app
from khipu_docs.config import load_global_config, save_global_config
from khipu_docs.models import GlobalConfig


class TestConfigShow:
    def test_show_defaults(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["api"]["auth_header"] == "x-api-key"
        assert payload["spec"] is None


class TestConfigSet:
    def test_set_string(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "spec", "./openapi.yaml"])
        assert result.exit_code == 0, result.output
        assert load_global_config().spec == "./openapi.yaml"

    def test_set_int(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "api.max_retries", "5"])
        assert result.exit_code == 0
        assert load_global_config().api.max_retries == 5

    def test_set_bool(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "api.verify_ssl", "false"])
        assert result.exit_code == 0
        assert load_global_config().api.verify_ssl is False

    def test_bad_int(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "api.timeout", "slow"])
        assert result.exit_code == 2

    def test_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "api.nope", "1"])
        assert result.exit_code == 2

    def test_cannot_replace_section(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "api", "x"])
        assert result.exit_code == 2


class TestConfigReset:
    def test_force(self, cli_runner, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(spec="custom.yaml"))
        result = cli_runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0
        assert load_global_config().spec is None

    def test_declined(self, cli_runner, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(spec="custom.yaml"))
        result = cli_runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().spec == "custom.yaml"
