"""Tests for the envbind command line tool and its settings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Callable

import pytest

from envbind.cli.main import main, variable_patterns
from envbind.config.settings import CliSettings, load_cli_settings
from envbind.models.errors import ParseError

from sample_config import Struct

if TYPE_CHECKING:
    from conftest import RecordingEnvironment

EnvFactory = Callable[..., "RecordingEnvironment"]


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestCliSettings:
    def test_defaults(self, make_env: EnvFactory) -> None:
        assert load_cli_settings(make_env()) == CliSettings()

    def test_overrides(self, make_env: EnvFactory) -> None:
        cfg = load_cli_settings(make_env({"ENVBIND_LOG_LEVEL": "DEBUG", "ENVBIND_INDENT": "4"}))
        assert (cfg.log_level, cfg.indent) == ("DEBUG", 4)

    def test_bad_indent(self, make_env: EnvFactory) -> None:
        with pytest.raises(ParseError, match="ENVBIND_INDENT"):
            load_cli_settings(make_env({"ENVBIND_INDENT": "wide"}))


# ---------------------------------------------------------------------------
# variable_patterns
# ---------------------------------------------------------------------------


class TestVariablePatterns:
    def test_lists_lookup_order(self) -> None:
        assert list(variable_patterns(Struct, "TEST_PREFIX_")) == [
            "TEST_PREFIX_PARSEABLE",
            "TEST_PREFIX_OPTIONAL",
            "TEST_PREFIX_NESTED:VALUE",
            "TEST_PREFIX_NESTED__VALUE",
            "TEST_PREFIX_VECTOR:{i}",
            "TEST_PREFIX_VECTOR__{i}",
            "TEST_PREFIX_NESTED_VECTOR:{i}:VALUE",
            "TEST_PREFIX_NESTED_VECTOR__{i}__VALUE",
        ]


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_show_pydantic(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("TEST_PREFIX_PARSEABLE", "Name")
        monkeypatch.setenv("TEST_PREFIX_VECTOR__0", "a")
        assert main(["show", "sample_config:Struct"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["parseable"] == "Name"
        assert data["vector"] == ["a"]

    def test_show_with_prefix(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("ALT_NESTED__VALUE", "9")
        assert main(["show", "sample_config:Struct", "--prefix", "ALT_"]) == 0
        assert json.loads(capsys.readouterr().out)["nested"] == {"value": 9}

    def test_show_dataclass(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("P_EXTRA__0", "/opt")
        assert main(["show", "sample_config:Paths", "--prefix", "P_"]) == 0
        assert json.loads(capsys.readouterr().out) == {"root": "/tmp", "extra": ["/opt"]}

    def test_show_bind_error(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("TEST_PREFIX_NESTED:VALUE", "nope")
        assert main(["show", "sample_config:Struct"]) == 1
        assert "TEST_PREFIX_NESTED:VALUE" in capsys.readouterr().err

    def test_vars(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["vars", "sample_config:Struct", "--prefix", "X_"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "X_PARSEABLE"
        assert "X_NESTED_VECTOR__{i}__VALUE" in lines

    def test_settings_error(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("ENVBIND_INDENT", "-3")
        assert main(["vars", "sample_config:Struct"]) == 1
        assert "ENVBIND_INDENT" in capsys.readouterr().err

    @pytest.mark.parametrize("target", [
        "sample_config",
        "sample_config:Missing",
        "no_such_module_here:Thing",
        "sample_config:NOT_A_CLASS",
    ])
    def test_bad_target(self, target: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["show", target])
        assert exc_info.value.code == 2
