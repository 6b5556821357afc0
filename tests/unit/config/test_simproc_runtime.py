from __future__ import annotations

import pytest

from simproc.config import (
    ConfigurationError,
    env_bool,
    env_float,
    env_seconds,
    env_str,
    reset_default_values,
)
from simproc.config import runtime as config_runtime
from simproc.config.runtime_helpers import DotenvLoader


class TestEnvHelpers:
    def test_env_str_uses_fallback(self):
        assert env_str("SIMPROC_UNSET", or_value="x") == "x"

    def test_env_str_required(self):
        with pytest.raises(ConfigurationError, match="SIMPROC_UNSET"):
            env_str("SIMPROC_UNSET", required=True)

    def test_env_str_blank_is_missing(self, monkeypatch):
        monkeypatch.setenv("SIMPROC_BLANK", "   ")

        assert env_str("SIMPROC_BLANK", or_value="d") == "d"

    def test_env_float(self, monkeypatch):
        monkeypatch.setenv("SIMPROC_F", "1.5")

        assert env_float("SIMPROC_F") == 1.5

    def test_env_seconds_rejects_negative(self, monkeypatch):
        monkeypatch.setenv("SIMPROC_S", "-3")

        with pytest.raises(ConfigurationError, match="non-negative"):
            env_seconds("SIMPROC_S")

    @pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("0", False), ("On", True)])
    def test_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SIMPROC_B", raw)

        assert env_bool("SIMPROC_B") is expected

    def test_env_bool_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("SIMPROC_B", "maybe")

        with pytest.raises(ConfigurationError):
            env_bool("SIMPROC_B")


class TestDotenvDefaults:
    def test_dotenv_values_back_missing_variables(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("# comment\nexport SIMPROC_FROM_FILE='from file'\nSIMPROC_OTHER=2\n")
        monkeypatch.setattr(config_runtime, "_DOTENV_CANDIDATES", (env_file,))
        reset_default_values()

        assert env_str("SIMPROC_FROM_FILE") == "from file"
        assert env_float("SIMPROC_OTHER") == 2.0

    def test_environment_wins_over_dotenv(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SIMPROC_X=file\n")
        monkeypatch.setattr(config_runtime, "_DOTENV_CANDIDATES", (env_file,))
        monkeypatch.setenv("SIMPROC_X", "env")
        reset_default_values()

        assert env_str("SIMPROC_X") == "env"

    def test_missing_file_loads_nothing(self, tmp_path):
        assert DotenvLoader.load_from_file(tmp_path / "absent.env") == {}
