from __future__ import annotations

from pathlib import Path

import pytest

from quizplay.cli import build_parser, resolve_settings
from quizplay.config import Settings


def test_defaults_from_empty_env():
    settings = Settings.from_env({})
    assert settings.db_path.name == "quizzes.json"
    assert settings.port == 3030
    assert settings.http_port == 8000
    assert settings.seed is None
    assert settings.no_color is False
    assert settings.log_level == "WARNING"


def test_env_overrides():
    settings = Settings.from_env(
        {
            "QUIZPLAY_DB": "/tmp/q.json",
            "QUIZPLAY_PORT": "4040",
            "QUIZPLAY_SEED": "7",
            "QUIZPLAY_NO_COLOR": "yes",
            "QUIZPLAY_LOG_LEVEL": "debug",
        }
    )
    assert settings.db_path == Path("/tmp/q.json")
    assert settings.port == 4040
    assert settings.seed == 7
    assert settings.no_color is True
    assert settings.log_level == "DEBUG"


def test_zero_port_from_env_is_kept():
    settings = Settings.from_env({"QUIZPLAY_PORT": "0", "QUIZPLAY_HTTP_PORT": "0"})
    assert settings.port == 0
    assert settings.http_port == 0


def test_round_limits_from_env():
    defaults = Settings.from_env({})
    assert defaults.round_idle_timeout == 900.0
    assert defaults.max_rounds == 1000
    settings = Settings.from_env({"QUIZPLAY_ROUND_IDLE_TIMEOUT": "30", "QUIZPLAY_MAX_ROUNDS": "5"})
    assert settings.round_idle_timeout == 30.0
    assert settings.max_rounds == 5


def test_bad_integer_in_env_is_rejected():
    with pytest.raises(ValueError):
        Settings.from_env({"QUIZPLAY_PORT": "lots"})


def test_flags_override_env_and_port_follows_command():
    base = Settings.from_env({"QUIZPLAY_PORT": "4040"})
    args = build_parser().parse_args(["serve", "--port", "5050", "--seed", "3", "--no-color"])
    settings = resolve_settings(args, base)
    assert settings.port == 5050
    assert settings.seed == 3
    assert settings.no_color is True

    http_args = build_parser().parse_args(["http", "--port", "9000"])
    http_settings = resolve_settings(http_args, base)
    assert http_settings.http_port == 9000
    assert http_settings.port == 4040


def test_console_is_the_default_command():
    assert build_parser().parse_args([]).command == "console"
