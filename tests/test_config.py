from pathlib import Path

import pytest

from solsign.config import Config, get_config
from solsign.constants import DEFAULT_CHALLENGE_ATTEMPTS


def test_defaults(monkeypatch):
    monkeypatch.delenv("SOLSIGN_LOG_LEVEL", raising=False)
    config = get_config([])
    assert config.key_files == ()
    assert config.no_prompt is False
    assert config.is_single_shot is False
    assert config.challenge_attempts == DEFAULT_CHALLENGE_ATTEMPTS == 5
    assert config.normalized_log_level == "WARNING"


def test_flags():
    config = get_config(["--no-prompt", "--log-level", "debug", "a.json", "b.json"])
    assert config.key_files == (Path("a.json"), Path("b.json"))
    assert config.no_prompt is True
    assert config.is_single_shot is True
    assert config.normalized_log_level == "DEBUG"


def test_single_flag():
    config = get_config(["--single", "--challenge-attempts", "3"])
    assert config.is_single_shot is True
    assert config.challenge_attempts == 3


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("SOLSIGN_LOG_LEVEL", "info")
    assert get_config([]).normalized_log_level == "INFO"


def test_invalid_values():
    with pytest.raises(ValueError):
        Config(challenge_attempts=0)
    with pytest.raises(ValueError):
        Config(log_level="LOUD")
    with pytest.raises(SystemExit):
        get_config(["--log-level", "LOUD"])
