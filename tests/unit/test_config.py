from __future__ import annotations

import textwrap
from fractions import Fraction
from pathlib import Path

import pytest

from mboxclass.config import (
    DEFAULT_ENCODING,
    DEFAULT_PRECISION,
    ConfigurationError,
    load_config,
    parse_email_count,
    parse_matches,
)


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent(content), encoding="utf-8")
    return config_path


def test_load_config_success(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        f"""
        logging:
          level: DEBUG
          file: {tmp_path}/logs/mboxclass.log
        encoding: latin-1
        precision: 4
        spam:
          label: junk
          emails: 10
          matches: 4.5
        """,
    )

    config = load_config(config_path)

    assert config.logging.level == "debug"
    assert config.logging.file == tmp_path / "logs" / "mboxclass.log"
    assert config.encoding == "latin-1"
    assert config.precision == 4
    assert config.spam.label == "junk"
    assert config.spam.emails == 10
    assert config.spam.matches == Fraction(9, 2)
    assert config.spam.enabled is True


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "precision: 9\n")
    monkeypatch.setenv("MBOXCLASS_CONFIG", str(config_path))

    config = load_config()

    assert config.precision == 9


def test_logging_file_level_is_parsed(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        f"""
        logging:
          level: warning
          file: {tmp_path}/mboxclass.log
          file_level: DEBUG
        """,
    )

    config = load_config(config_path)

    assert config.logging.level == "warning"
    assert config.logging.file_level == "debug"


def test_missing_default_config_uses_defaults(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("MBOXCLASS_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    config = load_config()

    assert config.encoding == DEFAULT_ENCODING
    assert config.precision == DEFAULT_PRECISION
    assert config.logging.file is None
    assert config.spam.enabled is False
    assert config.spam.label == "spam"


def test_missing_explicit_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path, ""))

    assert config.precision == DEFAULT_PRECISION


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "logging: verbose\n",
        "logging:\n  file: ''\n",
        "logging:\n  file_level: debug\n",
        "spam: 10\n",
        "spam:\n  emails: 10\n",
        "spam:\n  emails: 3\n  matches: 4\n",
        "spam:\n  emails: -1\n  matches: 0\n",
        "spam:\n  emails: 3\n  matches: lots\n",
        "encoding: no-such-codec\n",
        "precision: 0\n",
        "precision: many\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    with pytest.raises(ConfigurationError):
        load_config(_write_config(tmp_path, content))


def test_parse_matches_is_exact() -> None:
    assert parse_matches("9/2", "m") == Fraction(9, 2)
    assert parse_matches(0.1, "m") == Fraction(1, 10)
    assert parse_matches(3, "m") == Fraction(3)
    with pytest.raises(ConfigurationError):
        parse_matches(True, "m")


def test_parse_email_count_rejects_fractions() -> None:
    assert parse_email_count("12", "e") == 12
    with pytest.raises(ConfigurationError):
        parse_email_count("1.5", "e")
