"""Tests for runtime configuration loader."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from common.config import (
    dialect_from_runtime,
    error_mode_from_policy,
    load_runtime_config,
    reader_settings_from_runtime,
)
from common.errors import BackendError, ErrorCode

DEFAULTS_PATH = Path(__file__).resolve().parents[1] / "config" / "defaults.json"


def test_load_low_memory_profile_defaults() -> None:
    config = load_runtime_config("low_memory", config_path=DEFAULTS_PATH)
    assert config.profile.buffer_size == 4096
    assert config.profile.emit_empty_lines is True
    assert config.global_settings.encoding == "utf-8"
    assert config.global_settings.error_policy == "fail-fast"


def test_error_mode_resolution() -> None:
    assert error_mode_from_policy("fail-fast") == "strict"
    assert error_mode_from_policy("strict") == "strict"
    assert error_mode_from_policy("replace") == "replace"


def test_overrides_flow_into_reader_settings() -> None:
    config = load_runtime_config(
        "workstation",
        config_path=DEFAULTS_PATH,
        overrides={
            "global": {"encoding": "cp1251", "error_policy": "replace"},
            "profile": {"buffer_size": 64, "trim_lines": True, "separator_char": ";"},
        },
    )
    settings = reader_settings_from_runtime(config)
    assert settings.buffer_size == 64
    assert settings.encoding == "cp1251"
    assert settings.error_policy == "replace"
    assert settings.trim_lines is True
    assert settings.emit_empty_lines is True
    dialect = dialect_from_runtime(config)
    assert (dialect.quote_char, dialect.separator_char) == ('"', ";")


def test_missing_profile_raises_backend_error(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        {
            "version": 1,
            "global": {"encoding": "utf-8", "error_policy": "fail-fast"},
            "profiles": {"only": _profile_payload()},
        },
    )
    with pytest.raises(BackendError) as exc:
        load_runtime_config("missing", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_invalid_error_policy_rejected(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        {
            "version": 1,
            "global": {"encoding": "utf-8", "error_policy": "panic"},
            "profiles": {"low_memory": _profile_payload()},
        },
    )
    with pytest.raises(BackendError) as exc:
        load_runtime_config("low_memory", config_path=config_path)
    assert "error_policy" in str(exc.value)


@pytest.mark.parametrize("encoding", [" ", "klingon-8", "hex", "rot13", "utf-16"])
def test_bad_encoding_rejected(tmp_path: Path, encoding: str) -> None:
    config_path = _write_config(
        tmp_path,
        {
            "version": 1,
            "global": {"encoding": encoding, "error_policy": "replace"},
            "profiles": {"low_memory": _profile_payload()},
        },
    )
    with pytest.raises(BackendError) as exc:
        load_runtime_config("low_memory", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("buffer_size", 0),
        ("buffer_size", "big"),
        ("trim_lines", "yes"),
        ("quote_char", "''"),
        ("separator_char", "\n"),
        ("separator_char", '"'),
    ],
)
def test_invalid_profile_fields_rejected(tmp_path: Path, field: str, value) -> None:
    profile = _profile_payload()
    profile[field] = value
    config_path = _write_config(
        tmp_path,
        {
            "version": 1,
            "global": {"encoding": "utf-8", "error_policy": "fail-fast"},
            "profiles": {"low_memory": profile},
        },
    )
    with pytest.raises(BackendError) as exc:
        load_runtime_config("low_memory", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR
    assert field in str(exc.value)


def test_invalid_json_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(BackendError) as exc:
        load_runtime_config("low_memory", config_path=path)
    assert "not valid JSON" in str(exc.value)


def _write_config(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def _profile_payload() -> dict:
    return {
        "description": "tmp",
        "buffer_size": 1024,
        "trim_lines": False,
        "emit_empty_lines": True,
        "quote_char": '"',
        "separator_char": ",",
    }
