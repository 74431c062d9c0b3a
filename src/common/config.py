"""Helpers for loading runtime configuration profiles."""
from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import BackendError, ErrorCode
from .models import CsvDialect, GlobalSettings, ProfileSettings, ReaderSettings, RuntimeConfig

DEFAULT_CONFIG_PATH = Path("config/defaults.json")
ALLOWED_ERROR_POLICIES = {"fail-fast", "strict", "replace"}


@dataclass(slots=True)
class ConfigDocument:
    source: Path
    version: int
    global_settings: GlobalSettings
    profiles: Dict[str, ProfileSettings]


def load_runtime_config(
    profile: str = "low_memory",
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load configuration JSON, validate it, and resolve a specific profile."""

    document = load_config_document(
        profile_name=profile,
        config_path=config_path,
        overrides=overrides,
    )
    try:
        profile_settings = document.profiles[profile]
    except KeyError as exc:  # pragma: no cover - guarded in load_config_document
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile}' not found in {document.source}",
        ) from exc
    return RuntimeConfig(global_settings=document.global_settings, profile=profile_settings)


def load_config_document(
    *,
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    cfg_path = config_path or DEFAULT_CONFIG_PATH
    raw = _read_config_json(cfg_path)

    version = _require_positive_int(raw.get("version"), "version", cfg_path)
    global_section = raw.get("global")
    if not isinstance(global_section, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'global' section missing in {cfg_path}")

    overrides = overrides or {}
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, cfg_path)

    profiles_section = raw.get("profiles")
    if not isinstance(profiles_section, Mapping) or not profiles_section:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'profiles' section missing in {cfg_path}")

    profile_overrides = overrides.get("profile") or {}
    profiles: Dict[str, ProfileSettings] = {}
    for name, profile_data in profiles_section.items():
        if not isinstance(profile_data, Mapping):
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Profile '{name}' must be an object in {cfg_path}",
            )
        merged = dict(profile_data)
        if profile_name and name == profile_name and profile_overrides:
            merged = {**merged, **profile_overrides}
        profiles[name] = _build_profile_settings(name, merged, cfg_path)

    if profile_name and profile_name not in profiles:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile_name}' not found in {cfg_path}",
        )

    return ConfigDocument(
        source=cfg_path,
        version=version,
        global_settings=global_settings,
        profiles=profiles,
    )


def check_line_encoding(encoding: str) -> str:
    """Reject unknown encodings and those where CR/LF are not single ASCII bytes.

    Terminators are found by scanning raw bytes, which only works when the
    encoding writes them as 0x0D/0x0A (UTF-16/32 do not). Binary codecs such
    as `hex` or `rot13` pass `codecs.lookup` but cannot encode text at all.
    """
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Unknown encoding '{encoding}'") from exc
    try:
        prefix = "a".encode(encoding)
        encoded = "a\r\n".encode(encoding)
    except (UnicodeError, LookupError) as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Encoding '{encoding}' cannot encode line terminators") from exc
    if encoded[len(prefix):] != b"\r\n":
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Encoding '{encoding}' does not write line terminators as single bytes",
        )
    return encoding


def error_mode_from_policy(policy: str) -> str:
    """Translate human-friendly error policy into Python's encoding error handler."""

    return "strict" if policy.lower() in {"fail-fast", "strict"} else "replace"


def reader_settings_from_runtime(runtime: RuntimeConfig) -> ReaderSettings:
    return ReaderSettings(
        buffer_size=runtime.profile.buffer_size,
        encoding=runtime.global_settings.encoding,
        error_policy=runtime.global_settings.error_policy,
        trim_lines=runtime.profile.trim_lines,
        emit_empty_lines=runtime.profile.emit_empty_lines,
    )


def dialect_from_runtime(runtime: RuntimeConfig) -> CsvDialect:
    return CsvDialect(
        quote_char=runtime.profile.quote_char,
        separator_char=runtime.profile.separator_char,
    )


# ---------------------------------------------------------------------------
# Internal helpers


def _read_config_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:  # pragma: no cover - depends on filesystem
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid JSON: {exc}") from exc


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    encoding = _require_encoding(data.get("encoding", GlobalSettings().encoding), "global.encoding", source)
    error_policy = _normalize_error_policy(
        data.get("error_policy", GlobalSettings().error_policy),
        source,
    )
    return GlobalSettings(encoding=encoding, error_policy=error_policy)


def _build_profile_settings(name: str, data: Mapping[str, Any], source: Path) -> ProfileSettings:
    prefix = f"profiles.{name}"
    required_fields = ("description", "buffer_size")
    missing = [field for field in required_fields if field not in data]
    if missing:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{name}' missing fields {missing} in {source}",
        )

    description = _require_string(data.get("description"), f"{prefix}.description", source)
    buffer_size = _require_positive_int(data.get("buffer_size"), f"{prefix}.buffer_size", source)
    trim_lines = _require_bool(data.get("trim_lines", False), f"{prefix}.trim_lines", source)
    emit_empty_lines = _require_bool(
        data.get("emit_empty_lines", True), f"{prefix}.emit_empty_lines", source
    )
    quote_char = _require_char(data.get("quote_char", '"'), f"{prefix}.quote_char", source)
    separator_char = _require_char(data.get("separator_char", ","), f"{prefix}.separator_char", source)
    if quote_char == separator_char:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{prefix}.quote_char and {prefix}.separator_char must differ in {source}",
        )

    return ProfileSettings(
        description=description,
        buffer_size=buffer_size,
        trim_lines=trim_lines,
        emit_empty_lines=emit_empty_lines,
        quote_char=quote_char,
        separator_char=separator_char,
    )


def _normalize_error_policy(value: Any, source: Path) -> str:
    policy = _require_string(value, "global.error_policy", source).lower()
    if policy not in {p.lower() for p in ALLOWED_ERROR_POLICIES}:
        allowed = ", ".join(sorted(ALLOWED_ERROR_POLICIES))
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported error_policy '{value}' in {source}. Allowed: {allowed}",
        )
    return "fail-fast" if policy in {"fail-fast", "strict"} else "replace"


def _require_string(value: Any, field: str, source: Path) -> str:
    if not isinstance(value, str):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a string in {source}")
    text = value.strip()
    if not text:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be non-empty in {source}")
    return text


def _require_encoding(value: Any, field: str, source: Path) -> str:
    name = _require_string(value, field, source)
    try:
        return check_line_encoding(name)
    except BackendError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} in {source}: {exc.args[0]}") from exc


def _require_char(value: Any, field: str, source: Path) -> str:
    # not stripped: a tab separator is legitimate
    if not isinstance(value, str) or len(value) != 1:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a single character in {source}")
    if value in "\r\n":
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} cannot be a line terminator in {source}")
    return value


def _require_bool(value: Any, field: str, source: Path) -> bool:
    if not isinstance(value, bool):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be true or false in {source}")
    return value


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    if isinstance(value, bool):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be an integer in {source}")
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be an integer in {source}",
        ) from exc
    if num <= 0:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num
