"""Configuration loading and directory resolution for st."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

try:  # pragma: no cover - exercised on Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for Python 3.9/3.10
    import tomli as tomllib  # type: ignore[no-redef]

CONFIG_DIR_NAME = "st"
CONFIG_FILE_NAME = "config.toml"
LOGS_DIR_NAME = "logs"

DEFAULT_HTTP_TIMEOUT_SEC = 10
DEFAULT_LOGS_ENABLED = False
DEFAULT_LOGS_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_LOGS_MAX_FILES = 3
DEFAULT_LOGS_REDACTION = "default"
ALLOWED_LOG_REDACTION = ("default", "none", "strict")


class ConfigError(RuntimeError):
    """Raised when the config file exists but cannot be read."""


@dataclass
class StatusConfig:
    github_org_id: Optional[str] = None
    asana_user_gid: Optional[str] = None
    http_timeout: int = DEFAULT_HTTP_TIMEOUT_SEC
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION


@dataclass
class Settings:
    """Resolved settings for one CLI invocation."""

    config_root: Path
    config: StatusConfig

    @property
    def config_file(self) -> Path:
        return self.config_root / CONFIG_FILE_NAME

    @property
    def logs_dir(self) -> Path:
        return self.config_root / LOGS_DIR_NAME


def resolve_config_root(config_dir: Optional[Path] = None) -> Path:
    if config_dir is not None:
        return Path(config_dir).expanduser().resolve()
    return (Path.home() / ".config" / CONFIG_DIR_NAME).resolve()


def _safe_optional_string(value: object) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _safe_positive_int_or_default(value: object, default: int) -> int:
    try:
        converted = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _safe_redaction(value: object, default: str) -> str:
    normalized = str(value or default).strip().lower()
    if normalized not in ALLOWED_LOG_REDACTION:
        return default
    return normalized


def _parse_config_data(data: Dict[str, object]) -> StatusConfig:
    http = data.get("http") if isinstance(data.get("http"), dict) else {}
    logs = data.get("logs") if isinstance(data.get("logs"), dict) else {}

    return StatusConfig(
        github_org_id=_safe_optional_string(data.get("github_org_id")),
        asana_user_gid=_safe_optional_string(data.get("asana_user_gid")),
        http_timeout=_safe_positive_int_or_default(
            http.get("timeout"),  # type: ignore[union-attr]
            DEFAULT_HTTP_TIMEOUT_SEC,
        ),
        logs_enabled=_safe_bool(logs.get("enabled"), DEFAULT_LOGS_ENABLED),  # type: ignore[union-attr]
        logs_max_file_bytes=_safe_positive_int_or_default(
            logs.get("max_file_bytes"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILE_BYTES,
        ),
        logs_max_files=_safe_positive_int_or_default(
            logs.get("max_files"),  # type: ignore[union-attr]
            DEFAULT_LOGS_MAX_FILES,
        ),
        logs_redaction=_safe_redaction(logs.get("redaction"), DEFAULT_LOGS_REDACTION),  # type: ignore[union-attr]
    )


def _toml_string(value: str) -> str:
    return '"{0}"'.format(str(value).replace("\\", "\\\\").replace('"', '\\"'))


def _render_config(config: StatusConfig) -> str:
    lines: List[str] = [
        "# st configuration",
        "# Tokens are read from SLACK_PAT, GITHUB_PAT and ASANA_PAT.",
        "",
    ]
    if config.github_org_id:
        lines.append("github_org_id = {0}".format(_toml_string(config.github_org_id)))
    else:
        lines.append("# github_org_id = \"O_kgDO...\"")
    if config.asana_user_gid:
        lines.append("asana_user_gid = {0}".format(_toml_string(config.asana_user_gid)))
    else:
        lines.append("# asana_user_gid = \"1200000000000000\"")

    lines.extend(
        [
            "",
            "[http]",
            "timeout = {0}".format(
                _safe_positive_int_or_default(config.http_timeout, DEFAULT_HTTP_TIMEOUT_SEC)
            ),
            "",
            "[logs]",
            "enabled = {0}".format(str(bool(config.logs_enabled)).lower()),
            "max_file_bytes = {0}".format(
                _safe_positive_int_or_default(config.logs_max_file_bytes, DEFAULT_LOGS_MAX_FILE_BYTES)
            ),
            "max_files = {0}".format(
                _safe_positive_int_or_default(config.logs_max_files, DEFAULT_LOGS_MAX_FILES)
            ),
            'redaction = "{0}"'.format(_safe_redaction(config.logs_redaction, DEFAULT_LOGS_REDACTION)),
            "",
        ]
    )
    return "\n".join(lines)


def initialize_config(config_dir: Optional[Path] = None, force: bool = False) -> Path:
    config_root = resolve_config_root(config_dir)
    config_file = config_root / CONFIG_FILE_NAME

    if config_file.exists() and not force:
        raise ConfigError("config file already exists: {0}".format(config_file))

    config_root.mkdir(parents=True, exist_ok=True)
    config_file.write_text(_render_config(StatusConfig()), encoding="utf-8")
    return config_file


def load_config(config_dir: Optional[Path] = None) -> StatusConfig:
    """Read the config file; a missing file yields the defaults."""

    config_file = resolve_config_root(config_dir) / CONFIG_FILE_NAME
    if not config_file.is_file():
        return StatusConfig()

    try:
        parsed = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError("failed to parse {0}: {1}".format(config_file, exc)) from exc

    return _parse_config_data(parsed)


def load_settings(config_dir: Optional[Path] = None) -> Settings:
    config_root = resolve_config_root(config_dir)
    return Settings(config_root=config_root, config=load_config(config_root))
