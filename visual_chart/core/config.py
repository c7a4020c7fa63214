from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    output_dir: Path
    auto_open: bool
    log_level: str
    json_logs: bool
    log_file: str | None


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support VISUAL_CHART_* keys if not in the environment.

    We intentionally do not overwrite existing os.environ values.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            env[k] = v
    except (OSError, UnicodeDecodeError):
        # Unreadable .env must not stop the server from starting
        return {}
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def get_settings() -> Settings:
    env_file = _read_env_file()
    output_dir = _get_env("VISUAL_CHART_OUTPUT_DIR", None, env_file)
    return Settings(
        output_dir=Path(output_dir) if output_dir else Path.cwd() / "charts",
        auto_open=_as_bool(_get_env("VISUAL_CHART_AUTO_OPEN", None, env_file), True),
        log_level=_get_env("VISUAL_CHART_LOG_LEVEL", ["LOG_LEVEL"], env_file) or "INFO",
        json_logs=_as_bool(_get_env("VISUAL_CHART_JSON_LOGS", None, env_file), False),
        log_file=_get_env("VISUAL_CHART_LOG_FILE", None, env_file),
    )
