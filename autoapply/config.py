"""Load cached profile and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from autoapply.errors import ProfileUnavailableError
from autoapply.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"

API_BASE_URLS: dict[str, str] = {
    "development": "http://localhost:5000/api",
    "production": "https://api.autoapplypro.com/api",
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_flag(key: str, default: bool) -> bool:
    raw = get_env(key)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    environment: str = "production"
    api_url: str = API_BASE_URLS["production"]
    auth_token: str = ""
    request_timeout: float = 15.0
    headless: bool = True
    debug: bool = False
    viewport_width: int = 1280
    viewport_height: int = 900
    profile_path: Path = PROFILE_PATH


def load_settings() -> Settings:
    environment = get_env("AUTOAPPLY_ENV", "production").lower()
    if environment not in API_BASE_URLS:
        log.warning("Unknown AUTOAPPLY_ENV=%r, falling back to production", environment)
        environment = "production"
    return Settings(
        environment=environment,
        api_url=get_env("AUTOAPPLY_API_URL") or API_BASE_URLS[environment],
        auth_token=get_env("AUTOAPPLY_TOKEN"),
        request_timeout=float(get_env("AUTOAPPLY_TIMEOUT", "15")),
        headless=_env_flag("AUTOAPPLY_HEADLESS", True),
        debug=_env_flag("AUTOAPPLY_DEBUG", False),
        viewport_width=int(get_env("AUTOAPPLY_VIEWPORT_WIDTH", "1280")),
        viewport_height=int(get_env("AUTOAPPLY_VIEWPORT_HEIGHT", "900")),
        profile_path=Path(get_env("AUTOAPPLY_PROFILE_PATH") or PROFILE_PATH),
    )


def load_cached_profile(path: Path | None = None) -> dict[str, Any]:
    """Read the cached resume blob used by instant fill.

    YAML or JSON; a top-level ``resumeData`` envelope is unwrapped.
    """
    path = Path(path or load_settings().profile_path)
    if not path.exists():
        raise ProfileUnavailableError(f"No cached profile at {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if isinstance(data, dict) and isinstance(data.get("resumeData"), dict):
        data = data["resumeData"]
    if not isinstance(data, dict) or not data:
        raise ProfileUnavailableError(f"Cached profile at {path} is empty")
    return data


def save_cached_profile(profile: dict[str, Any], path: Path | None = None) -> Path:
    path = Path(path or load_settings().profile_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(profile, f, sort_keys=False, allow_unicode=True)
    log.info("Cached profile → %s", path)
    return path
