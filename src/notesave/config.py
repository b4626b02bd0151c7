# src/notesave/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "NOTESAVE"

TASKS_STORAGE_KEY = "notesave_db_v1"
THEME_STORAGE_KEY = "notesave_theme_pref"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, default: str, choices: set[str]) -> str:
    raw = _env(name, default).strip().lower()
    return raw if raw in choices else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool
    matrix_enabled: bool

    # ---- Storage ----
    data_dir: Path
    local_storage_path: Path
    tasks_key: str
    theme_key: str
    storage_backend: str  # auto | local | remote
    remote_storage_min_version: str
    host_version: str
    ordered_writes: bool

    # ---- Edit flow features ----
    reminders_enabled: bool
    ai_suggestions_enabled: bool
    toast_on_every_save: bool
    suggestion_language: str

    # ---- UI timing ----
    modal_animation_seconds: float
    toast_seconds: float

    # ---- LLM / OpenRouter ----
    openrouter_api_key: Optional[str]
    openrouter_base_url: str
    llm_models: List[str]
    extra_headers: Dict[str, str]
    llm_connect_timeout_seconds: float
    llm_read_timeout_seconds: float

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_rooms: List[str]
    matrix_storage_room: str
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="notesave") or "notesave"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        matrix_enabled = _env_bool(_k("MATRIX_ENABLED"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/notesave"))
        local_storage_path = _env_path(_k("LOCAL_STORAGE_PATH"), data_dir / "local_storage.json")

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        title = _env(_k("APP_TITLE"), app_name)

        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": title,
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.5-flash",
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )

        matrix_homeserver = (_first_env(_k("MATRIX_HOMESERVER"), "MATRIX_HOMESERVER", default="") or "").strip()
        matrix_user_id = (_first_env(_k("MATRIX_USER_ID"), "MATRIX_USER_ID", default="") or "").strip()
        matrix_password = (_first_env(_k("MATRIX_PASSWORD"), "MATRIX_PASSWORD", default="") or "").strip()
        matrix_rooms = _env_list(_k("MATRIX_ROOMS"), [])
        matrix_storage_room = _env(_k("MATRIX_STORAGE_ROOM"), "").strip()
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            matrix_enabled=matrix_enabled,
            data_dir=data_dir,
            local_storage_path=local_storage_path,
            tasks_key=_env(_k("TASKS_KEY"), TASKS_STORAGE_KEY),
            theme_key=_env(_k("THEME_KEY"), THEME_STORAGE_KEY),
            storage_backend=_env_choice(_k("STORAGE_BACKEND"), "auto", {"auto", "local", "remote", "memory"}),
            remote_storage_min_version=_env(_k("REMOTE_STORAGE_MIN_VERSION"), "6.9"),
            host_version=_env(_k("HOST_VERSION"), "7.0"),
            ordered_writes=_env_bool(_k("ORDERED_WRITES"), False),
            reminders_enabled=_env_bool(_k("REMINDERS_ENABLED"), True),
            ai_suggestions_enabled=_env_bool(_k("AI_SUGGESTIONS_ENABLED"), True),
            toast_on_every_save=_env_bool(_k("TOAST_ON_EVERY_SAVE"), False),
            suggestion_language=_env(_k("SUGGESTION_LANGUAGE"), "Russian"),
            modal_animation_seconds=_env_float(_k("MODAL_ANIMATION_SECONDS"), 0.3),
            toast_seconds=_env_float(_k("TOAST_SECONDS"), 3.0),
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            llm_connect_timeout_seconds=_env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0),
            llm_read_timeout_seconds=_env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 30.0),
            matrix_homeserver=matrix_homeserver,
            matrix_user_id=matrix_user_id,
            matrix_password=matrix_password,
            matrix_rooms=matrix_rooms,
            matrix_storage_room=matrix_storage_room,
            matrix_store_path=matrix_store_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
