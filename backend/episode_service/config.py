"""服务配置与环境变量加载器，支持 .env 文件与系统环境并存."""
from __future__ import annotations

import os
from pathlib import Path

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


def _load_env_file(path: Path = _ENV_PATH) -> None:
    """读取 .env 文件到 os.environ，不覆盖已存在的环境变量."""
    if not path.exists():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


def _get_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def _get_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


ANIME_API_TIMEOUT_SECONDS: float = _get_positive_float("ANIME_API_TIMEOUT_SECONDS", 2.0)
MAX_FUTURE_RELEASE_YEARS: int = _get_positive_int("MAX_FUTURE_RELEASE_YEARS", 10)
MAX_SIZE_ID_LIST: int = _get_positive_int("MAX_SIZE_ID_LIST", 100)
MAX_PAGE_SIZE: int = _get_positive_int("MAX_PAGE_SIZE", 100)

MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "episodes")

APP_HOST: str = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT: int = _get_positive_int("APP_PORT", 8000)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def _require_env(name: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raise RuntimeError(f"{name} 未配置：必须显式设置。")
    return raw.strip()


def require_anime_api_url() -> str:
    return _require_env("ANIME_API_URL").rstrip("/")


def require_mongo_uri() -> str:
    return _require_env("MONGO_URI")
