"""Configuration loading utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

try:  # pragma: no cover - Python >=3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_MODELS_TABLE = "models"
DEFAULT_API_URL = "http://127.0.0.1:8000/api/upload"
DEFAULT_CLIENT_TIMEOUT_SECONDS = 300.0
DEFAULT_MAX_UPLOAD_FILES = 100
_STREAMLIT_SECRETS_CACHE: Optional[Dict[str, Any]] = None


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration for the ingestion API."""

    supabase_url: str
    supabase_key: str
    aws_region: str
    aws_bucket: str
    admin_secret: str
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    models_table: str = DEFAULT_MODELS_TABLE
    storage_host: Optional[str] = None
    max_upload_files: int = DEFAULT_MAX_UPLOAD_FILES

    def resolved_storage_host(self) -> str:
        return self.storage_host or f"s3.{self.aws_region}.amazonaws.com"


@dataclass(slots=True)
class ClientConfig:
    """Settings used by the Streamlit submission client."""

    api_url: str
    admin_secret: str
    timeout_seconds: float = DEFAULT_CLIENT_TIMEOUT_SECONDS


def load_config() -> AppConfig:
    """Load and validate server configuration from environment variables."""

    load_dotenv()

    supabase_key = _get_value_from_env_or_secrets(
        "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY"
    )
    if not supabase_key:
        raise ConfigError(
            "Missing required SUPABASE_SERVICE_ROLE_KEY environment variable or Streamlit secret"
        )

    max_files_value = os.getenv("MAX_UPLOAD_FILES")
    try:
        max_upload_files = int(max_files_value) if max_files_value else DEFAULT_MAX_UPLOAD_FILES
    except ValueError as exc:
        raise ConfigError(f"Invalid MAX_UPLOAD_FILES value: {max_files_value}") from exc
    if max_upload_files < 1:
        raise ConfigError(f"MAX_UPLOAD_FILES must be positive, got {max_upload_files}")

    return AppConfig(
        supabase_url=_require("SUPABASE_URL"),
        supabase_key=supabase_key,
        aws_region=_require("AWS_REGION"),
        aws_bucket=_require("AWS_BUCKET_NAME"),
        admin_secret=_require("ADMIN_SECRET"),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        models_table=os.getenv("SUPABASE_MODELS_TABLE") or DEFAULT_MODELS_TABLE,
        storage_host=os.getenv("AWS_STORAGE_HOST") or None,
        max_upload_files=max_upload_files,
    )


def load_client_config() -> ClientConfig:
    """Load the submission client settings from env vars or Streamlit secrets."""

    load_dotenv()

    admin_secret = _get_value_from_env_or_secrets("ADMIN_SECRET")
    if not admin_secret:
        raise ConfigError("Missing required ADMIN_SECRET environment variable or Streamlit secret")

    timeout_value = _get_value_from_env_or_secrets("UPLOAD_TIMEOUT_SECONDS")
    try:
        timeout_seconds = (
            float(timeout_value) if timeout_value else DEFAULT_CLIENT_TIMEOUT_SECONDS
        )
    except ValueError as exc:
        raise ConfigError(f"Invalid UPLOAD_TIMEOUT_SECONDS value: {timeout_value}") from exc

    return ClientConfig(
        api_url=_get_value_from_env_or_secrets("UPLOAD_API_URL") or DEFAULT_API_URL,
        admin_secret=admin_secret,
        timeout_seconds=timeout_seconds,
    )


def _require(name: str) -> str:
    value = _get_value_from_env_or_secrets(name)
    if not value:
        raise ConfigError(f"Missing required environment variable {name}")
    return value


def _get_streamlit_secret(name: str) -> Optional[str]:
    """Read a secret from `.streamlit/secrets.toml` if available."""

    secrets = _load_streamlit_secrets()
    value = secrets.get(name)
    if value is None:
        return None
    return str(value)


def _load_streamlit_secrets() -> Dict[str, Any]:
    """Load and cache Streamlit secrets to avoid repeated disk reads."""

    global _STREAMLIT_SECRETS_CACHE
    if _STREAMLIT_SECRETS_CACHE is not None:
        return _STREAMLIT_SECRETS_CACHE

    project_root = Path(__file__).resolve().parents[2]
    secrets_path = project_root / ".streamlit" / "secrets.toml"
    if not secrets_path.exists():
        _STREAMLIT_SECRETS_CACHE = {}
        return _STREAMLIT_SECRETS_CACHE

    with secrets_path.open("rb") as handle:
        _STREAMLIT_SECRETS_CACHE = tomllib.load(handle)
    return _STREAMLIT_SECRETS_CACHE


def _get_value_from_env_or_secrets(*names: str) -> Optional[str]:
    """Check env vars first, then Streamlit secrets for any of the provided names."""

    for name in names:
        value = os.getenv(name)
        if value:
            return value
    for name in names:
        secret_value = _get_streamlit_secret(name)
        if secret_value:
            return secret_value
    return None
