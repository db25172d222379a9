from __future__ import annotations

import pytest

from src.common import config
from src.common.errors import ConfigError

_SERVER_ENV = {
    "SUPABASE_URL": "https://example.supabase.co",
    "SUPABASE_SERVICE_ROLE_KEY": "service-role",
    "AWS_REGION": "us-east-1",
    "AWS_BUCKET_NAME": "asset-bucket",
    "ADMIN_SECRET": "letmein",
}
_OPTIONAL_ENV = (
    "SUPABASE_KEY",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "SUPABASE_MODELS_TABLE",
    "AWS_STORAGE_HOST",
    "UPLOAD_API_URL",
    "UPLOAD_TIMEOUT_SECONDS",
    "MAX_UPLOAD_FILES",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_STREAMLIT_SECRETS_CACHE", {})
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for key in (*_SERVER_ENV, *_OPTIONAL_ENV):
        monkeypatch.delenv(key, raising=False)


def _set_server_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key, value in _SERVER_ENV.items():
        monkeypatch.setenv(key, value)


def test_load_config_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "shh")

    cfg = config.load_config()

    assert cfg.supabase_url == "https://example.supabase.co"
    assert cfg.supabase_key == "service-role"
    assert cfg.aws_region == "us-east-1"
    assert cfg.aws_bucket == "asset-bucket"
    assert cfg.admin_secret == "letmein"
    assert cfg.aws_access_key_id == "AKIA"
    assert cfg.aws_secret_access_key == "shh"
    assert cfg.models_table == "models"
    assert cfg.resolved_storage_host() == "s3.us-east-1.amazonaws.com"
    assert cfg.max_upload_files == 100


def test_load_config_accepts_legacy_supabase_key(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY")
    monkeypatch.setenv("SUPABASE_KEY", "anon-or-service")

    assert config.load_config().supabase_key == "anon-or-service"


@pytest.mark.parametrize("missing", ["SUPABASE_URL", "AWS_REGION", "AWS_BUCKET_NAME", "ADMIN_SECRET"])
def test_load_config_missing_key(monkeypatch: pytest.MonkeyPatch, missing: str) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.delenv(missing)

    with pytest.raises(ConfigError, match=missing):
        config.load_config()


def test_load_config_uses_streamlit_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.delenv("ADMIN_SECRET")
    monkeypatch.setattr(config, "_STREAMLIT_SECRETS_CACHE", {"ADMIN_SECRET": "from-secrets"})

    assert config.load_config().admin_secret == "from-secrets"


def test_load_client_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_SECRET", "letmein")

    cfg = config.load_client_config()

    assert cfg.api_url == config.DEFAULT_API_URL
    assert cfg.admin_secret == "letmein"
    assert cfg.timeout_seconds == config.DEFAULT_CLIENT_TIMEOUT_SECONDS


def test_load_client_config_requires_secret() -> None:
    with pytest.raises(ConfigError):
        config.load_client_config()


def test_load_client_config_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_SECRET", "letmein")
    monkeypatch.setenv("UPLOAD_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ConfigError):
        config.load_client_config()


def test_load_config_reads_file_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.setenv("MAX_UPLOAD_FILES", "250")

    assert config.load_config().max_upload_files == 250


@pytest.mark.parametrize("raw", ["many", "0"])
def test_load_config_rejects_bad_file_limit(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    _set_server_env(monkeypatch)
    monkeypatch.setenv("MAX_UPLOAD_FILES", raw)

    with pytest.raises(ConfigError, match="MAX_UPLOAD_FILES"):
        config.load_config()
