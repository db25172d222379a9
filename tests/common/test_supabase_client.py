from src.common.config import AppConfig
from src.common.supabase_client import build_supabase_client


class _DummyClient:
    pass


def _config() -> AppConfig:
    return AppConfig(
        supabase_url="https://example.supabase.co",
        supabase_key="service-role",
        aws_region="us-east-1",
        aws_bucket="asset-bucket",
        admin_secret="letmein",
    )


def test_build_supabase_client_disables_sessions(monkeypatch):
    captured = {}

    def _fake_create_client(url: str, key: str, options=None) -> _DummyClient:
        captured["url"] = url
        captured["key"] = key
        captured["options"] = options
        return _DummyClient()

    monkeypatch.setattr(
        "src.common.supabase_client.create_client", _fake_create_client
    )

    client = build_supabase_client(_config())

    assert isinstance(client, _DummyClient)
    assert captured["url"] == "https://example.supabase.co"
    assert captured["key"] == "service-role"
    assert captured["options"].persist_session is False
    assert captured["options"].auto_refresh_token is False
