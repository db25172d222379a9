"""Helpers for creating Supabase clients."""

from __future__ import annotations

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from .config import AppConfig


def build_supabase_client(config: AppConfig) -> Client:
    """Instantiate a service-role Supabase client using the provided config.

    The API never signs users in, so session persistence and token refresh
    are switched off.
    """

    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(config.supabase_url, config.supabase_key, options=options)
