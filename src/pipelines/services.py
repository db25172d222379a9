"""Shared dependency bundle for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.config import AppConfig, load_config
from ..common.repository import AssetRepository
from ..common.supabase_client import build_supabase_client
from ..ingest.keys import KeyDeriver
from ..ingest.multipart import MultipartDecoder, RequestDecoder
from ..ingest.object_store import ObjectStore, build_object_store
from .ingestion import IngestionOrchestrator


@dataclass(slots=True)
class IngestionServices:
    """Explicitly constructed clients injected into the orchestrator."""

    repository: AssetRepository
    object_store: ObjectStore
    admin_secret: str
    decoder: RequestDecoder = field(default_factory=MultipartDecoder)
    key_deriver: KeyDeriver = field(default_factory=KeyDeriver)

    def orchestrator(self) -> IngestionOrchestrator:
        return IngestionOrchestrator(
            admin_secret=self.admin_secret,
            decoder=self.decoder,
            object_store=self.object_store,
            repository=self.repository,
            key_deriver=self.key_deriver,
        )


def build_services(config: Optional[AppConfig] = None) -> IngestionServices:
    """Build the production dependency graph from configuration."""

    config = config or load_config()
    client = build_supabase_client(config)
    return IngestionServices(
        repository=AssetRepository(client, table=config.models_table),
        object_store=build_object_store(config),
        admin_secret=config.admin_secret,
        decoder=MultipartDecoder(max_files=config.max_upload_files),
    )
