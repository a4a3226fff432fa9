"""
Dependency wiring for the FastAPI app and the serverless entry point.
"""

from __future__ import annotations

from qsl_backend.card_store import CardStore
from qsl_backend.config import get_settings
from qsl_backend.service import CardService
from qsl_backend.storage import CosStorageClient, InMemoryStorageClient, StorageClient

_storage_client: StorageClient | None = None
_card_service: CardService | None = None


def get_storage_client() -> StorageClient:
    """
    Return a singleton storage client so in-memory collections persist across requests.
    """
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.cos_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = CosStorageClient(
            bucket=settings.cos_bucket,
            region=settings.cos_region or "",
            endpoint=settings.cos_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    return _storage_client


def get_card_service() -> CardService:
    global _card_service
    if _card_service:
        return _card_service

    settings = get_settings()
    store = CardStore(get_storage_client(), settings.collection_config())
    _card_service = CardService(store)
    return _card_service
