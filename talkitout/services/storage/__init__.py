"""
Storage module - object stores, upload client, and local database.
"""

from talkitout.services.storage.base import BaseObjectStore
from talkitout.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from talkitout.services.storage.models_db import PendingUpload, Setting
from talkitout.services.storage.repository import JournalRepository
from talkitout.services.storage.uploader import UploadClient, content_type_for

__all__ = [
    "Base",
    "BaseObjectStore",
    "JournalRepository",
    "PendingUpload",
    "Setting",
    "UploadClient",
    "close_db",
    "content_type_for",
    "create_object_store",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]


def create_object_store(backend: str, **kwargs) -> BaseObjectStore:
    """
    Factory function to create an object store based on backend name.

    Args:
        backend: Store backend ("local", "http")
        **kwargs: Backend-specific configuration

    Returns:
        BaseObjectStore implementation instance

    Raises:
        ValueError: If backend is unknown
    """
    if backend == "local":
        from .local import LocalObjectStore

        return LocalObjectStore(**kwargs)
    elif backend == "http":
        from .http import HttpObjectStore

        return HttpObjectStore(**kwargs)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")
