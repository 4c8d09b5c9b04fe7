# database/__init__.py

"""Хранилище документов DailyNine"""

from .errors import StoreError, StoreWriteError, StoreCorruptionError
from .paths import user_path, entries_collection, entry_path, USERS_COLLECTION
from .store import Direction, Document, DocumentStore, MemoryDocumentStore, WriteBatch
from .json_store import JsonDocumentStore

__all__ = [
    'StoreError',
    'StoreWriteError',
    'StoreCorruptionError',
    'user_path',
    'entries_collection',
    'entry_path',
    'USERS_COLLECTION',
    'Direction',
    'Document',
    'DocumentStore',
    'MemoryDocumentStore',
    'WriteBatch',
    'JsonDocumentStore',
]
