"""
Entity store backends
"""
from backoffice.store.base import Store, StoreError, TableStore
from backoffice.store.memory import MemoryStore
from backoffice.store.sql import SqlStore

__all__ = ["Store", "StoreError", "TableStore", "MemoryStore", "SqlStore"]
