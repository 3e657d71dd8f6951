"""
Document store package.

- database.py: aiosqlite-backed JSON document database
- cache.py: TTL cache owned by each store instance
- service.py: DocumentStore CRUD/query/lookup facade
"""

from .cache import TTLCache
from .database import DocumentDatabase
from .service import DocumentStore

__all__ = ["DocumentDatabase", "DocumentStore", "TTLCache"]
