"""Object storage - swap backend here."""
from shopadmin.storage.base import BaseStorage

_storage = None


def get_storage() -> BaseStorage:
    """Get or create the storage backend (lazy initialization)."""
    global _storage
    if _storage is None:
        from shopadmin.storage.local import LocalStorage
        _storage = LocalStorage()
    return _storage
