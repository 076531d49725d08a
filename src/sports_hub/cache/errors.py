from __future__ import annotations


class CacheStoreError(RuntimeError):
    """Persistent cache tier failed. Logged and swallowed; the cache is best-effort."""
