"""
AWS S3 mirroring service package.

- :mod:`operations`  — primitive S3 list/head/acl/put/copy/delete calls
- :mod:`inventory`   — paginated remote inventory listing
- :mod:`sync_engine` — per-file reconcile, redirects, orphan cleanup
"""
from .sync_engine import MirrorSyncService
from .operations import S3Operations
from .inventory import InventoryLister

__all__ = [
    'MirrorSyncService',
    'S3Operations',
    'InventoryLister',
]
