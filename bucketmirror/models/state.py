"""
Run-scoped state: the remote inventory, the set of keys referenced by
the local side, and the run summary.

Each structure is owned by one run and passed explicitly through its
phases.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional


def normalize_key(path: str) -> str:
    """Strip a single leading separator so local and remote paths compare."""
    if path.startswith("/"):
        return path[1:]
    return path


class RemoteInventory:
    """Ordered mapping of remote key -> listing ETag under the target prefix.

    Keys are kept exactly as listed (they are what cleanup deletes);
    lookups compare normalized paths.
    """

    def __init__(self):
        self._etags: Dict[str, Optional[str]] = {}
        self._normalized: Dict[str, str] = {}

    def add(self, key: str, etag: Optional[str] = None) -> None:
        self._etags[key] = etag
        self._normalized[normalize_key(key)] = key

    def listed_key(self, key: str) -> Optional[str]:
        """The key exactly as listed for a path, or ``None``."""
        return self._normalized.get(normalize_key(key))

    def etag(self, key: str) -> Optional[str]:
        listed = self.listed_key(key)
        if listed is None:
            return None
        return self._etags[listed]

    def keys(self) -> List[str]:
        return list(self._etags)

    def discard(self, key: str) -> None:
        self._etags.pop(key, None)
        if self._normalized.get(normalize_key(key)) == key:
            del self._normalized[normalize_key(key)]

    def __contains__(self, key) -> bool:
        return normalize_key(key) in self._normalized

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._etags))

    def __len__(self) -> int:
        return len(self._etags)


class LocalReferenceSet:
    """Keys touched by this run; grows monotonically."""

    def __init__(self):
        self._keys = set()

    def add(self, key: str) -> None:
        self._keys.add(normalize_key(key))

    def __contains__(self, key) -> bool:
        return normalize_key(key) in self._keys

    def __len__(self) -> int:
        return len(self._keys)


@dataclass
class SyncSummary:
    """Counts of actions taken by a run."""

    uploaded: int = 0
    updated: int = 0
    skipped: int = 0
    redirected: int = 0
    deleted: int = 0

    @property
    def writes(self) -> int:
        return self.uploaded + self.updated + self.redirected
