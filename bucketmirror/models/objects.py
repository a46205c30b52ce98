"""
Per-file records used while reconciling a single path.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class SyncAction(str, Enum):
    """Decision taken for one local file."""
    UPLOAD = "upload"
    UPDATE_METADATA = "update_metadata"
    SKIP = "skip"


@dataclass(frozen=True)
class LocalFile:
    """A regular file found under the source root."""

    path: str
    relative_path: str
    stat: os.stat_result


@dataclass
class ObjectDescriptor:
    """Resolved upload parameters for one local file.

    Created fresh per file and discarded after reconciliation.
    """

    relative_path: str
    source_path: str
    key: str
    access: str
    content_type: str
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoteObjectState:
    """Snapshot of an existing remote object's headers and grants."""

    etag: str
    content_type: Optional[str]
    metadata: Dict[str, str]
    grants: List[dict]
