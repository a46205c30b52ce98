"""
Per-file change detection.

Classifies a local file as Upload, UpdateMetadata or Skip by comparing
its MD5 and resolved policy against the remote object. Headers and
grants are only fetched once the byte content is known to match.
"""
import hashlib
from typing import Dict, List, Optional

from ..models.objects import ObjectDescriptor, RemoteObjectState, SyncAction
from ..models.state import RemoteInventory
from ..utils.logger import get_logger

log = get_logger(__name__)

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"

HASH_CHUNK_SIZE = 64 * 1024


def content_md5(handle) -> str:
    """Stream-hash *handle* and format it the way S3 reports ETags."""
    digest = hashlib.md5()
    for chunk in iter(lambda: handle.read(HASH_CHUNK_SIZE), b''):
        digest.update(chunk)
    return f'"{digest.hexdigest()}"'


def quote_etag(etag: str) -> str:
    return '"' + etag.strip('"') + '"'


def previous_access(grants: List[dict]) -> str:
    """Derive the canned ACL an object's grants correspond to.

    ``AllUsers`` WRITE wins over ``AllUsers`` READ, which wins over an
    ``AuthenticatedUsers`` READ; anything else is ``private``.
    """
    public = set()
    authenticated = set()
    for grant in grants or []:
        uri = (grant.get('Grantee') or {}).get('URI')
        permission = grant.get('Permission')
        if uri == ALL_USERS_URI:
            public.add(permission)
        elif uri == AUTHENTICATED_USERS_URI:
            authenticated.add(permission)

    if 'WRITE' in public:
        return "public-read-write"
    if 'READ' in public:
        return "public-read"
    if 'READ' in authenticated:
        return "authenticated-read"
    return "private"


def content_type_changed(previous: Optional[str], desired: str) -> bool:
    """An empty *desired* type means no preference; S3 fills in its own default."""
    if not desired:
        return False
    if not previous:
        return True
    return previous != desired


def metadata_changed(previous: Dict[str, str], desired: Dict[str, str]) -> bool:
    """Compare user metadata.

    Only keys present on both sides are compared; a count mismatch
    still counts as a change. Remote keys are matched case-insensitively
    since S3 lowercases them.
    """
    previous = previous or {}
    if len(previous) != len(desired):
        return True

    lowered = {k.lower(): v for k, v in previous.items()}
    for key, value in desired.items():
        remote = previous.get(key, lowered.get(key.lower()))
        if remote is not None and remote != value:
            return True
    return False


class ChangeDetector:
    """Decides what to do with one local file.

    Args:
        operations: :class:`S3Operations` used to fetch remote state
    """

    def __init__(self, operations):
        self.operations = operations

    def fetch_state(self, key: str) -> RemoteObjectState:
        """Read headers and grants of *key*.

        Raises:
            RemoteStateError: If either request fails
        """
        head = self.operations.head_object(key)
        acl = self.operations.get_object_acl(key)
        return RemoteObjectState(
            etag=head.get('ETag', ''),
            content_type=head.get('ContentType'),
            metadata=head.get('Metadata') or {},
            grants=acl.get('Grants') or [],
        )

    def decide(self, descriptor: ObjectDescriptor, handle,
               inventory: RemoteInventory) -> SyncAction:
        """Classify *descriptor*.

        *handle* is the open binary file; on ``UPLOAD`` it is left
        rewound to the start so it can be streamed without reopening.
        """
        if descriptor.key not in inventory:
            return SyncAction.UPLOAD

        local_hash = content_md5(handle)

        state = None
        remote_hash = inventory.etag(descriptor.key)
        if remote_hash is None:
            state = self.fetch_state(descriptor.key)
            remote_hash = state.etag

        if local_hash != quote_etag(remote_hash or ''):
            handle.seek(0)
            return SyncAction.UPLOAD

        if state is None:
            state = self.fetch_state(descriptor.key)

        if self._has_changed(descriptor, state):
            return SyncAction.UPDATE_METADATA

        log.debug("Skipping \"%s\" because hashes and metadata match", descriptor.relative_path)
        return SyncAction.SKIP

    def _has_changed(self, descriptor: ObjectDescriptor, state: RemoteObjectState) -> bool:
        rel = descriptor.relative_path

        if content_type_changed(state.content_type, descriptor.content_type):
            log.debug("Content-Type has changed from %s to %s for \"%s\"",
                      state.content_type or "unset", descriptor.content_type, rel)
            return True

        if len(state.metadata) != len(descriptor.metadata):
            log.debug("Count of metadata values has changed for \"%s\"", rel)
            return True

        if metadata_changed(state.metadata, descriptor.metadata):
            log.debug("Metadata values have changed for \"%s\"", rel)
            return True

        access = previous_access(state.grants)
        if access != descriptor.access:
            log.debug("Permissions for \"%s\" have changed from \"%s\" to \"%s\"",
                      descriptor.key, access, descriptor.access)
            return True

        return False
