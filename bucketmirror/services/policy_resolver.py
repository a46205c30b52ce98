"""
Resolve access level, content type and metadata for a relative path.

Pure functions of the configured policies; no I/O.
"""
import mimetypes
import posixpath
from fnmatch import fnmatchcase
from typing import Dict, Tuple

from ..models.policy import PolicyKind, PolicyValue

DEFAULT_ACCESS = "private"


def glob_match(pattern: str, path: str) -> bool:
    """Shell-style match where ``*`` also crosses ``/`` boundaries."""
    return fnmatchcase(path, pattern)


def file_extension(path: str) -> str:
    """Return the extension of *path* including the dot, or ''."""
    return posixpath.splitext(path)[1]


def guess_content_type(path: str) -> str:
    """Standard extension-to-MIME lookup; '' when unknown."""
    ext = file_extension(path)
    if not ext:
        return ""
    mime_type, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return mime_type or ""


def resolve_access(policy: PolicyValue, path: str) -> str:
    if policy.kind is PolicyKind.SCALAR:
        return policy.scalar
    if policy.kind is PolicyKind.PATTERN_MAP:
        for pattern, access in policy:
            if glob_match(pattern, path):
                return access
    return DEFAULT_ACCESS


def resolve_content_type(policy: PolicyValue, path: str) -> str:
    """Fixed value, then exact extension match, then the MIME table."""
    if policy.kind is PolicyKind.SCALAR:
        return policy.scalar
    if policy.kind is PolicyKind.PATTERN_MAP:
        ext = file_extension(path)
        for pattern_ext, content_type in policy:
            if pattern_ext == ext:
                return content_type
    return guess_content_type(path)


def resolve_metadata(policy: PolicyValue, path: str) -> Dict[str, str]:
    """Key/value pairs of the first pattern matching *path*.

    Later matching patterns are never merged in.
    """
    if policy.kind is not PolicyKind.PATTERN_MAP:
        return {}
    for pattern, values in policy:
        if glob_match(pattern, path):
            return {str(k): str(v) for k, v in values.items()}
    return {}


class PolicyResolver:
    """Bundle of the three configured policies.

    Args:
        access: Canned ACL policy
        content_type: Content-Type policy (pattern maps keyed by extension)
        metadata: Metadata policy (glob pattern -> key/value map)
    """

    def __init__(self, access=None, content_type=None, metadata=None):
        self.access = access or PolicyValue.absent()
        self.content_type = content_type or PolicyValue.absent()
        self.metadata = metadata or PolicyValue.absent()

    def resolve(self, path: str) -> Tuple[str, str, Dict[str, str]]:
        """Return ``(access, content_type, metadata)`` for *path*."""
        return (
            resolve_access(self.access, path),
            resolve_content_type(self.content_type, path),
            resolve_metadata(self.metadata, path),
        )
