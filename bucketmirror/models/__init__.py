"""
Data models for bucketmirror.
"""
from .policy import PolicyKind, PolicyValue
from .objects import LocalFile, ObjectDescriptor, RemoteObjectState, SyncAction
from .state import LocalReferenceSet, RemoteInventory, SyncSummary

__all__ = [
    'PolicyKind',
    'PolicyValue',
    'LocalFile',
    'ObjectDescriptor',
    'RemoteObjectState',
    'SyncAction',
    'LocalReferenceSet',
    'RemoteInventory',
    'SyncSummary',
]
