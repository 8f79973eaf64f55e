"""Artifact synchronization with the persistence collaborator."""

from .auto_sync import ArtifactKind, AutoSyncOrchestrator, BatchSaveFailure, BatchSaveResult
from .tracking import SyncEntry, SyncState, SyncTracker

__all__ = [
    "ArtifactKind",
    "AutoSyncOrchestrator",
    "BatchSaveFailure",
    "BatchSaveResult",
    "SyncEntry",
    "SyncState",
    "SyncTracker",
]
