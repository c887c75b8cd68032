"""Batch synchronization of upstream records into the graph.

This module defines:
- The provider interface the sync runner pulls raw records from
- Per-run result summaries with one entry per failed item
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Protocol


class DataProvider(Protocol):
    """Source of raw iRacing records, one list per entity type."""

    def get_all_cars(self) -> List[Dict[str, Any]]: ...

    def get_all_tracks(self) -> List[Dict[str, Any]]: ...


@dataclass
class SyncFailure:
    """One record that could not be synchronized."""
    index: Optional[int]
    id: Any
    error: str
    message: str

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return asdict(self)


@dataclass
class SyncResult:
    """Outcome of synchronizing one entity type.

    ``total``, ``synced`` and ``failed`` count records. A provider that
    could not be read at all is reported in ``fetch_error`` instead, with
    every count left at zero.
    """
    label: str
    total: int = 0
    synced: int = 0
    failed: int = 0
    errors: List[SyncFailure] = field(default_factory=list)
    fetch_error: Optional[SyncFailure] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return {
            "label": self.label,
            "total": self.total,
            "synced": self.synced,
            "failed": self.failed,
            "errors": [e.to_dict() for e in self.errors],
            "fetch_error": self.fetch_error.to_dict() if self.fetch_error else None,
        }
