"""Exception hierarchy for the iRacing graph persistence layer."""

from typing import Any, Dict, List, Optional


class IRacingGraphError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(IRacingGraphError):
    """A raw upstream record failed its ingestion model.

    Raised before any store access, so nothing has been written.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class QueryError(IRacingGraphError):
    """The graph store rejected or failed to run a statement."""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class RelationshipCreationError(IRacingGraphError):
    """A relationship the pipeline requires was not created."""

    def __init__(self, rel_type: str, source: Any, target: Any):
        super().__init__(
            f"Failed to create {rel_type} relationship between {source} and {target}"
        )
        self.rel_type = rel_type
        self.source = source
        self.target = target
