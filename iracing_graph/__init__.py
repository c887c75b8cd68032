"""Graph persistence for iRacing data.

Cars and tracks from the iRacing data API are stored in Neo4j. Boolean
attributes shared across entities (AI enabled, rain enabled, ...) become
shared Property nodes linked by relationships instead of flat columns.
"""

from .errors import (
    IRacingGraphError,
    QueryError,
    RelationshipCreationError,
    ValidationError,
)
from .services import Services, build_services, services_from_env

__all__ = [
    "IRacingGraphError",
    "QueryError",
    "RelationshipCreationError",
    "ValidationError",
    "Services",
    "build_services",
    "services_from_env",
]

__version__ = "0.1.0"
