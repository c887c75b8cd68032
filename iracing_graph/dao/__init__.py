"""Entity data-access objects."""

from .base import EntityDao
from .car import CarDao
from .track import TrackDao

__all__ = ["EntityDao", "CarDao", "TrackDao"]
