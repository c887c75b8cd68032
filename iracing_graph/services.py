"""Construction of the service objects used by scripts and callers.

Everything is built once and passed around explicitly; there are no
module-level instances.
"""

from dataclasses import dataclass
from typing import Optional

from .dao.car import CarDao
from .dao.track import TrackDao
from .logger import LoggerService
from .properties.service import PropertyAttachmentService
from .schema.manager import SchemaManager
from .store.base import GraphStore
from .store.neo4j import Neo4jGraphStore
from .sync import DataProvider
from .sync.runner import JsonFileProvider, SyncRunner


@dataclass
class Services:
    store: GraphStore
    properties: PropertyAttachmentService
    cars: CarDao
    tracks: TrackDao
    sync: SyncRunner
    logger: LoggerService

    def close(self) -> None:
        self.store.close()


def build_services(
    store: GraphStore,
    provider: DataProvider,
    max_workers: int = 1,
    logger: Optional[LoggerService] = None
) -> Services:
    """Wire the property service, DAOs and sync runner around ``store``."""
    logger = logger or LoggerService()
    properties = PropertyAttachmentService(store)
    cars = CarDao(store, properties, logger)
    tracks = TrackDao(store, properties, logger)
    sync = SyncRunner(provider, cars, tracks, max_workers=max_workers, logger=logger)
    return Services(store, properties, cars, tracks, sync, logger)


def services_from_env(initialize_schema: bool = True) -> Services:
    """Connect to Neo4j with the settings in ``config``.

    Args:
        initialize_schema: Create constraints and indexes before returning
    """
    from . import config

    store = Neo4jGraphStore.connect(
        config.NEO4J_URI,
        config.NEO4J_USER,
        config.NEO4J_PASSWORD,
        config.NEO4J_DATABASE,
    )
    if initialize_schema:
        SchemaManager(store.driver, store.database).initialize_schema()
    return build_services(
        store,
        JsonFileProvider(config.IRACING_DATA_DIR),
        max_workers=config.SYNC_MAX_WORKERS,
    )
