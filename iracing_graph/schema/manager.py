"""Schema manager for Neo4j constraints and indexes."""

import logging
from typing import List, Tuple

from neo4j import Driver

from . import CAR, NODE_KEYS, TRACK

logger = logging.getLogger(__name__)


class SchemaManager:
    """Manages the uniqueness constraints and indexes merge-by-key relies on."""

    def __init__(self, driver: Driver, database: str = "neo4j"):
        """Initialize the schema manager.

        Args:
            driver: Neo4j driver, owned by the caller
            database: Database name
        """
        self.driver = driver
        self.database = database

    def statements(self) -> List[Tuple[str, str]]:
        """Named schema statements, constraints first."""
        constraints = [
            (
                f"{label.lower()}_{key}",
                f"CREATE CONSTRAINT {label.lower()}_{key} IF NOT EXISTS "
                f"FOR (n:{label}) REQUIRE n.{key} IS UNIQUE",
            )
            for label, key in NODE_KEYS.items()
        ]
        indexes = [
            (
                "car_name",
                f"CREATE INDEX car_name IF NOT EXISTS FOR (n:{CAR}) ON (n.car_name)",
            ),
            (
                "track_name",
                f"CREATE INDEX track_name IF NOT EXISTS FOR (n:{TRACK}) ON (n.track_name)",
            ),
        ]
        return constraints + indexes

    def initialize_schema(self) -> int:
        """Create all constraints and indexes.

        Safe to call repeatedly; every statement uses IF NOT EXISTS.

        Returns:
            Number of statements executed
        """
        statements = self.statements()
        with self.driver.session(database=self.database) as session:
            for name, cypher in statements:
                logger.info("Ensuring %s", name)
                session.run(cypher)

        logger.info("Schema ready: %d statements", len(statements))
        return len(statements)
