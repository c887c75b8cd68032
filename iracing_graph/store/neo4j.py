"""Neo4j implementation of the graph store."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union

from neo4j import Driver, GraphDatabase, Record, Transaction
from neo4j.exceptions import DriverError, Neo4jError

from . import as_node_ref, timestamp
from .base import GraphStore
from ..errors import QueryError
from ..query import FROM, NodeRef, check_identifier
from ..query.builder import Neo4jQueryBuilder, QueryBuilder
from ..schema import CREATED_AT, ID, UPDATED_AT

logger = logging.getLogger(__name__)


class Neo4jGraphStore(GraphStore):
    """Graph store backed by the official Neo4j driver.

    The driver is thread-safe and shared; every call without a ``tx``
    opens a short-lived session, and every ``transaction()`` gets a
    session of its own.
    """

    def __init__(self, driver: Driver, database: str = "neo4j"):
        """Initialize the store.

        Args:
            driver: Neo4j driver instance
            database: Database name
        """
        self.driver = driver
        self.database = database

    @classmethod
    def connect(
        cls,
        uri: str,
        username: str,
        password: str,
        database: str = "neo4j"
    ) -> "Neo4jGraphStore":
        """Create a store with its own driver.

        Args:
            uri: Neo4j database URI
            username: Database username
            password: Database password
            database: Database name
        """
        driver = GraphDatabase.driver(uri, auth=(username, password))
        return cls(driver, database)

    def close(self) -> None:
        """Close the database connection."""
        self.driver.close()

    def execute(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        tx: Optional[Transaction] = None
    ) -> List[Record]:
        """Run one parameterized statement and fetch all of its records.

        Raises:
            QueryError: If the driver or the server reports a failure
        """
        logger.debug("Running query: %s", query)
        try:
            if tx is not None:
                return list(tx.run(query, params or {}))
            with self.driver.session(database=self.database) as session:
                return list(session.run(query, params or {}))
        except (Neo4jError, DriverError) as e:
            raise QueryError(f"Query failed: {e}", query=query) from e

    def select(
        self,
        label: str,
        where: Optional[Dict[str, Any]] = None,
        tx: Optional[Transaction] = None
    ) -> List[Dict]:
        predicate, params = QueryBuilder("n", where).build()
        query = f"MATCH (n:{check_identifier(label, 'label')})"
        if predicate:
            query += f" WHERE {predicate}"
        query += " RETURN n"

        return [dict(record["n"]) for record in self.execute(query, params, tx)]

    def insert(
        self,
        label: str,
        data: Dict[str, Any],
        tx: Optional[Transaction] = None
    ) -> Dict:
        query = f"CREATE (n:{check_identifier(label, 'label')} $data) RETURN n"
        records = self.execute(query, {"data": data}, tx)
        return dict(records[0]["n"])

    def upsert(
        self,
        label: str,
        id: Any,
        data: Dict[str, Any],
        tx: Optional[Transaction] = None
    ) -> Dict:
        query = (
            f"MERGE (n:{check_identifier(label, 'label')} {{{ID}: $id}}) "
            f"ON CREATE SET n.{CREATED_AT} = $now "
            f"SET n += $data, n.{UPDATED_AT} = $now "
            "RETURN n"
        )
        params = {"id": id, "data": {**data, ID: id}, "now": timestamp()}
        records = self.execute(query, params, tx)
        return dict(records[0]["n"])

    def update(
        self,
        label: str,
        element_id: str,
        data: Dict[str, Any],
        tx: Optional[Transaction] = None
    ) -> Optional[Dict]:
        query = (
            f"MATCH (n:{check_identifier(label, 'label')}) "
            "WHERE elementId(n) = $element_id "
            f"SET n += $data, n.{UPDATED_AT} = $now "
            "RETURN n"
        )
        params = {"element_id": element_id, "data": data, "now": timestamp()}
        records = self.execute(query, params, tx)
        return dict(records[0]["n"]) if records else None

    def delete(
        self,
        label: str,
        element_id: str,
        tx: Optional[Transaction] = None
    ) -> bool:
        query = (
            f"MATCH (n:{check_identifier(label, 'label')}) "
            "WHERE elementId(n) = $element_id "
            "DETACH DELETE n "
            "RETURN count(*) AS deleted"
        )
        records = self.execute(query, {"element_id": element_id}, tx)
        return bool(records) and records[0]["deleted"] > 0

    def join(
        self,
        rel_type: str,
        source: Union[NodeRef, Any],
        target: Union[NodeRef, Any],
        direction: str = FROM,
        tx: Optional[Transaction] = None
    ) -> bool:
        source, target = as_node_ref(source), as_node_ref(target)
        query, params = (
            Neo4jQueryBuilder()
            .select(source.label, "a", {source.key: source.value})
            .select(target.label, "b", {target.key: target.value})
            .merge("a", "b", direction, label=rel_type, variable="r")
            .returning("r")
            .build()
        )
        records = self.execute(query, params, tx)
        if not records:
            logger.debug("No %s relationship merged for %s -> %s", rel_type, source, target)
        return bool(records)

    def merge_many(
        self,
        label: str,
        key: str,
        rows: List[Dict[str, Any]],
        tx: Optional[Transaction] = None
    ) -> List[Dict]:
        if not rows:
            return []

        key = check_identifier(key, "property key")
        query = (
            "UNWIND $rows AS row "
            f"MERGE (n:{check_identifier(label, 'label')} {{{key}: row.{key}}}) "
            f"ON CREATE SET n = row, n.{CREATED_AT} = $now, n.{UPDATED_AT} = $now "
            f"ON MATCH SET n += row, n.{UPDATED_AT} = $now "
            "RETURN n"
        )
        records = self.execute(query, {"rows": rows, "now": timestamp()}, tx)
        return [dict(record["n"]) for record in records]

    def related(
        self,
        source: NodeRef,
        rel_type: str,
        target_label: str,
        direction: str = FROM
    ) -> List[Dict]:
        query, params = (
            Neo4jQueryBuilder()
            .select(source.label, "e", {source.key: source.value})
            .select(target_label, "t")
            .join("e", "t", direction, label=rel_type)
            .returning("t")
            .build()
        )
        return [dict(record["t"]) for record in self.execute(query, params)]

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        try:
            session = self.driver.session(database=self.database)
        except (Neo4jError, DriverError) as e:
            raise QueryError(f"Could not open a session: {e}") from e

        try:
            try:
                tx = session.begin_transaction()
            except (Neo4jError, DriverError) as e:
                raise QueryError(f"Could not begin a transaction: {e}") from e

            try:
                yield tx
            except BaseException:
                self._rollback(tx)
                raise

            try:
                tx.commit()
            except (Neo4jError, DriverError) as e:
                raise QueryError(f"Commit failed: {e}") from e
        finally:
            session.close()

    @staticmethod
    def _rollback(tx: Transaction) -> None:
        try:
            tx.rollback()
        except (Neo4jError, DriverError):
            # The original error is re-raised by the caller
            logger.warning("Rollback failed", exc_info=True)
