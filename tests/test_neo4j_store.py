from unittest.mock import MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable, SessionExpired

from iracing_graph.errors import QueryError
from iracing_graph.query import BOTH, TO, NodeRef
from iracing_graph.schema import CREATED_AT, ID, UPDATED_AT
from iracing_graph.store.neo4j import Neo4jGraphStore


@pytest.fixture
def session():
    return MagicMock(name="session")


@pytest.fixture
def tx():
    return MagicMock(name="tx")


@pytest.fixture
def driver(session, tx):
    driver = MagicMock(name="driver")
    driver.session.return_value = session
    session.__enter__.return_value = session
    session.begin_transaction.return_value = tx
    return driver


@pytest.fixture
def store(driver):
    return Neo4jGraphStore(driver, database="iracing")


def last_call(runner):
    args, _ = runner.run.call_args
    return args[0], args[1]


class TestStatements:
    def test_execute_without_tx_uses_session(self, store, driver, session):
        session.run.return_value = [{"n": {"id": 1}}]

        records = store.execute("MATCH (n) RETURN n", {"a": 1})

        driver.session.assert_called_once_with(database="iracing")
        session.run.assert_called_once_with("MATCH (n) RETURN n", {"a": 1})
        assert records == [{"n": {"id": 1}}]

    def test_execute_with_tx_does_not_open_session(self, store, driver, tx):
        tx.run.return_value = []

        store.execute("RETURN 1", tx=tx)

        tx.run.assert_called_once_with("RETURN 1", {})
        driver.session.assert_not_called()

    def test_driver_errors_become_query_errors(self, store, tx):
        tx.run.side_effect = ServiceUnavailable("down")

        with pytest.raises(QueryError) as info:
            store.execute("RETURN 1", tx=tx)

        assert info.value.query == "RETURN 1"
        assert isinstance(info.value.__cause__, ServiceUnavailable)

    def test_select_with_filters(self, store, tx):
        tx.run.return_value = [{"n": {"id": 100, "car_name": "GT3"}}]

        nodes = store.select("Car", {"car_name": "GT3"}, tx=tx)

        query, params = last_call(tx)
        assert query == "MATCH (n:Car) WHERE n.car_name = $car_name RETURN n"
        assert params == {"car_name": "GT3"}
        assert nodes == [{"id": 100, "car_name": "GT3"}]

    def test_select_all(self, store, tx):
        tx.run.return_value = []

        assert store.select("Car", tx=tx) == []
        assert last_call(tx) == ("MATCH (n:Car) RETURN n", {})

    def test_insert(self, store, tx):
        tx.run.return_value = [{"n": {"name": "x"}}]

        assert store.insert("Car", {"name": "x"}, tx=tx) == {"name": "x"}
        assert last_call(tx) == ("CREATE (n:Car $data) RETURN n", {"data": {"name": "x"}})

    def test_upsert_merges_by_id(self, store, tx):
        tx.run.return_value = [{"n": {"id": 100, "car_name": "GT3"}}]

        node = store.upsert("Car", 100, {"car_name": "GT3"}, tx=tx)

        query, params = last_call(tx)
        assert query == (
            "MERGE (n:Car {id: $id}) "
            "ON CREATE SET n.created_at = $now "
            "SET n += $data, n.updated_at = $now "
            "RETURN n"
        )
        assert params["id"] == 100
        assert params["data"] == {"car_name": "GT3", "id": 100}
        assert isinstance(params["now"], str)
        assert node == {"id": 100, "car_name": "GT3"}

    def test_update_missing_node(self, store, tx):
        tx.run.return_value = []

        assert store.update("Car", "4:abc:1", {"price": 1.0}, tx=tx) is None
        query, params = last_call(tx)
        assert "WHERE elementId(n) = $element_id" in query
        assert params["element_id"] == "4:abc:1"

    def test_delete(self, store, tx):
        tx.run.return_value = [{"deleted": 1}]
        assert store.delete("Car", "4:abc:1", tx=tx) is True

        tx.run.return_value = [{"deleted": 0}]
        assert store.delete("Car", "4:abc:2", tx=tx) is False

        query, _ = last_call(tx)
        assert "DETACH DELETE n" in query

    def test_join(self, store, tx):
        tx.run.return_value = [{"r": object()}]

        merged = store.join(
            "HAS_PROPERTY",
            NodeRef("Car", 100),
            NodeRef("Property", "ai_enabled", key="type"),
            tx=tx,
        )

        assert merged is True
        assert last_call(tx) == (
            "MATCH (a:Car {id: $a_id}) "
            "MATCH (b:Property {type: $b_type}) "
            "MERGE (a)-[r:HAS_PROPERTY]->(b) "
            "RETURN r",
            {"a_id": 100, "b_type": "ai_enabled"},
        )

    def test_join_bare_ids_in_both_directions(self, store, tx):
        tx.run.return_value = []

        assert store.join("LINKED", 1, 2, BOTH, tx=tx) is False
        query, params = last_call(tx)
        assert query == (
            "MATCH (a {id: $a_id}) MATCH (b {id: $b_id}) "
            "MERGE (a)-[r:LINKED]->(b) MERGE (a)<-[r_in:LINKED]-(b) "
            "RETURN r"
        )
        assert params == {"a_id": 1, "b_id": 2}

    def test_merge_many(self, store, tx):
        rows = [{"type": "ai_enabled", "name": "Ai Enabled"}]
        tx.run.return_value = [{"n": rows[0]}]

        assert store.merge_many("Property", "type", rows, tx=tx) == rows
        query, params = last_call(tx)
        assert query.startswith("UNWIND $rows AS row MERGE (n:Property {type: row.type})")
        assert params["rows"] == rows

    def test_audit_fields_use_schema_keys(self, store, tx):
        tx.run.return_value = [{"n": {}}]

        store.upsert("Car", 100, {}, tx=tx)
        upsert_query, upsert_params = last_call(tx)
        store.merge_many("Property", "type", [{"type": "retired"}], tx=tx)
        merge_query, _ = last_call(tx)

        assert f"{{{ID}: $id}}" in upsert_query
        assert upsert_params["data"] == {ID: 100}
        for query in (upsert_query, merge_query):
            assert f"n.{CREATED_AT} = $now" in query
            assert f"n.{UPDATED_AT} = $now" in query

    def test_merge_many_without_rows_skips_query(self, store, tx):
        assert store.merge_many("Property", "type", [], tx=tx) == []
        tx.run.assert_not_called()

    def test_related(self, store, session):
        session.run.return_value = [{"t": {"id": 219}}]

        nodes = store.related(NodeRef("Track", 10095), "CONFIG_OF", "TrackConfig", TO)

        assert nodes == [{"id": 219}]
        assert last_call(session) == (
            "MATCH (e:Track {id: $e_id}) MATCH (t:TrackConfig) "
            "MATCH (e)<-[:CONFIG_OF]-(t) RETURN t",
            {"e_id": 10095},
        )


class TestTransaction:
    def test_commits_and_closes(self, store, session, tx):
        with store.transaction() as handle:
            assert handle is tx

        tx.commit.assert_called_once()
        tx.rollback.assert_not_called()
        session.close.assert_called_once()

    def test_rolls_back_and_reraises(self, store, session, tx):
        with pytest.raises(RuntimeError):
            with store.transaction():
                raise RuntimeError("boom")

        tx.rollback.assert_called_once()
        tx.commit.assert_not_called()
        session.close.assert_called_once()

    def test_failed_rollback_keeps_original_error(self, store, session, tx):
        tx.rollback.side_effect = SessionExpired("gone")

        with pytest.raises(RuntimeError):
            with store.transaction():
                raise RuntimeError("boom")

        session.close.assert_called_once()

    def test_session_failure(self, store, driver):
        driver.session.side_effect = ServiceUnavailable("down")

        with pytest.raises(QueryError):
            with store.transaction():
                pass

    def test_begin_failure_closes_session(self, store, session):
        session.begin_transaction.side_effect = ServiceUnavailable("down")

        with pytest.raises(QueryError):
            with store.transaction():
                pass

        session.close.assert_called_once()

    def test_commit_failure(self, store, session, tx):
        tx.commit.side_effect = ServiceUnavailable("down")

        with pytest.raises(QueryError):
            with store.transaction():
                pass

        session.close.assert_called_once()

    def test_run_in_transaction_passes_tx(self, store, tx):
        result = store.run_in_transaction(lambda handle, x: (handle, x), 5)

        assert result == (tx, 5)
        tx.commit.assert_called_once()


def test_close_closes_driver(store, driver):
    with store:
        pass

    driver.close.assert_called_once()


def test_connect_builds_driver(mocker):
    factory = mocker.patch("iracing_graph.store.neo4j.GraphDatabase.driver")

    store = Neo4jGraphStore.connect("bolt://db:7687", "neo4j", "secret", "iracing")

    factory.assert_called_once_with("bolt://db:7687", auth=("neo4j", "secret"))
    assert store.driver is factory.return_value
    assert store.database == "iracing"
