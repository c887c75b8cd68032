"""Shared fixtures: an in-memory graph store and sample iRacing records."""

import copy
import threading
from contextlib import contextmanager
from itertools import count
from typing import Any, Dict, List, Optional

import pytest

from iracing_graph.errors import QueryError
from iracing_graph.logger import LoggerService
from iracing_graph.query import BOTH, FROM, NONE, TO, NodeRef
from iracing_graph.services import build_services
from iracing_graph.store import as_node_ref, timestamp
from iracing_graph.store.base import GraphStore


class InMemoryGraphStore(GraphStore):
    """GraphStore over dicts with real commit/rollback.

    A transaction holds a re-entrant lock for its whole duration and
    restores a snapshot when it fails, so concurrent transactions are
    serialized the way a single-node store would serialize conflicting
    writes.

    ``failing_joins`` lists relationship types whose merge reports
    failure; ``failing_ops`` lists method names that raise QueryError.
    """

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.labels: Dict[str, str] = {}
        self.edges: set = set()
        self.failing_joins: set = set()
        self.failing_ops: set = set()
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self._ids = count(1)
        self._lock = threading.RLock()

    # helpers -------------------------------------------------------------

    def _check(self, op: str) -> None:
        if op in self.failing_ops:
            raise QueryError(f"{op} failed")

    def _find(self, ref: NodeRef) -> List[str]:
        return [
            eid for eid, props in self.nodes.items()
            if (ref.label is None or self.labels[eid] == ref.label)
            and props.get(ref.key) == ref.value
        ]

    def count(self, label: str) -> int:
        return sum(1 for eid in self.nodes if self.labels[eid] == label)

    def edges_of(self, rel_type: str) -> List[tuple]:
        """Edges of one type as ((label, key value), (label, key value))."""
        def describe(eid):
            props = self.nodes[eid]
            return self.labels[eid], props.get("id", props.get("type"))
        return sorted(
            (describe(src), describe(dst))
            for t, src, dst in self.edges if t == rel_type
        )

    # GraphStore ----------------------------------------------------------

    def select(self, label, where=None, tx=None):
        with self._lock:
            self._check("select")
            return [
                dict(props) for eid, props in self.nodes.items()
                if self.labels[eid] == label
                and all(props.get(k) == v for k, v in (where or {}).items())
            ]

    def insert(self, label, data, tx=None):
        with self._lock:
            self._check("insert")
            eid = f"e{next(self._ids)}"
            self.nodes[eid] = dict(data)
            self.labels[eid] = label
            return dict(data)

    def upsert(self, label, id, data, tx=None):
        with self._lock:
            self._check("upsert")
            now = timestamp()
            matches = self._find(NodeRef(label, id))
            if matches:
                eid = matches[0]
            else:
                eid = f"e{next(self._ids)}"
                self.nodes[eid] = {"id": id, "created_at": now}
                self.labels[eid] = label
            node = self.nodes[eid]
            for key, value in {**data, "id": id}.items():
                if value is None:
                    node.pop(key, None)
                else:
                    node[key] = value
            node["updated_at"] = now
            return dict(node)

    def update(self, label, element_id, data, tx=None):
        with self._lock:
            self._check("update")
            if self.labels.get(element_id) != label:
                return None
            self.nodes[element_id].update(data)
            return dict(self.nodes[element_id])

    def delete(self, label, element_id, tx=None):
        with self._lock:
            self._check("delete")
            if self.labels.get(element_id) != label:
                return False
            del self.nodes[element_id]
            del self.labels[element_id]
            self.edges = {e for e in self.edges if element_id not in e[1:]}
            return True

    def join(self, rel_type, source, target, direction=FROM, tx=None):
        with self._lock:
            self._check("join")
            if rel_type in self.failing_joins:
                return False
            sources = self._find(as_node_ref(source))
            targets = self._find(as_node_ref(target))
            if not sources or not targets:
                return False
            for src in sources:
                for dst in targets:
                    if direction == FROM:
                        self.edges.add((rel_type, src, dst))
                    elif direction == TO:
                        self.edges.add((rel_type, dst, src))
                    elif direction == BOTH:
                        self.edges.add((rel_type, src, dst))
                        self.edges.add((rel_type, dst, src))
                    elif direction == NONE:
                        if (rel_type, dst, src) not in self.edges:
                            self.edges.add((rel_type, src, dst))
            return True

    def merge_many(self, label, key, rows, tx=None):
        with self._lock:
            self._check("merge_many")
            now = timestamp()
            merged = []
            for row in rows:
                matches = self._find(NodeRef(label, row[key], key=key))
                if matches:
                    node = self.nodes[matches[0]]
                    node.update(row)
                else:
                    eid = f"e{next(self._ids)}"
                    node = self.nodes[eid] = {**row, "created_at": now}
                    self.labels[eid] = label
                node["updated_at"] = now
                merged.append(dict(node))
            return merged

    def related(self, source, rel_type, target_label, direction=FROM):
        with self._lock:
            self._check("related")
            found = []
            for src in self._find(source):
                for t, a, b in self.edges:
                    if t != rel_type:
                        continue
                    if direction in (FROM, BOTH, NONE) and a == src:
                        found.append(b)
                    if direction in (TO, BOTH, NONE) and b == src:
                        found.append(a)
            return [
                dict(self.nodes[eid]) for eid in dict.fromkeys(found)
                if self.labels[eid] == target_label
            ]

    @contextmanager
    def transaction(self):
        self._check("transaction")
        with self._lock:
            snapshot = (
                copy.deepcopy(self.nodes), dict(self.labels), set(self.edges)
            )
            try:
                yield object()
            except BaseException:
                self.nodes, self.labels, self.edges = snapshot
                self.rollbacks += 1
                raise
            self.commits += 1

    def close(self):
        self.closed = True


class StaticProvider:
    """DataProvider over in-memory lists."""

    def __init__(self, cars: Optional[list] = None, tracks: Optional[list] = None):
        self.cars = cars or []
        self.tracks = tracks or []

    def get_all_cars(self):
        return copy.deepcopy(self.cars)

    def get_all_tracks(self):
        return copy.deepcopy(self.tracks)


def make_car(**overrides) -> Dict[str, Any]:
    car = {
        "car_id": 100,
        "car_name": "GT3",
        "car_name_abbreviated": "GT3",
        "car_types": [{"car_type": "gt3"}, {"car_type": "road"}],
        "categories": ["road"],
        "hp": 550,
        "price": 11.95,
        "price_display": "$11.95",
        "free_with_subscription": False,
        "has_headlights": True,
        "sku": 10512,
        "ai_enabled": True,
        "rain_enabled": False,
        "retired": False,
    }
    car.update(overrides)
    return car


def make_track(**overrides) -> Dict[str, Any]:
    track = {
        "track_id": 219,
        "track_name": "Okayama International Circuit",
        "config_name": "Full Course",
        "sku": 10095,
        "category": "road",
        "location": "Mimasaka, Okayama, Japan",
        "track_config_length": 2.301,
        "corners_per_lap": 13,
        "max_cars": 40,
        "pit_road_speed_limit": 45.0,
        "price": 0.0,
        "price_display": "$0.00",
        "free_with_subscription": True,
        "track_types": [{"track_type": "road"}],
        "ai_enabled": True,
        "allow_rolling_start": True,
        "allow_standing_start": True,
        "has_short_parade_lap": False,
        "fully_lit": False,
        "rain_enabled": True,
        "retired": False,
    }
    track.update(overrides)
    return track


@pytest.fixture
def store():
    return InMemoryGraphStore()


@pytest.fixture
def provider():
    return StaticProvider()


@pytest.fixture
def services(store, provider):
    return build_services(store, provider, logger=LoggerService("iracing_graph.tests"))


@pytest.fixture
def car_record():
    return make_car()


@pytest.fixture
def track_record():
    return make_track()
