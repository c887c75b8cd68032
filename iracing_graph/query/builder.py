"""Builders that turn filters and node patterns into Cypher text plus parameters."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from . import (
    FROM,
    NodeSelection,
    RelationshipPattern,
    check_direction,
    check_identifier,
    relationship_patterns,
)

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Equality predicate over one node variable.

    Each filter becomes ``<var>.<field> = $<field>`` and the value goes in
    the parameter map under the field name, so values never end up in the
    query text.
    """

    def __init__(self, node_var: str = "n", where: Optional[Dict[str, Any]] = None):
        """Initialize the builder.

        Args:
            node_var: Variable the predicate refers to
            where: Field -> value filters, applied in iteration order
        """
        self.node_var = check_identifier(node_var, "variable")
        self.statements: List[str] = []
        self.params: Dict[str, Any] = {}

        for key, value in (where or {}).items():
            check_identifier(key, "property key")
            self.statements.append(f"{self.node_var}.{key} = ${key}")
            self.params[key] = value

    def build(self) -> Tuple[str, Dict]:
        """Return the AND-joined predicate and a copy of its parameters.

        An empty filter set gives ``("", {})``.
        """
        return " AND ".join(self.statements), dict(self.params)


class Neo4jQueryBuilder:
    """Composes MATCH/MERGE statements over several labeled nodes.

    Example:
        query, params = (
            Neo4jQueryBuilder()
            .select("Car", "car", {"id": 1})
            .select("Property", "prop")
            .join("car", "prop", "from", label="HAS_PROPERTY")
            .returning("prop")
            .build()
        )
    """

    def __init__(self):
        self.selections: List[NodeSelection] = []
        self.clauses: List[str] = []
        self.params: Dict[str, Any] = {}
        self.return_vars: Optional[List[str]] = None

    def generate_node_var(self) -> str:
        """Next unused variable in the sequence n0, n1, ..."""
        taken = {s.variable for s in self.selections}
        index = len(self.selections)
        while f"n{index}" in taken:
            index += 1
        return f"n{index}"

    def build_node_reference(
        self,
        node_var: str,
        label: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None
    ) -> str:
        """Render ``var:Label {key: $var_key}`` and register its parameters.

        Args:
            node_var: Query variable for the node
            label: Optional node label
            properties: Inline equality filters

        Returns:
            The node reference without surrounding parentheses

        Raises:
            ValueError: If a parameter name is already taken, e.g. variable
                ``a`` with key ``b_c`` and variable ``a_b`` with key ``c``
        """
        reference = check_identifier(node_var, "variable")
        if label:
            reference += f":{check_identifier(label, 'label')}"

        if properties:
            entries = []
            params = {}
            for key, value in properties.items():
                check_identifier(key, "property key")
                param_name = f"{node_var}_{key}"
                if param_name in self.params:
                    raise ValueError(f"Parameter name already in use: {param_name}")
                entries.append(f"{key}: ${param_name}")
                params[param_name] = value
            self.params.update(params)
            reference += " {" + ", ".join(entries) + "}"

        return reference

    def select(
        self,
        label: Optional[str] = None,
        node_var: Optional[str] = None,
        where: Optional[Dict[str, Any]] = None
    ) -> "Neo4jQueryBuilder":
        """Add ``MATCH (var:Label {...})`` for a node."""
        node_var = node_var or self.generate_node_var()
        if any(s.variable == node_var for s in self.selections):
            raise ValueError(f"Variable already selected: {node_var}")

        reference = self.build_node_reference(node_var, label, where)
        self.selections.append(NodeSelection(node_var, label))
        self.clauses.append(f"MATCH ({reference})")
        return self

    def join(
        self,
        start: str,
        end: str,
        direction: str = FROM,
        label: Optional[str] = None,
        variable: Optional[str] = None
    ) -> "Neo4jQueryBuilder":
        """Require a relationship between two selected variables (MATCH)."""
        pattern = self._pattern(start, end, direction, label, variable)
        self.clauses.append(f"MATCH {pattern.render()}")
        return self

    def merge(
        self,
        start: str,
        end: str,
        direction: str = FROM,
        label: Optional[str] = None,
        variable: Optional[str] = None
    ) -> "Neo4jQueryBuilder":
        """Create a relationship between two selected variables unless it exists."""
        if not label:
            raise ValueError("MERGE needs a relationship type")
        pattern = self._pattern(start, end, direction, label, variable)
        for rendered in relationship_patterns(pattern):
            self.clauses.append(f"MERGE {rendered}")
        return self

    def returning(self, *node_vars: str) -> "Neo4jQueryBuilder":
        """Return only the given variables instead of every selection."""
        if not node_vars:
            raise ValueError("RETURN needs at least one variable")
        self.return_vars = [check_identifier(v, "variable") for v in node_vars]
        return self

    def peek(self) -> "Neo4jQueryBuilder":
        """Log the statement built so far at DEBUG; the builder is unchanged."""
        query, params = self.build()
        logger.debug("Query: %s Params: %s", query, params)
        return self

    def build(self) -> Tuple[str, Dict]:
        """Return the full statement and a copy of its parameters."""
        if not self.clauses:
            return "", {}

        return_vars = self.return_vars
        if return_vars is None:
            return_vars = [s.variable for s in self.selections]

        parts = self.clauses + ["RETURN " + ",".join(return_vars)]
        return " ".join(parts), dict(self.params)

    def _pattern(
        self,
        start: str,
        end: str,
        direction: str,
        label: Optional[str],
        variable: Optional[str]
    ) -> RelationshipPattern:
        selected = {s.variable for s in self.selections}
        for node_var in (start, end):
            if node_var not in selected:
                raise ValueError(f"Variable not selected: {node_var}")
        check_direction(direction)
        if label:
            check_identifier(label, "relationship type")
        if variable:
            check_identifier(variable, "variable")
        return RelationshipPattern(start, end, direction, label, variable)
