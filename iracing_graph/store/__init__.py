"""Graph store access layer.

This module provides:
- An abstract ``GraphStore`` describing the primitives the DAOs use
- A Neo4j implementation backed by the official driver
- Helpers shared by implementations
"""

from datetime import datetime, timezone
from typing import Any, Union

from ..query import NodeRef


def timestamp() -> str:
    """Current UTC time as an ISO-8601 string, used for audit fields."""
    return datetime.now(timezone.utc).isoformat()


def as_node_ref(node: Union[NodeRef, Any]) -> NodeRef:
    """Treat a bare value as the upstream ``id`` of an unlabeled node."""
    if isinstance(node, NodeRef):
        return node
    return NodeRef(None, node)
