"""Base class for graph store implementations."""

from abc import ABC, abstractmethod
from typing import Any, Callable, ContextManager, Dict, List, Optional, TypeVar, Union

from ..query import FROM, NodeRef

T = TypeVar("T")


class GraphStore(ABC):
    """Primitives the persistence layer is written against.

    Every mutating method takes an optional ``tx`` handle obtained from
    ``transaction()``. Without one the statement runs in its own
    auto-committed unit of work.
    """

    @abstractmethod
    def select(
        self,
        label: str,
        where: Optional[Dict[str, Any]] = None,
        tx: Any = None
    ) -> List[Dict]:
        """Return the property maps of all nodes matching ``where``."""

    @abstractmethod
    def insert(self, label: str, data: Dict[str, Any], tx: Any = None) -> Dict:
        """Create a new node unconditionally."""

    @abstractmethod
    def upsert(self, label: str, id: Any, data: Dict[str, Any], tx: Any = None) -> Dict:
        """Merge a node by its upstream ``id`` and overwrite the given fields.

        Returns:
            The node as stored after the write
        """

    @abstractmethod
    def update(
        self,
        label: str,
        element_id: str,
        data: Dict[str, Any],
        tx: Any = None
    ) -> Optional[Dict]:
        """Merge fields onto a node found by its store-internal identity.

        Returns:
            The updated node, or None if no node has that identity
        """

    @abstractmethod
    def delete(self, label: str, element_id: str, tx: Any = None) -> bool:
        """Remove a node and its relationships by store-internal identity.

        Returns:
            True if a node was removed
        """

    @abstractmethod
    def join(
        self,
        rel_type: str,
        source: Union[NodeRef, Any],
        target: Union[NodeRef, Any],
        direction: str = FROM,
        tx: Any = None
    ) -> bool:
        """Merge a relationship between two existing nodes.

        Args:
            rel_type: Relationship type
            source: NodeRef, or a bare upstream id
            target: NodeRef, or a bare upstream id
            direction: from, to, both or none
            tx: Optional transaction handle

        Returns:
            False when either node is missing and nothing was merged
        """

    @abstractmethod
    def merge_many(
        self,
        label: str,
        key: str,
        rows: List[Dict[str, Any]],
        tx: Any = None
    ) -> List[Dict]:
        """Merge one node per row, keyed by ``row[key]``."""

    @abstractmethod
    def related(
        self,
        source: NodeRef,
        rel_type: str,
        target_label: str,
        direction: str = FROM
    ) -> List[Dict]:
        """Nodes of ``target_label`` one ``rel_type`` hop away from ``source``."""

    @abstractmethod
    def transaction(self) -> ContextManager[Any]:
        """Scoped transaction.

        Commits when the block exits normally, rolls back and re-raises
        when it raises, and always releases the session.
        """

    def run_in_transaction(self, work: Callable[..., T], *args, **kwargs) -> T:
        """Call ``work(tx, *args, **kwargs)`` inside ``transaction()``."""
        with self.transaction() as tx:
            return work(tx, *args, **kwargs)

    def close(self) -> None:
        """Release any connections held by the store."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
