"""Upsert shared Property nodes and attach them to entities."""

import logging
from typing import Any, List, Sequence

from . import PropertyRef, pretty_print_snake_case
from ..errors import RelationshipCreationError
from ..query import FROM, NodeRef
from ..schema import HAS_PROPERTY, NAME, PROPERTY, TYPE
from ..store.base import GraphStore

logger = logging.getLogger(__name__)


class PropertyAttachmentService:
    """Maintains ``(entity)-[:HAS_PROPERTY]->(:Property)`` links.

    Property nodes are keyed by ``type`` and never duplicated; attaching
    the same property twice leaves a single relationship.
    """

    label = PROPERTY
    relationship = HAS_PROPERTY

    def __init__(self, store: GraphStore):
        self.store = store

    def bulk_upsert_and_attach(
        self,
        properties: Sequence[PropertyRef],
        related: NodeRef,
        tx: Any
    ) -> List[PropertyRef]:
        """Merge every property node and link it from ``related``.

        Runs inside the caller's transaction and never commits on its own.

        Args:
            properties: Properties the entity has
            related: The entity node to link from
            tx: Open transaction handle

        Returns:
            The attached properties

        Raises:
            RelationshipCreationError: If a link could not be merged, which
                aborts the caller's transaction
        """
        if not properties:
            return []

        self.store.merge_many(
            self.label, TYPE, [p.to_dict() for p in properties], tx=tx
        )

        for prop in properties:
            target = NodeRef(self.label, prop.type, key=TYPE)
            if not self.store.join(self.relationship, related, target, FROM, tx=tx):
                raise RelationshipCreationError(self.relationship, related, target)

        logger.debug(
            "Attached %d properties to %s", len(properties), related
        )
        return list(properties)

    def get_properties_for_entity(self, label: str, id: Any) -> List[PropertyRef]:
        """Every property currently attached to an entity, sorted by type."""
        nodes = self.store.related(
            NodeRef(label, id), self.relationship, self.label, FROM
        )
        refs = {
            PropertyRef(name=n.get(NAME) or pretty_print_snake_case(n[TYPE]), type=n[TYPE])
            for n in nodes
        }
        return sorted(refs, key=lambda p: p.type)
