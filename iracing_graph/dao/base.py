"""Template for entity data-access objects.

A DAO validates an upstream record, writes the entity and anything that
belongs with it in a single transaction, and serves the read path.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..logger import LoggerService
from ..properties import PropertyRef
from ..properties.service import PropertyAttachmentService
from ..query import NodeRef
from ..schema import ID
from ..store.base import GraphStore

SourceT = TypeVar("SourceT", bound=BaseModel)
EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityDao(ABC, Generic[SourceT, EntityT]):
    """Create and read one kind of entity node.

    Subclasses set the class attributes and implement ``_create``.
    """

    label: str
    source_model: Type[SourceT]
    entity_model: Type[EntityT]
    # Raw record field that identifies an item in sync reports
    source_key: str = ID
    attachable_properties: Sequence[str] = ()

    def __init__(
        self,
        store: GraphStore,
        properties: PropertyAttachmentService,
        logger: Optional[LoggerService] = None
    ):
        """Initialize the DAO.

        Args:
            store: Graph store shared by all DAOs
            properties: Property attachment service
            logger: Logger; a package logger is created if omitted
        """
        self.store = store
        self.properties = properties
        self.logger = logger or LoggerService(__name__)

    def validate(self, raw: Any) -> SourceT:
        """Parse a raw upstream record.

        Raises:
            ValidationError: If the record does not match ``source_model``
        """
        try:
            return self.source_model.model_validate(raw)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {self.label} record: {e.error_count()} error(s)",
                errors=e.errors(include_url=False),
            ) from e

    def create_from_source(self, raw: Any) -> EntityT:
        """Validate ``raw`` and persist it atomically.

        Nothing is written if validation fails, and any failure inside the
        transaction rolls back every write made for this record.

        Raises:
            ValidationError: The record is invalid
            QueryError: The store failed a statement
            RelationshipCreationError: A required relationship was not created
        """
        source = self.validate(raw)
        with self.store.transaction() as tx:
            entity = self._create(source, tx)
        return entity

    @abstractmethod
    def _create(self, source: SourceT, tx: Any) -> EntityT:
        """Write the entity for a validated record inside ``tx``."""

    def present_properties(self, source: SourceT) -> List[PropertyRef]:
        """Attachable attributes whose value is present and true."""
        return [
            PropertyRef.from_attribute(attribute)
            for attribute in self.attachable_properties
            if getattr(source, attribute, None) is True
        ]

    def attach_properties(self, source: SourceT, id: Any, tx: Any) -> List[PropertyRef]:
        return self.properties.bulk_upsert_and_attach(
            self.present_properties(source), NodeRef(self.label, id), tx
        )

    def get_all(self) -> List[EntityT]:
        """All entities, or an empty list if the store cannot be read."""
        try:
            return [self.entity_model.model_validate(n) for n in self.store.select(self.label)]
        except Exception as e:
            self.logger.error(e, f"Failed to retrieve {self.label} nodes from database")
            return []

    def get_by_id(self, id: Any) -> Optional[EntityT]:
        """One entity by upstream id, or None if missing or unreadable."""
        try:
            nodes = self.store.select(self.label, {ID: id})
            if not nodes:
                return None
            return self.entity_model.model_validate(nodes[0])
        except Exception as e:
            self.logger.error(e, f"Failed to retrieve {self.label} with ID {id} from database")
            return None

    def find(self, where: Dict[str, Any]) -> List[EntityT]:
        """Entities whose fields equal every value in ``where``."""
        try:
            return [
                self.entity_model.model_validate(n)
                for n in self.store.select(self.label, where)
            ]
        except Exception as e:
            self.logger.error(e, f"Failed to find {self.label} nodes matching {where}")
            return []

    def get_properties(self, id: Any) -> List[PropertyRef]:
        """Properties attached to one entity, or an empty list on failure."""
        try:
            return self.properties.get_properties_for_entity(self.label, id)
        except Exception as e:
            self.logger.error(e, f"Failed to get properties for {self.label} with ID {id}")
            return []
