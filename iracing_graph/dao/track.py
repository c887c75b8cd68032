"""Data access for Track and TrackConfig nodes."""

from typing import Any, List

from .base import EntityDao
from ..errors import RelationshipCreationError
from ..models import PropertyDTO
from ..models.track import (
    TRACK_PROPERTIES,
    CreateTrack,
    CreateTrackConfig,
    IRacingTrack,
    Track,
    TrackConfig,
    TrackWithProperties,
)
from ..query import FROM, TO, NodeRef
from ..schema import CONFIG_OF, TRACK, TRACK_CONFIG


class TrackDao(EntityDao[IRacingTrack, Track]):
    """Tracks keyed by ``sku``, each with one TrackConfig per ``track_id``."""

    label = TRACK
    source_model = IRacingTrack
    entity_model = Track
    source_key = "track_id"
    attachable_properties = TRACK_PROPERTIES

    def _create(self, source: IRacingTrack, tx: Any) -> Track:
        track_node = self.store.upsert(
            self.label, source.sku, CreateTrack.from_source(source).model_dump(), tx=tx
        )
        track = Track.model_validate(track_node)

        self.store.upsert(
            TRACK_CONFIG,
            source.track_id,
            CreateTrackConfig.from_source(source).model_dump(),
            tx=tx,
        )

        config_ref = NodeRef(TRACK_CONFIG, source.track_id)
        track_ref = NodeRef(self.label, source.sku)
        if not self.store.join(CONFIG_OF, config_ref, track_ref, FROM, tx=tx):
            raise RelationshipCreationError(CONFIG_OF, config_ref, track_ref)

        attached = self.attach_properties(source, track.id, tx)

        self.logger.log("debug", "Created Track", {
            "track": track.track_name,
            "config": source.config_name,
            "properties": [p.type for p in attached],
        })
        return track

    def get_configs(self, id: Any) -> List[TrackConfig]:
        """Configurations of a track, or an empty list on failure."""
        try:
            nodes = self.store.related(NodeRef(self.label, id), CONFIG_OF, TRACK_CONFIG, TO)
            return sorted(
                (TrackConfig.model_validate(n) for n in nodes), key=lambda c: c.id
            )
        except Exception as e:
            self.logger.error(e, f"Failed to get configurations for Track with ID {id}")
            return []

    def with_properties(self, track: Track) -> TrackWithProperties:
        """Add the track's properties and configurations."""
        properties = [
            PropertyDTO(type=p.type, name=p.name) for p in self.get_properties(track.id)
        ]
        return TrackWithProperties(
            **track.model_dump(),
            properties=properties,
            configs=self.get_configs(track.id),
        )
