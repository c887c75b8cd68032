"""Track and track configuration models.

iRacing returns one record per track configuration. Configurations of
the same track share a ``sku``, which identifies the Track node; the
record's ``track_id`` identifies its TrackConfig node.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from . import IngestionModel, IngestionTag, Persisted, PropertyDTO

# Boolean attributes that become Property relationships when true
TRACK_PROPERTIES = (
    "ai_enabled",
    "allow_rolling_start",
    "allow_standing_start",
    "has_short_parade_lap",
    "fully_lit",
    "rain_enabled",
    "retired",
)


class TrackType(IngestionTag):
    track_type: str


class IRacingTrack(IngestionModel):
    """A track configuration as returned by the iRacing track endpoint."""
    track_id: int = Field(gt=0, description="The unique ID of the configuration")
    track_name: str = Field(min_length=1, description="The name of the track")
    sku: int = Field(gt=0, description="Shared by all configurations of a track")
    config_name: str = Field(description="The name of the configuration")
    track_config_length: float = Field(gt=0, description="Length in miles")
    corners_per_lap: int = Field(ge=0)
    max_cars: int = Field(gt=0)

    category: Optional[str] = None
    category_id: Optional[int] = None
    closes: Optional[str] = None
    opens: Optional[str] = None
    created: Optional[str] = None
    first_sale: Optional[str] = None
    grid_stalls: Optional[int] = Field(None, ge=0)
    lap_scoring: Optional[int] = Field(None, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[str] = None
    number_pitstalls: Optional[int] = Field(None, ge=0)
    package_id: Optional[int] = None
    pit_road_speed_limit: Optional[float] = Field(None, gt=0)
    price: Optional[float] = Field(None, ge=0)
    price_display: Optional[str] = None
    priority: Optional[int] = None
    qualify_laps: Optional[int] = Field(None, ge=0)
    search_filters: Optional[str] = None
    site_url: Optional[str] = None
    solo_laps: Optional[int] = Field(None, ge=0)
    time_zone: Optional[str] = None
    track_dirpath: Optional[str] = None
    track_types: List[TrackType] = Field(default_factory=list)

    ai_enabled: Optional[bool] = None
    allow_pitlane_collisions: Optional[bool] = None
    allow_rolling_start: Optional[bool] = None
    allow_standing_start: Optional[bool] = None
    award_exempt: Optional[bool] = None
    free_with_subscription: Optional[bool] = None
    fully_lit: Optional[bool] = None
    has_opt_path: Optional[bool] = None
    has_short_parade_lap: Optional[bool] = None
    has_start_zone: Optional[bool] = None
    has_svg_map: Optional[bool] = None
    is_dirt: Optional[bool] = None
    is_oval: Optional[bool] = None
    is_ps_purchasable: Optional[bool] = None
    night_lighting: Optional[bool] = None
    purchasable: Optional[bool] = None
    rain_enabled: Optional[bool] = None
    restart_on_left: Optional[bool] = None
    retired: Optional[bool] = None
    start_on_left: Optional[bool] = None
    supports_grip_compound: Optional[bool] = None
    tech_track: Optional[bool] = None


class CreateTrack(BaseModel):
    """Fields written to a Track node."""
    track_name: str
    category: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = None
    price_display: Optional[str] = None
    free_with_subscription: Optional[bool] = None
    pit_road_speed_limit: Optional[float] = None

    @classmethod
    def from_source(cls, source: IRacingTrack) -> "CreateTrack":
        return cls(
            track_name=source.track_name,
            category=source.category,
            location=source.location,
            price=source.price,
            price_display=source.price_display,
            free_with_subscription=source.free_with_subscription,
            pit_road_speed_limit=source.pit_road_speed_limit,
        )


class CreateTrackConfig(BaseModel):
    """Fields written to a TrackConfig node."""
    name: str
    max_cars: int
    length: float
    corners_per_lap: int
    short_parade_lap: bool = False

    @classmethod
    def from_source(cls, source: IRacingTrack) -> "CreateTrackConfig":
        return cls(
            name=source.config_name,
            max_cars=source.max_cars,
            length=source.track_config_length,
            corners_per_lap=source.corners_per_lap,
            short_parade_lap=source.has_short_parade_lap is True,
        )


class Track(Persisted, CreateTrack):
    """A stored Track node; ``id`` equals the upstream ``sku``."""


class TrackConfig(Persisted, CreateTrackConfig):
    """A stored TrackConfig node; ``id`` equals the upstream ``track_id``."""


class TrackWithProperties(Track):
    properties: List[PropertyDTO] = Field(default_factory=list)
    configs: List[TrackConfig] = Field(default_factory=list)
