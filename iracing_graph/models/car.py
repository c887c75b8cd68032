"""Car models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from . import IngestionModel, IngestionTag, Persisted, PropertyDTO

# Boolean attributes that become Property relationships when true
CAR_PROPERTIES = (
    "ai_enabled",
    "rain_enabled",
    "retired",
)


class CarType(IngestionTag):
    car_type: str


class IRacingCar(IngestionModel):
    """A car as returned by the iRacing car endpoint."""
    car_id: int = Field(gt=0, description="The unique ID of the car")
    car_name: str = Field(min_length=1, description="The full name of the car")
    car_name_abbreviated: Optional[str] = None
    car_dirpath: Optional[str] = None
    car_types: List[CarType] = Field(default_factory=list)
    car_weight: Optional[float] = Field(None, ge=0)
    categories: List[str] = Field(default_factory=list)
    created: Optional[str] = None
    first_sale: Optional[str] = None
    forum_url: Optional[str] = None
    hp: Optional[int] = Field(None, ge=0)
    package_id: Optional[int] = None
    patterns: Optional[int] = None
    price: Optional[float] = Field(None, ge=0)
    price_display: Optional[str] = None
    search_filters: Optional[str] = None
    sku: Optional[int] = None
    max_power_adjust_pct: Optional[float] = None
    min_power_adjust_pct: Optional[float] = None
    max_weight_penalty_kg: Optional[float] = None

    ai_enabled: Optional[bool] = None
    allow_number_colors: Optional[bool] = None
    allow_number_font: Optional[bool] = None
    allow_sponsor1: Optional[bool] = None
    allow_sponsor2: Optional[bool] = None
    allow_wheel_color: Optional[bool] = None
    award_exempt: Optional[bool] = None
    free_with_subscription: Optional[bool] = None
    has_headlights: Optional[bool] = None
    has_multiple_dry_tire_types: Optional[bool] = None
    has_rain_capable_tire_types: Optional[bool] = None
    is_ps_purchasable: Optional[bool] = None
    rain_enabled: Optional[bool] = None
    retired: Optional[bool] = None


class CreateCar(BaseModel):
    """Fields written to a Car node."""
    car_name: str
    car_id: int
    price: Optional[float] = None
    price_display: Optional[str] = None
    has_headlights: Optional[bool] = None
    free_with_subscription: Optional[bool] = None

    @classmethod
    def from_source(cls, source: IRacingCar) -> "CreateCar":
        return cls(
            car_name=source.car_name,
            car_id=source.car_id,
            price=source.price,
            price_display=source.price_display,
            has_headlights=source.has_headlights,
            free_with_subscription=source.free_with_subscription,
        )


class Car(Persisted, CreateCar):
    """A stored Car node; ``id`` equals ``car_id``."""


class CarWithProperties(Car):
    properties: List[PropertyDTO] = Field(default_factory=list)
