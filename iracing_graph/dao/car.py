"""Data access for Car nodes."""

from typing import Any

from .base import EntityDao
from ..models import PropertyDTO
from ..models.car import CAR_PROPERTIES, Car, CarWithProperties, CreateCar, IRacingCar
from ..schema import CAR


class CarDao(EntityDao[IRacingCar, Car]):
    """Cars keyed by ``car_id``, with their shared properties."""

    label = CAR
    source_model = IRacingCar
    entity_model = Car
    source_key = "car_id"
    attachable_properties = CAR_PROPERTIES

    def _create(self, source: IRacingCar, tx: Any) -> Car:
        data = CreateCar.from_source(source)
        node = self.store.upsert(self.label, source.car_id, data.model_dump(), tx=tx)
        car = Car.model_validate(node)

        attached = self.attach_properties(source, car.id, tx)

        self.logger.log("debug", "Created Car", {
            "car": car.car_name,
            "properties": [p.type for p in attached],
        })
        return car

    def with_properties(self, car: Car) -> CarWithProperties:
        """Add the car's attached properties; empty if they cannot be read."""
        properties = [
            PropertyDTO(type=p.type, name=p.name) for p in self.get_properties(car.id)
        ]
        return CarWithProperties(**car.model_dump(), properties=properties)
