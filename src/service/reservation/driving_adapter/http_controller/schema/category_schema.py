from pydantic import BaseModel, ConfigDict, Field

from src.service.reservation.domain.value_object.bookable_ref import CategoryRef


class CapacityUpdateRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'examples': [{'capacity': 120}]})

    # Negative values reach the domain check and come back as invalid_request
    capacity: int


class CategoryAvailabilityResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'category_id': 3,
                'event_id': 1,
                'name': 'Floor',
                'capacity': 120,
                'confirmed': 87,
                'available': 33,
            }
        }
    )

    category_id: int
    event_id: int
    name: str
    capacity: int = Field(ge=0)
    confirmed: int = Field(ge=0)
    available: int = Field(ge=0)

    @classmethod
    def from_ref(cls, category: CategoryRef) -> 'CategoryAvailabilityResponse':
        return cls(
            category_id=category.id,
            event_id=category.event_id,
            name=category.name,
            capacity=category.capacity,
            confirmed=category.confirmed_count,
            available=category.available,
        )
