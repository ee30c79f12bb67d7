from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.reservation.domain.entity.reservation_entity import Reservation


class ReservationCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={'examples': [{'event_id': 1, 'category_id': 3}]}
    )

    event_id: int = Field(gt=0)
    category_id: int = Field(gt=0)


class CheckInRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'examples': [
                {'token': 'uuid:0b6f9a52-3c1e-4f0e-9f7a-2f4f1d8c6a10'},
                {'token': '0b6f9a52-3c1e-4f0e-9f7a-2f4f1d8c6a10'},
            ]
        }
    )

    # Either the bare token or the scanned `uuid:<token>` payload
    token: str = Field(min_length=1)


class ReservationResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': 42,
                'principal_id': 7,
                'event_id': 1,
                'category_id': 3,
                'status': 'confirmed',
                'check_in_payload': 'uuid:0b6f9a52-3c1e-4f0e-9f7a-2f4f1d8c6a10',
                'created_at': '2025-01-10T10:30:00Z',
                'updated_at': '2025-01-10T10:30:00Z',
            }
        }
    )

    id: int
    principal_id: int
    event_id: int
    category_id: int
    status: str
    # Only rendered for the owner; it is the entry credential
    check_in_payload: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, reservation: Reservation, *, viewer_id: int) -> 'ReservationResponse':
        return cls(
            id=reservation.id or 0,
            principal_id=reservation.principal_id,
            event_id=reservation.event_id,
            category_id=reservation.category_id,
            status=reservation.status.value,
            check_in_payload=(
                reservation.check_in_payload if reservation.principal_id == viewer_id else None
            ),
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
