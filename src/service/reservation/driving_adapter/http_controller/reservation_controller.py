from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.reservation.app.command.check_in_reservation_use_case import (
    CheckInReservationUseCase,
)
from src.service.reservation.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from src.service.reservation.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.reservation.app.query.list_category_reservations_use_case import (
    ListCategoryReservationsUseCase,
)
from src.service.reservation.app.query.list_event_reservations_use_case import (
    ListEventReservationsUseCase,
)
from src.service.reservation.app.query.list_my_reservations_use_case import (
    ListMyReservationsUseCase,
)
from src.service.reservation.driving_adapter.http_controller.auth.current_principal import (
    get_current_principal_id,
)
from src.service.reservation.driving_adapter.http_controller.schema.reservation_schema import (
    CheckInRequest,
    ReservationCreateRequest,
    ReservationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationCreateRequest,
    principal_id: int = Depends(get_current_principal_id),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('principal.id', principal_id)
        reservation = await use_case.execute(
            principal_id=principal_id,
            event_id=request.event_id,
            category_id=request.category_id,
        )
        return ReservationResponse.from_entity(reservation, viewer_id=principal_id)


@router.get('/me')
@Logger.io
async def list_my_reservations(
    reservation_status: Optional[str] = Query(None, alias='status'),
    principal_id: int = Depends(get_current_principal_id),
    use_case: ListMyReservationsUseCase = Depends(ListMyReservationsUseCase.depends),
) -> List[ReservationResponse]:
    reservations = await use_case.execute(
        principal_id=principal_id, status_filter=reservation_status
    )
    return [ReservationResponse.from_entity(r, viewer_id=principal_id) for r in reservations]


@router.patch('/check_in')
@Logger.io
async def check_in_reservation(
    request: CheckInRequest,
    principal_id: int = Depends(get_current_principal_id),
    use_case: CheckInReservationUseCase = Depends(CheckInReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(principal_id=principal_id, token=request.token)
    return ReservationResponse.from_entity(reservation, viewer_id=principal_id)


@router.get('/event/{event_id}')
@Logger.io
async def list_event_reservations(
    event_id: int,
    reservation_status: Optional[str] = Query(None, alias='status'),
    principal_id: int = Depends(get_current_principal_id),
    use_case: ListEventReservationsUseCase = Depends(ListEventReservationsUseCase.depends),
) -> List[ReservationResponse]:
    reservations = await use_case.execute(
        principal_id=principal_id, event_id=event_id, status_filter=reservation_status
    )
    return [ReservationResponse.from_entity(r, viewer_id=principal_id) for r in reservations]


@router.get('/category/{category_id}')
@Logger.io
async def list_category_reservations(
    category_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: ListCategoryReservationsUseCase = Depends(ListCategoryReservationsUseCase.depends),
) -> List[ReservationResponse]:
    reservations = await use_case.execute(principal_id=principal_id, category_id=category_id)
    return [ReservationResponse.from_entity(r, viewer_id=principal_id) for r in reservations]


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(principal_id=principal_id, reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation, viewer_id=principal_id)


@router.patch('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(principal_id=principal_id, reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation, viewer_id=principal_id)
