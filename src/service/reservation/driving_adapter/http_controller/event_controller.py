from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.deactivate_event_use_case import DeactivateEventUseCase
from src.service.reservation.app.command.delete_event_use_case import DeleteEventUseCase
from src.service.reservation.driving_adapter.http_controller.auth.current_principal import (
    get_current_principal_id,
)


router = APIRouter()


@router.delete('/{event_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_event(
    event_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: DeleteEventUseCase = Depends(DeleteEventUseCase.depends),
) -> None:
    await use_case.execute(principal_id=principal_id, event_id=event_id)


@router.patch('/{event_id}/deactivate')
@Logger.io
async def deactivate_event(
    event_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: DeactivateEventUseCase = Depends(DeactivateEventUseCase.depends),
) -> dict[str, int | bool]:
    await use_case.execute(principal_id=principal_id, event_id=event_id)
    return {'event_id': event_id, 'is_active': False}
