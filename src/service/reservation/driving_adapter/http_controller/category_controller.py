from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.command.delete_category_use_case import DeleteCategoryUseCase
from src.service.reservation.app.command.set_category_capacity_use_case import (
    SetCategoryCapacityUseCase,
)
from src.service.reservation.app.query.get_category_availability_use_case import (
    GetCategoryAvailabilityUseCase,
)
from src.service.reservation.driving_adapter.http_controller.auth.current_principal import (
    get_current_principal_id,
)
from src.service.reservation.driving_adapter.http_controller.schema.category_schema import (
    CapacityUpdateRequest,
    CategoryAvailabilityResponse,
)


router = APIRouter()


@router.get('/{category_id}/availability')
@Logger.io
async def get_category_availability(
    category_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: GetCategoryAvailabilityUseCase = Depends(GetCategoryAvailabilityUseCase.depends),
) -> CategoryAvailabilityResponse:
    category = await use_case.execute(principal_id=principal_id, category_id=category_id)
    return CategoryAvailabilityResponse.from_ref(category)


@router.put('/{category_id}/capacity')
@Logger.io
async def set_category_capacity(
    category_id: int,
    request: CapacityUpdateRequest,
    principal_id: int = Depends(get_current_principal_id),
    use_case: SetCategoryCapacityUseCase = Depends(SetCategoryCapacityUseCase.depends),
) -> CategoryAvailabilityResponse:
    category = await use_case.execute(
        principal_id=principal_id, category_id=category_id, new_capacity=request.capacity
    )
    return CategoryAvailabilityResponse.from_ref(category)


@router.delete('/{category_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_category(
    category_id: int,
    principal_id: int = Depends(get_current_principal_id),
    use_case: DeleteCategoryUseCase = Depends(DeleteCategoryUseCase.depends),
) -> None:
    await use_case.execute(principal_id=principal_id, category_id=category_id)
