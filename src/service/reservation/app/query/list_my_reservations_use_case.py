from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.app.query.status_filter import StatusFilter
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.entity.reservation_entity import Reservation


class ListMyReservationsUseCase:
    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        reservation_query_repo: IReservationQueryRepo,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        principal_resolver: PrincipalResolver = Depends(Provide[Container.principal_resolver]),
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            reservation_query_repo=reservation_query_repo,
        )

    @Logger.io
    async def execute(
        self, *, principal_id: Optional[int], status_filter: Optional[str] = None
    ) -> List[Reservation]:
        principal = await self.principal_resolver.resolve(principal_id)

        status = StatusFilter.parse(status_filter)
        if status.matches_nothing:
            return []

        return await self.reservation_query_repo.list_by_owner(
            principal_id=principal.id, status=status.status
        )
