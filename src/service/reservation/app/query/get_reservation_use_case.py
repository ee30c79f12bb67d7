from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import AccessDeniedError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.entity.reservation_entity import Reservation


class GetReservationUseCase:
    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        reservation_query_repo: IReservationQueryRepo,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        principal_resolver: PrincipalResolver = Depends(Provide[Container.principal_resolver]),
        authorization_evaluator: AuthorizationEvaluator = Depends(
            Provide[Container.authorization_evaluator]
        ),
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            reservation_query_repo=reservation_query_repo,
        )

    @Logger.io
    async def execute(self, *, principal_id: Optional[int], reservation_id: int) -> Reservation:
        """Owner or organizing-club manager only; a missing id is reported as forbidden."""
        principal = await self.principal_resolver.resolve(principal_id)

        ref = await self.reservation_query_repo.get_ref_by_id(reservation_id=reservation_id)
        await self.authorization_evaluator.require_can_act_on_reservation(principal, ref)

        reservation = await self.reservation_query_repo.get_by_id(reservation_id=reservation_id)
        if reservation is None:
            raise AccessDeniedError('You cannot act on this reservation')
        return reservation
