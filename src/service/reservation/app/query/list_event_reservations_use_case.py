from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.app.query.status_filter import StatusFilter
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.entity.reservation_entity import Reservation


class ListEventReservationsUseCase:
    """Attendee list of one event for a manager of the organizing club."""

    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        bookable_query_repo: IBookableQueryRepo,
        reservation_query_repo: IReservationQueryRepo,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.bookable_query_repo = bookable_query_repo
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        principal_resolver: PrincipalResolver = Depends(Provide[Container.principal_resolver]),
        authorization_evaluator: AuthorizationEvaluator = Depends(
            Provide[Container.authorization_evaluator]
        ),
        bookable_query_repo: IBookableQueryRepo = Depends(Provide[Container.bookable_query_repo]),
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            bookable_query_repo=bookable_query_repo,
            reservation_query_repo=reservation_query_repo,
        )

    @Logger.io
    async def execute(
        self, *, principal_id: Optional[int], event_id: int, status_filter: Optional[str] = None
    ) -> List[Reservation]:
        principal = await self.principal_resolver.resolve(principal_id)

        event = await self.bookable_query_repo.get_event_ref(event_id=event_id)
        if event is None:
            raise NotFoundError('Event not found')

        await self.authorization_evaluator.require_club_manager(principal, event.organizer_club_id)

        status = StatusFilter.parse(status_filter)
        if status.matches_nothing:
            return []

        return await self.reservation_query_repo.list_by_event(
            event_id=event_id, status=status.status
        )
