from datetime import datetime, timezone
import time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AccessDeniedError,
    CustomBaseError,
    EventClosedError,
    NotFoundError,
    UnauthenticatedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy


class CreateReservationUseCase:
    """
    Admit a new reservation for the calling member.

    Flow:
    1. Resolve the principal (fresh role and affiliation)
    2. Load the category and check it belongs to the requested event
    3. Require membership of the organizing club
    4. Fail fast on a closed event
    5. Count-check-and-insert atomically under the category lock
    """

    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        bookable_query_repo: IBookableQueryRepo,
        reservation_command_repo: IReservationCommandRepo,
        reservation_policy: ReservationPolicy,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.bookable_query_repo = bookable_query_repo
        self.reservation_command_repo = reservation_command_repo
        self.reservation_policy = reservation_policy
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        principal_resolver: PrincipalResolver = Depends(Provide[Container.principal_resolver]),
        authorization_evaluator: AuthorizationEvaluator = Depends(
            Provide[Container.authorization_evaluator]
        ),
        bookable_query_repo: IBookableQueryRepo = Depends(Provide[Container.bookable_query_repo]),
        reservation_command_repo: IReservationCommandRepo = Depends(
            Provide[Container.reservation_command_repo]
        ),
        reservation_policy: ReservationPolicy = Depends(Provide[Container.reservation_policy]),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            bookable_query_repo=bookable_query_repo,
            reservation_command_repo=reservation_command_repo,
            reservation_policy=reservation_policy,
        )

    @Logger.io
    async def execute(
        self, *, principal_id: Optional[int], event_id: int, category_id: int
    ) -> Reservation:
        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.create_reservation',
            attributes={'event.id': event_id, 'category.id': category_id},
        ) as span:
            try:
                reservation = await self._admit(
                    principal_id=principal_id, event_id=event_id, category_id=category_id
                )
            except CustomBaseError as e:
                if isinstance(e, (UnauthenticatedError, AccessDeniedError)):
                    metrics.record_denial(operation='create', code=e.code)
                metrics.record_admission(result=e.code, duration=time.perf_counter() - started)
                span.set_attribute('admission.result', e.code)
                raise

            metrics.record_admission(result='admitted', duration=time.perf_counter() - started)
            span.set_attribute('admission.result', 'admitted')
            span.set_attribute('reservation.id', reservation.id or 0)
            Logger.base.info(
                f'🎟️ [ADMIT] reservation {reservation.id} for principal {principal_id} '
                f'in category {category_id}'
            )
            return reservation

    async def _admit(
        self, *, principal_id: Optional[int], event_id: int, category_id: int
    ) -> Reservation:
        principal = await self.principal_resolver.resolve(principal_id)

        category = await self.bookable_query_repo.get_category_ref(category_id=category_id)
        if category is None or category.event_id != event_id:
            raise NotFoundError('Category not found for this event')

        await self.authorization_evaluator.require_club_member(
            principal, category.organizer_club_id
        )

        now = datetime.now(timezone.utc)
        if not category.is_bookable_at(now):
            raise EventClosedError('Event is not open for reservations')

        reservation = Reservation.create(
            principal_id=principal.id, event_id=event_id, category_id=category_id
        )
        return await self.reservation_command_repo.admit(
            reservation=reservation, policy=self.reservation_policy, now=now
        )
