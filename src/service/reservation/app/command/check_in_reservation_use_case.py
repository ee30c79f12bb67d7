from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AccessDeniedError,
    CustomBaseError,
    NotFoundError,
    TokenNotFoundError,
    UnauthenticatedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    raise_for_terminal,
)
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy


class CheckInReservationUseCase:
    """
    Mark a reservation USED by presenting its token.

    Only a manager of the organizing club can check people in. Replays of
    the same token are rejected by the conditional update, not by the
    pre-check, so concurrent scans admit exactly one entry.
    """

    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        reservation_query_repo: IReservationQueryRepo,
        reservation_command_repo: IReservationCommandRepo,
        bookable_query_repo: IBookableQueryRepo,
        reservation_policy: ReservationPolicy,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.reservation_query_repo = reservation_query_repo
        self.reservation_command_repo = reservation_command_repo
        self.bookable_query_repo = bookable_query_repo
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
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
        reservation_command_repo: IReservationCommandRepo = Depends(
            Provide[Container.reservation_command_repo]
        ),
        bookable_query_repo: IBookableQueryRepo = Depends(Provide[Container.bookable_query_repo]),
        reservation_policy: ReservationPolicy = Depends(Provide[Container.reservation_policy]),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            reservation_query_repo=reservation_query_repo,
            reservation_command_repo=reservation_command_repo,
            bookable_query_repo=bookable_query_repo,
            reservation_policy=reservation_policy,
        )

    @Logger.io
    async def execute(self, *, principal_id: Optional[int], token: Optional[str]) -> Reservation:
        with self.tracer.start_as_current_span('use_case.check_in_reservation') as span:
            try:
                principal = await self.principal_resolver.resolve(principal_id)
                normalized = Reservation.parse_check_in_token(token)

                ref = await self.reservation_query_repo.get_ref_by_token(token=normalized)
                if ref is None:
                    raise TokenNotFoundError('Reservation token not found')
                span.set_attribute('reservation.id', ref.id)

                await self.authorization_evaluator.require_club_manager(
                    principal, ref.organizer_club_id
                )

                raise_for_terminal(ref.status)

                if self.reservation_policy.check_in_window_enforced:
                    event = await self.bookable_query_repo.get_event_ref(event_id=ref.event_id)
                    if event is None:
                        raise NotFoundError('Event not found')
                    self.reservation_policy.ensure_check_in_open(
                        event=event, now=datetime.now(timezone.utc)
                    )

                reservation = await self.reservation_command_repo.transition(
                    reservation_id=ref.id, target=ReservationStatus.USED
                )
            except CustomBaseError as e:
                if isinstance(e, (UnauthenticatedError, AccessDeniedError)):
                    metrics.record_denial(operation='check_in', code=e.code)
                metrics.record_transition(operation='check_in', result=e.code)
                raise

            metrics.record_transition(operation='check_in', result='used')
            Logger.base.info(
                f'✅ [CHECK-IN] reservation {reservation.id} checked in by principal {principal.id}'
            )
            return reservation
