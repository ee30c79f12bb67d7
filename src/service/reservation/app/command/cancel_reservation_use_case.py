from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AccessDeniedError,
    CustomBaseError,
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


class CancelReservationUseCase:
    """
    Cancel a CONFIRMED reservation, releasing its slot.

    Allowed for the owner and for a manager of the organizing club. The
    final write is a conditional update, so two racing cancels (or a cancel
    racing a check-in) produce exactly one transition. When the policy forbids
    it, cancelling after the event has started is refused.
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
    async def execute(self, *, principal_id: Optional[int], reservation_id: int) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.cancel_reservation', attributes={'reservation.id': reservation_id}
        ):
            try:
                principal = await self.principal_resolver.resolve(principal_id)

                ref = await self.reservation_query_repo.get_ref_by_id(
                    reservation_id=reservation_id
                )
                # Missing and forbidden look the same to the caller
                await self.authorization_evaluator.require_can_act_on_reservation(principal, ref)
                if ref is None:
                    raise AccessDeniedError('You cannot act on this reservation')

                raise_for_terminal(ref.status)

                if not self.reservation_policy.cancel_after_start_allowed:
                    event = await self.bookable_query_repo.get_event_ref(event_id=ref.event_id)
                    # A deleted event has nothing left to start
                    if event is not None:
                        self.reservation_policy.ensure_cancel_open(
                            event=event, now=datetime.now(timezone.utc)
                        )

                reservation = await self.reservation_command_repo.transition(
                    reservation_id=reservation_id, target=ReservationStatus.CANCELLED
                )
            except CustomBaseError as e:
                if isinstance(e, (UnauthenticatedError, AccessDeniedError)):
                    metrics.record_denial(operation='cancel', code=e.code)
                metrics.record_transition(operation='cancel', result=e.code)
                raise

            metrics.record_transition(operation='cancel', result='cancelled')
            Logger.base.info(
                f'🗑️ [CANCEL] reservation {reservation_id} cancelled by principal {principal.id}'
            )
            return reservation
