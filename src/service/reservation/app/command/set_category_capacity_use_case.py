from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import CustomBaseError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.reservation.app.interface.i_bookable_command_repo import IBookableCommandRepo
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef


class SetCategoryCapacityUseCase:
    """Change a category's capacity; never below its confirmed reservations."""

    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        bookable_query_repo: IBookableQueryRepo,
        bookable_command_repo: IBookableCommandRepo,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.bookable_query_repo = bookable_query_repo
        self.bookable_command_repo = bookable_command_repo
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
        bookable_command_repo: IBookableCommandRepo = Depends(
            Provide[Container.bookable_command_repo]
        ),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            bookable_query_repo=bookable_query_repo,
            bookable_command_repo=bookable_command_repo,
        )

    @Logger.io
    async def execute(
        self, *, principal_id: Optional[int], category_id: int, new_capacity: int
    ) -> CategoryRef:
        with self.tracer.start_as_current_span(
            'use_case.set_category_capacity',
            attributes={'category.id': category_id, 'category.new_capacity': new_capacity},
        ):
            try:
                principal = await self.principal_resolver.resolve(principal_id)
                if new_capacity < 0:
                    raise DomainError('Capacity must be zero or greater')

                category = await self.bookable_query_repo.get_category_ref(category_id=category_id)
                if category is None:
                    raise NotFoundError('Category not found')

                await self.authorization_evaluator.require_club_manager(
                    principal, category.organizer_club_id
                )

                updated = await self.bookable_command_repo.set_category_capacity(
                    category_id=category_id, new_capacity=new_capacity
                )
            except CustomBaseError as e:
                metrics.record_capacity_change(operation='set_capacity', result=e.code)
                raise

            metrics.record_capacity_change(operation='set_capacity', result='ok')
            Logger.base.info(
                f'📐 [CAPACITY] category {category_id}: {category.capacity} -> {updated.capacity}'
            )
            return updated
