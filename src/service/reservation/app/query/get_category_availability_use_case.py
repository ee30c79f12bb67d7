from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef


class GetCategoryAvailabilityUseCase:
    """
    Capacity, confirmed count and free seats of a category for club members.

    The numbers are a point-in-time read and may be stale by the time a
    reservation is attempted; admission re-checks under the lock.
    """

    def __init__(
        self,
        *,
        principal_resolver: PrincipalResolver,
        authorization_evaluator: AuthorizationEvaluator,
        bookable_query_repo: IBookableQueryRepo,
    ) -> None:
        self.principal_resolver = principal_resolver
        self.authorization_evaluator = authorization_evaluator
        self.bookable_query_repo = bookable_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        principal_resolver: PrincipalResolver = Depends(Provide[Container.principal_resolver]),
        authorization_evaluator: AuthorizationEvaluator = Depends(
            Provide[Container.authorization_evaluator]
        ),
        bookable_query_repo: IBookableQueryRepo = Depends(Provide[Container.bookable_query_repo]),
    ) -> Self:
        return cls(
            principal_resolver=principal_resolver,
            authorization_evaluator=authorization_evaluator,
            bookable_query_repo=bookable_query_repo,
        )

    @Logger.io
    async def execute(self, *, principal_id: Optional[int], category_id: int) -> CategoryRef:
        principal = await self.principal_resolver.resolve(principal_id)

        category = await self.bookable_query_repo.get_category_ref(category_id=category_id)
        if category is None:
            raise NotFoundError('Category not found')

        await self.authorization_evaluator.require_club_member(
            principal, category.organizer_club_id
        )
        return category
