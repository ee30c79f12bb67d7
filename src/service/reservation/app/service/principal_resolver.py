from typing import Optional

from opentelemetry import trace

from src.platform.exception.exceptions import (
    AccessDeniedError,
    AccountDisabledError,
    IdentityNotFoundError,
    UnauthenticatedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_principal_query_repo import IPrincipalQueryRepo
from src.service.reservation.domain.entity.principal_entity import Principal
from src.service.reservation.domain.enum.principal_role import PrincipalRole


class PrincipalResolver:
    """
    Turns an authenticated identity id into a Principal snapshot.

    Runs on every request; nothing is cached between calls, so role and
    affiliation changes take effect on the next request.
    """

    def __init__(self, *, principal_query_repo: IPrincipalQueryRepo) -> None:
        self.principal_query_repo = principal_query_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def resolve(self, principal_id: Optional[int]) -> Principal:
        if principal_id is None:
            raise UnauthenticatedError()

        with self.tracer.start_as_current_span(
            'principal.resolve', attributes={'principal.id': principal_id}
        ):
            snapshot = await self.principal_query_repo.get_principal_snapshot(
                principal_id=principal_id
            )
            if snapshot is None:
                raise IdentityNotFoundError('No principal backs this identity')

            if not snapshot.is_enabled:
                raise AccountDisabledError('Account is disabled')

            role = PrincipalRole.parse(snapshot.role)
            if role is None:
                Logger.base.warning(
                    f'⚠️ [AUTH] principal {principal_id} has unknown role {snapshot.role!r}'
                )
                raise AccessDeniedError('Principal role is not recognised')

            return Principal(
                id=snapshot.id,
                role=role,
                is_enabled=snapshot.is_enabled,
                managed_club_id=snapshot.first_affiliation_club_id if role.is_club_staff else None,
                email=snapshot.email,
                name=snapshot.name,
            )
