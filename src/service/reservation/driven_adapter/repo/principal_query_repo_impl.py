from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_guard import bounded_store_call
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_principal_query_repo import IPrincipalQueryRepo
from src.service.reservation.domain.value_object.principal_snapshot import PrincipalSnapshot
from src.service.reservation.driven_adapter.model.club_model import AffiliationModel
from src.service.reservation.driven_adapter.model.principal_model import PrincipalModel


class PrincipalQueryRepoImpl(IPrincipalQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_principal_snapshot(self, *, principal_id: int) -> Optional[PrincipalSnapshot]:
        first_club_id = (
            select(AffiliationModel.club_id)
            .where(AffiliationModel.principal_id == PrincipalModel.id)
            .order_by(AffiliationModel.id)
            .limit(1)
            .correlate(PrincipalModel)
            .scalar_subquery()
        )
        async with bounded_store_call('get_principal_snapshot'):
            async with self.session_factory() as session:
                row = (
                    await session.execute(
                        select(PrincipalModel, first_club_id).where(
                            PrincipalModel.id == principal_id
                        )
                    )
                ).one_or_none()

        if row is None:
            return None
        principal, club_id = row
        return PrincipalSnapshot(
            id=principal.id,
            role=principal.role,
            is_enabled=principal.is_enabled,
            first_affiliation_club_id=club_id,
            email=principal.email,
            name=principal.name,
        )

    @Logger.io
    async def get_role_in_club(self, *, principal_id: int, club_id: int) -> Optional[str]:
        async with bounded_store_call('get_role_in_club'):
            async with self.session_factory() as session:
                return await session.scalar(
                    select(PrincipalModel.role)
                    .join(AffiliationModel, AffiliationModel.principal_id == PrincipalModel.id)
                    .where(
                        PrincipalModel.id == principal_id,
                        AffiliationModel.club_id == club_id,
                    )
                )
