from typing import Optional

from src.platform.exception.exceptions import AccessDeniedError, UnauthenticatedError
from src.service.reservation.app.interface.i_principal_query_repo import IPrincipalQueryRepo
from src.service.reservation.domain.entity.principal_entity import Principal
from src.service.reservation.domain.enum.principal_role import PrincipalRole
from src.service.reservation.domain.value_object.reservation_ref import ReservationRef


class AuthorizationEvaluator:
    """
    ALLOW/DENY decisions from ownership, affiliation and role facts.

    Predicates return False for an anonymous caller or a missing id; the
    `require_*` variants raise UnauthenticatedError for an anonymous caller
    and AccessDeniedError otherwise. Affiliation facts are read fresh on
    every call through a single `get_role_in_club` lookup.
    """

    def __init__(self, *, principal_query_repo: IPrincipalQueryRepo) -> None:
        self.principal_query_repo = principal_query_repo

    async def _role_in_club(self, principal: Principal, club_id: int) -> Optional[PrincipalRole]:
        raw = await self.principal_query_repo.get_role_in_club(
            principal_id=principal.id, club_id=club_id
        )
        return PrincipalRole.parse(raw)

    # ---------------------------------------------------------------------
    # Predicates
    # ---------------------------------------------------------------------

    @staticmethod
    def is_owner(principal: Optional[Principal], resource_owner_id: Optional[int]) -> bool:
        if principal is None or resource_owner_id is None:
            return False
        return principal.id == resource_owner_id

    async def is_club_member(self, principal: Optional[Principal], club_id: Optional[int]) -> bool:
        if principal is None or club_id is None:
            return False
        raw = await self.principal_query_repo.get_role_in_club(
            principal_id=principal.id, club_id=club_id
        )
        return raw is not None

    async def is_club_manager(self, principal: Optional[Principal], club_id: Optional[int]) -> bool:
        if principal is None or club_id is None or not principal.manages(club_id):
            return False
        role = await self._role_in_club(principal, club_id)
        return role is not None and role.is_club_staff

    async def is_club_admin(self, principal: Optional[Principal], club_id: Optional[int]) -> bool:
        if principal is None or club_id is None or not principal.manages(club_id):
            return False
        role = await self._role_in_club(principal, club_id)
        return role is PrincipalRole.ADMIN

    async def can_act_on_reservation(
        self, principal: Optional[Principal], reservation: Optional[ReservationRef]
    ) -> bool:
        if principal is None or reservation is None:
            return False
        if self.is_owner(principal, reservation.owner_id):
            return True
        return await self.is_club_manager(principal, reservation.organizer_club_id)

    # ---------------------------------------------------------------------
    # Raising variants
    # ---------------------------------------------------------------------

    @staticmethod
    def _require_authenticated(principal: Optional[Principal]) -> Principal:
        if principal is None:
            raise UnauthenticatedError()
        return principal

    def require_owner(
        self, principal: Optional[Principal], resource_owner_id: Optional[int]
    ) -> Principal:
        principal = self._require_authenticated(principal)
        if not self.is_owner(principal, resource_owner_id):
            raise AccessDeniedError('Only the owner can perform this action')
        return principal

    async def require_club_member(
        self, principal: Optional[Principal], club_id: Optional[int]
    ) -> Principal:
        principal = self._require_authenticated(principal)
        if not await self.is_club_member(principal, club_id):
            raise AccessDeniedError('You are not a member of the organizing club')
        return principal

    async def require_club_manager(
        self, principal: Optional[Principal], club_id: Optional[int]
    ) -> Principal:
        principal = self._require_authenticated(principal)
        if not await self.is_club_manager(principal, club_id):
            raise AccessDeniedError('Only a manager of the organizing club can perform this action')
        return principal

    async def require_club_admin(
        self, principal: Optional[Principal], club_id: Optional[int]
    ) -> Principal:
        principal = self._require_authenticated(principal)
        if not await self.is_club_admin(principal, club_id):
            raise AccessDeniedError('Only an admin of the organizing club can perform this action')
        return principal

    async def require_can_act_on_reservation(
        self, principal: Optional[Principal], reservation: Optional[ReservationRef]
    ) -> Principal:
        principal = self._require_authenticated(principal)
        if not await self.can_act_on_reservation(principal, reservation):
            raise AccessDeniedError('You cannot act on this reservation')
        return principal
