from typing import Optional

import attrs

from src.service.reservation.domain.enum.principal_role import PrincipalRole


@attrs.define(frozen=True)
class Principal:
    """
    Per-request snapshot of the acting identity.

    `managed_club_id` is only set for MANAGER/ADMIN and is the club of their
    first affiliation. A staff principal without one manages nothing.
    """

    id: int
    role: PrincipalRole
    is_enabled: bool = True
    managed_club_id: Optional[int] = None
    email: str = ''
    name: str = ''

    @property
    def is_club_staff(self) -> bool:
        return self.role.is_club_staff

    def manages(self, club_id: Optional[int]) -> bool:
        return (
            self.is_club_staff
            and club_id is not None
            and self.managed_club_id is not None
            and self.managed_club_id == club_id
        )
