from abc import ABC, abstractmethod
from typing import Optional

from src.service.reservation.domain.value_object.principal_snapshot import PrincipalSnapshot


class IPrincipalQueryRepo(ABC):
    """Read-only access to principals and their club affiliations"""

    @abstractmethod
    async def get_principal_snapshot(self, *, principal_id: int) -> Optional[PrincipalSnapshot]:
        """Principal row plus the club of its earliest affiliation"""
        pass

    @abstractmethod
    async def get_role_in_club(self, *, principal_id: int, club_id: int) -> Optional[str]:
        """
        Fresh role of the principal if it is affiliated with the club, else None.

        Answers "is affiliated" and "what role" in one query.
        """
        pass
