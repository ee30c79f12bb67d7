from enum import StrEnum
from typing import Optional


class PrincipalRole(StrEnum):
    MEMBER = 'member'
    MANAGER = 'manager'
    ADMIN = 'admin'

    @property
    def is_club_staff(self) -> bool:
        return self in (PrincipalRole.MANAGER, PrincipalRole.ADMIN)

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional['PrincipalRole']:
        """Closed-set lookup; anything outside the enum yields None."""
        if raw is None:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None
