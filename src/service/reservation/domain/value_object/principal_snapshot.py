from typing import Optional

import attrs


@attrs.define(frozen=True)
class PrincipalSnapshot:
    """Raw principal row as stored; the role is still an unchecked string."""

    id: int
    role: str
    is_enabled: bool
    first_affiliation_club_id: Optional[int] = None
    email: str = ''
    name: str = ''
