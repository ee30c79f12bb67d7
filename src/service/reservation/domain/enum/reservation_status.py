from enum import StrEnum
from typing import Optional


class ReservationStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    USED = 'used'

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.CONFIRMED

    @classmethod
    def parse(cls, raw: str) -> Optional['ReservationStatus']:
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None
