"""Reservation Domain Enums"""

from src.service.reservation.domain.enum.principal_role import PrincipalRole
from src.service.reservation.domain.enum.reservation_status import ReservationStatus

__all__ = ['PrincipalRole', 'ReservationStatus']
