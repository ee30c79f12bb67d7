"""Application layer interfaces (Ports)"""

from src.service.reservation.app.interface.i_bookable_command_repo import IBookableCommandRepo
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.interface.i_principal_query_repo import IPrincipalQueryRepo
from src.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo

__all__ = [
    'IBookableCommandRepo',
    'IBookableQueryRepo',
    'IPrincipalQueryRepo',
    'IReservationCommandRepo',
    'IReservationQueryRepo',
]
