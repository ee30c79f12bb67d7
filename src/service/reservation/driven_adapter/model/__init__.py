"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.reservation.driven_adapter.model.club_model import AffiliationModel, ClubModel
from src.service.reservation.driven_adapter.model.event_model import CategoryModel, EventModel
from src.service.reservation.driven_adapter.model.principal_model import PrincipalModel
from src.service.reservation.driven_adapter.model.reservation_model import ReservationModel

__all__ = [
    'AffiliationModel',
    'CategoryModel',
    'ClubModel',
    'EventModel',
    'PrincipalModel',
    'ReservationModel',
]
