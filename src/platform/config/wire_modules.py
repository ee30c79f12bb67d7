"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.reservation.app.command import (
    cancel_reservation_use_case,
    check_in_reservation_use_case,
    create_reservation_use_case,
    deactivate_event_use_case,
    delete_category_use_case,
    delete_event_use_case,
    set_category_capacity_use_case,
)
from src.service.reservation.app.query import (
    get_category_availability_use_case,
    get_reservation_use_case,
    list_category_reservations_use_case,
    list_event_reservations_use_case,
    list_my_reservations_use_case,
)
from src.service.reservation.driving_adapter.http_controller.auth import current_principal


WIRE_MODULES: list[ModuleType] = [
    create_reservation_use_case,
    cancel_reservation_use_case,
    check_in_reservation_use_case,
    set_category_capacity_use_case,
    delete_category_use_case,
    delete_event_use_case,
    deactivate_event_use_case,
    get_reservation_use_case,
    list_my_reservations_use_case,
    list_event_reservations_use_case,
    list_category_reservations_use_case,
    get_category_availability_use_case,
    current_principal,
]
