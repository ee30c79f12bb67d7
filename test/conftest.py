"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- An isolated InMemoryReservationStore per test
- A seeded club world (clubs, members, managers, an open event)
- Use case factories bound to the store

Architecture:
- Unit tests (test/**/unit/): pure domain objects or AsyncMock port doubles
- Use case tests: real use cases over the in-memory store
- Repository tests: SQLAlchemy repositories over sqlite+aiosqlite
- API tests: FastAPI TestClient with the memory backend
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time by core_setting.py and loguru_io_config.py
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    os.environ['STORE_BACKEND'] = 'memory'
    os.environ.setdefault('STORE_TIMEOUT_SECONDS', '2')
    os.environ.setdefault('DEBUG', 'true')
    os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_pytest_runs_only_32b')

    # Create test log directory
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402

import attrs  # noqa: E402
import pytest  # noqa: E402

from src.service.reservation.app.command.cancel_reservation_use_case import (  # noqa: E402
    CancelReservationUseCase,
)
from src.service.reservation.app.command.check_in_reservation_use_case import (  # noqa: E402
    CheckInReservationUseCase,
)
from src.service.reservation.app.command.create_reservation_use_case import (  # noqa: E402
    CreateReservationUseCase,
)
from src.service.reservation.app.command.deactivate_event_use_case import (  # noqa: E402
    DeactivateEventUseCase,
)
from src.service.reservation.app.command.delete_category_use_case import (  # noqa: E402
    DeleteCategoryUseCase,
)
from src.service.reservation.app.command.delete_event_use_case import (  # noqa: E402
    DeleteEventUseCase,
)
from src.service.reservation.app.command.set_category_capacity_use_case import (  # noqa: E402
    SetCategoryCapacityUseCase,
)
from src.service.reservation.app.query.get_category_availability_use_case import (  # noqa: E402
    GetCategoryAvailabilityUseCase,
)
from src.service.reservation.app.query.get_reservation_use_case import (  # noqa: E402
    GetReservationUseCase,
)
from src.service.reservation.app.query.list_category_reservations_use_case import (  # noqa: E402
    ListCategoryReservationsUseCase,
)
from src.service.reservation.app.query.list_event_reservations_use_case import (  # noqa: E402
    ListEventReservationsUseCase,
)
from src.service.reservation.app.query.list_my_reservations_use_case import (  # noqa: E402
    ListMyReservationsUseCase,
)
from src.service.reservation.app.service.authorization_evaluator import (  # noqa: E402
    AuthorizationEvaluator,
)
from src.service.reservation.app.service.principal_resolver import (  # noqa: E402
    PrincipalResolver,
)
from src.service.reservation.domain.value_object.reservation_policy import (  # noqa: E402
    ReservationPolicy,
)
from src.service.reservation.driven_adapter.memory.in_memory_store import (  # noqa: E402
    InMemoryReservationStore,
)


# =============================================================================
# Seeded world
# =============================================================================


@attrs.define
class ClubWorld:
    """Ids of everything seeded into the store for a test."""

    store: InMemoryReservationStore
    club_id: int
    other_club_id: int
    admin_id: int
    manager_id: int
    other_manager_id: int
    member_id: int
    member_x_id: int
    member_y_id: int
    member_z_id: int
    outsider_id: int
    event_id: int
    category_id: int
    other_event_id: int
    other_category_id: int

    def add_member(self, email: str, *, club_id: int | None = None) -> int:
        principal_id = self.store.add_principal(email=email)
        self.store.add_affiliation(principal_id=principal_id, club_id=club_id or self.club_id)
        return principal_id

    def add_category(self, *, capacity: int, event_id: int | None = None) -> int:
        return self.store.add_category(
            event_id=event_id or self.event_id, name=f'cat-{capacity}', capacity=capacity
        )


def seed_world(store: InMemoryReservationStore, *, capacity: int = 2) -> ClubWorld:
    now = datetime.now(timezone.utc)
    club_id = store.add_club(name='Chess Club')
    other_club_id = store.add_club(name='Rowing Club')

    def principal(email: str, role: str, club: int | None) -> int:
        principal_id = store.add_principal(email=email, role=role)
        if club is not None:
            store.add_affiliation(principal_id=principal_id, club_id=club)
        return principal_id

    event_id = store.add_event(
        club_id=club_id,
        name='Spring Open',
        start_at=now + timedelta(days=1),
        end_at=now + timedelta(days=1, hours=4),
    )
    other_event_id = store.add_event(
        club_id=other_club_id,
        name='Regatta',
        start_at=now + timedelta(days=2),
        end_at=now + timedelta(days=2, hours=6),
    )
    return ClubWorld(
        store=store,
        club_id=club_id,
        other_club_id=other_club_id,
        admin_id=principal('admin@chess.test', 'admin', club_id),
        manager_id=principal('manager@chess.test', 'manager', club_id),
        other_manager_id=principal('manager@rowing.test', 'manager', other_club_id),
        member_id=principal('member@chess.test', 'member', club_id),
        member_x_id=principal('x@chess.test', 'member', club_id),
        member_y_id=principal('y@chess.test', 'member', club_id),
        member_z_id=principal('z@chess.test', 'member', club_id),
        outsider_id=principal('outsider@rowing.test', 'member', other_club_id),
        event_id=event_id,
        category_id=store.add_category(event_id=event_id, name='Floor', capacity=capacity),
        other_event_id=other_event_id,
        other_category_id=store.add_category(event_id=other_event_id, name='Bank', capacity=10),
    )


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def world(store: InMemoryReservationStore) -> ClubWorld:
    return seed_world(store)


@pytest.fixture
def policy() -> ReservationPolicy:
    return ReservationPolicy()


# =============================================================================
# Use cases over the in-memory store
# =============================================================================


@attrs.define
class UseCases:
    store: InMemoryReservationStore
    policy: ReservationPolicy = attrs.field(factory=ReservationPolicy)

    @property
    def resolver(self) -> PrincipalResolver:
        return PrincipalResolver(principal_query_repo=self.store)

    @property
    def evaluator(self) -> AuthorizationEvaluator:
        return AuthorizationEvaluator(principal_query_repo=self.store)

    def _common(self) -> dict:
        return {'principal_resolver': self.resolver, 'authorization_evaluator': self.evaluator}

    @property
    def create(self) -> CreateReservationUseCase:
        return CreateReservationUseCase(
            **self._common(),
            bookable_query_repo=self.store,
            reservation_command_repo=self.store,
            reservation_policy=self.policy,
        )

    @property
    def cancel(self) -> CancelReservationUseCase:
        return CancelReservationUseCase(
            **self._common(),
            reservation_query_repo=self.store,
            reservation_command_repo=self.store,
            bookable_query_repo=self.store,
            reservation_policy=self.policy,
        )

    @property
    def check_in(self) -> CheckInReservationUseCase:
        return CheckInReservationUseCase(
            **self._common(),
            reservation_query_repo=self.store,
            reservation_command_repo=self.store,
            bookable_query_repo=self.store,
            reservation_policy=self.policy,
        )

    @property
    def set_capacity(self) -> SetCategoryCapacityUseCase:
        return SetCategoryCapacityUseCase(
            **self._common(), bookable_query_repo=self.store, bookable_command_repo=self.store
        )

    @property
    def delete_category(self) -> DeleteCategoryUseCase:
        return DeleteCategoryUseCase(
            **self._common(), bookable_query_repo=self.store, bookable_command_repo=self.store
        )

    @property
    def delete_event(self) -> DeleteEventUseCase:
        return DeleteEventUseCase(
            **self._common(), bookable_query_repo=self.store, bookable_command_repo=self.store
        )

    @property
    def deactivate_event(self) -> DeactivateEventUseCase:
        return DeactivateEventUseCase(
            **self._common(), bookable_query_repo=self.store, bookable_command_repo=self.store
        )

    @property
    def get_reservation(self) -> GetReservationUseCase:
        return GetReservationUseCase(**self._common(), reservation_query_repo=self.store)

    @property
    def list_mine(self) -> ListMyReservationsUseCase:
        return ListMyReservationsUseCase(
            principal_resolver=self.resolver, reservation_query_repo=self.store
        )

    @property
    def list_event(self) -> ListEventReservationsUseCase:
        return ListEventReservationsUseCase(
            **self._common(), bookable_query_repo=self.store, reservation_query_repo=self.store
        )

    @property
    def list_category(self) -> ListCategoryReservationsUseCase:
        return ListCategoryReservationsUseCase(
            **self._common(), bookable_query_repo=self.store, reservation_query_repo=self.store
        )

    @property
    def availability(self) -> GetCategoryAvailabilityUseCase:
        return GetCategoryAvailabilityUseCase(**self._common(), bookable_query_repo=self.store)


@pytest.fixture
def use_cases(store: InMemoryReservationStore, policy: ReservationPolicy) -> UseCases:
    return UseCases(store=store, policy=policy)
