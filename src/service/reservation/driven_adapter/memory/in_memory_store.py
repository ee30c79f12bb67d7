"""
In-process store implementing every repository port

Used with STORE_BACKEND=memory for local runs and tests. Each category owns a
`threading.Lock`; admission, capacity changes and deletions hold it across
count-check-and-write with no await inside the critical section, so the
store is safe both for many tasks on one event loop and for many threads.
"""

from collections import defaultdict
from contextlib import ExitStack
from datetime import datetime, timezone
import itertools
import threading
from typing import Dict, Iterator, List, Optional

import attrs

from src.platform.exception.exceptions import (
    DomainError,
    DuplicateReservationError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_bookable_command_repo import IBookableCommandRepo
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.app.interface.i_principal_query_repo import IPrincipalQueryRepo
from src.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.domain.admission_rules import (
    OwnerOccupancy,
    check_admission,
    check_capacity_change,
    check_removable,
)
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef, EventRef
from src.service.reservation.domain.value_object.principal_snapshot import PrincipalSnapshot
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy
from src.service.reservation.domain.value_object.reservation_ref import ReservationRef


@attrs.define
class _PrincipalRow:
    id: int
    email: str
    name: str
    role: str
    is_enabled: bool


@attrs.define
class _ClubRow:
    id: int
    name: str
    is_active: bool


@attrs.define
class _AffiliationRow:
    id: int
    principal_id: int
    club_id: int
    joined_at: datetime


@attrs.define
class _EventRow:
    id: int
    club_id: int
    name: str
    start_at: datetime
    end_at: datetime
    is_active: bool = True
    deactivated_at: Optional[datetime] = None


@attrs.define
class _CategoryRow:
    id: int
    event_id: int
    name: str
    capacity: int


class InMemoryReservationStore(
    IPrincipalQueryRepo,
    IBookableQueryRepo,
    IBookableCommandRepo,
    IReservationCommandRepo,
    IReservationQueryRepo,
):
    def __init__(self) -> None:
        # Guards the dicts themselves; never held while waiting on a category lock
        self._registry_lock = threading.RLock()
        # One lock per existing category; created with the category, dropped with it
        self._category_locks: Dict[int, threading.Lock] = {}
        self._ids = defaultdict(lambda: itertools.count(1))

        self._principals: Dict[int, _PrincipalRow] = {}
        self._clubs: Dict[int, _ClubRow] = {}
        self._affiliations: Dict[int, _AffiliationRow] = {}
        self._events: Dict[int, _EventRow] = {}
        self._categories: Dict[int, _CategoryRow] = {}
        self._reservations: Dict[int, Reservation] = {}
        self._token_index: Dict[str, int] = {}

    def _next_id(self, table: str) -> int:
        with self._registry_lock:
            return next(self._ids[table])

    def _category_lock(
        self, category_id: int, *, missing: str = 'Category not found'
    ) -> threading.Lock:
        with self._registry_lock:
            lock = self._category_locks.get(category_id)
            if lock is None:
                raise NotFoundError(missing)
            return lock

    # ---------------------------------------------------------------------
    # Seeding (stands in for the user/club/event management services)
    # ---------------------------------------------------------------------

    def add_principal(
        self,
        *,
        email: str,
        role: str = 'member',
        is_enabled: bool = True,
        name: str = '',
    ) -> int:
        with self._registry_lock:
            pid = self._next_id('principal')
            self._principals[pid] = _PrincipalRow(
                id=pid, email=email, name=name or email, role=role, is_enabled=is_enabled
            )
            return pid

    def set_principal_enabled(self, principal_id: int, is_enabled: bool) -> None:
        with self._registry_lock:
            self._principals[principal_id].is_enabled = is_enabled

    def set_principal_role(self, principal_id: int, role: str) -> None:
        with self._registry_lock:
            self._principals[principal_id].role = role

    def add_club(self, *, name: str, is_active: bool = True) -> int:
        with self._registry_lock:
            club_id = self._next_id('club')
            self._clubs[club_id] = _ClubRow(id=club_id, name=name, is_active=is_active)
            return club_id

    def set_club_active(self, club_id: int, is_active: bool) -> None:
        with self._registry_lock:
            self._clubs[club_id].is_active = is_active

    def add_affiliation(self, *, principal_id: int, club_id: int) -> int:
        with self._registry_lock:
            for row in self._affiliations.values():
                if row.principal_id == principal_id and row.club_id == club_id:
                    return row.id
            affiliation_id = self._next_id('affiliation')
            self._affiliations[affiliation_id] = _AffiliationRow(
                id=affiliation_id,
                principal_id=principal_id,
                club_id=club_id,
                joined_at=datetime.now(timezone.utc),
            )
            return affiliation_id

    def remove_affiliation(self, *, principal_id: int, club_id: int) -> None:
        with self._registry_lock:
            self._affiliations = {
                k: v
                for k, v in self._affiliations.items()
                if not (v.principal_id == principal_id and v.club_id == club_id)
            }

    def add_event(
        self,
        *,
        club_id: int,
        name: str,
        start_at: datetime,
        end_at: datetime,
        is_active: bool = True,
    ) -> int:
        with self._registry_lock:
            event_id = self._next_id('event')
            self._events[event_id] = _EventRow(
                id=event_id,
                club_id=club_id,
                name=name,
                start_at=start_at,
                end_at=end_at,
                is_active=is_active,
            )
            return event_id

    def add_category(self, *, event_id: int, name: str, capacity: int) -> int:
        with self._registry_lock:
            category_id = self._next_id('category')
            self._categories[category_id] = _CategoryRow(
                id=category_id, event_id=event_id, name=name, capacity=capacity
            )
            self._category_locks[category_id] = threading.Lock()
            return category_id

    # ---------------------------------------------------------------------
    # Internal reads (caller holds the registry lock or a category lock)
    # ---------------------------------------------------------------------

    def _confirmed(self) -> Iterator[Reservation]:
        return (r for r in list(self._reservations.values()) if r.is_confirmed)

    def _confirmed_in_category(self, category_id: int) -> int:
        return sum(1 for r in self._confirmed() if r.category_id == category_id)

    def _build_category_ref(self, category_id: int) -> Optional[CategoryRef]:
        with self._registry_lock:
            category = self._categories.get(category_id)
            if category is None:
                return None
            event = self._events.get(category.event_id)
            club = self._clubs.get(event.club_id) if event else None
            if event is None or club is None:
                return None
            return CategoryRef(
                id=category.id,
                event_id=category.event_id,
                name=category.name,
                capacity=category.capacity,
                confirmed_count=self._confirmed_in_category(category.id),
                organizer_club_id=event.club_id,
                event_active=event.is_active,
                organizer_active=club.is_active,
                event_start_at=event.start_at,
                event_end_at=event.end_at,
            )

    def _build_reservation_ref(self, reservation: Reservation) -> ReservationRef:
        event = self._events.get(reservation.event_id)
        return ReservationRef(
            id=reservation.id or 0,
            owner_id=reservation.principal_id,
            event_id=reservation.event_id,
            category_id=reservation.category_id,
            organizer_club_id=event.club_id if event else None,
            status=reservation.status,
            token=reservation.token,
        )

    # ---------------------------------------------------------------------
    # IPrincipalQueryRepo
    # ---------------------------------------------------------------------

    async def get_principal_snapshot(self, *, principal_id: int) -> Optional[PrincipalSnapshot]:
        with self._registry_lock:
            row = self._principals.get(principal_id)
            if row is None:
                return None
            affiliations = sorted(
                (a for a in self._affiliations.values() if a.principal_id == principal_id),
                key=lambda a: a.id,
            )
            return PrincipalSnapshot(
                id=row.id,
                role=row.role,
                is_enabled=row.is_enabled,
                first_affiliation_club_id=affiliations[0].club_id if affiliations else None,
                email=row.email,
                name=row.name,
            )

    async def get_role_in_club(self, *, principal_id: int, club_id: int) -> Optional[str]:
        with self._registry_lock:
            row = self._principals.get(principal_id)
            if row is None:
                return None
            affiliated = any(
                a.principal_id == principal_id and a.club_id == club_id
                for a in self._affiliations.values()
            )
            return row.role if affiliated else None

    # ---------------------------------------------------------------------
    # IBookableQueryRepo
    # ---------------------------------------------------------------------

    async def get_category_ref(self, *, category_id: int) -> Optional[CategoryRef]:
        return self._build_category_ref(category_id)

    async def get_event_ref(self, *, event_id: int) -> Optional[EventRef]:
        with self._registry_lock:
            event = self._events.get(event_id)
            club = self._clubs.get(event.club_id) if event else None
            if event is None or club is None:
                return None
            return EventRef(
                id=event.id,
                organizer_club_id=event.club_id,
                name=event.name,
                start_at=event.start_at,
                end_at=event.end_at,
                is_active=event.is_active,
                organizer_active=club.is_active,
                deactivated_at=event.deactivated_at,
            )

    # ---------------------------------------------------------------------
    # IBookableCommandRepo
    # ---------------------------------------------------------------------

    @Logger.io
    async def set_category_capacity(self, *, category_id: int, new_capacity: int) -> CategoryRef:
        with self._category_lock(category_id):
            category = self._build_category_ref(category_id)
            if category is None:
                raise NotFoundError('Category not found')
            check_capacity_change(category=category, new_capacity=new_capacity)
            with self._registry_lock:
                self._categories[category_id].capacity = new_capacity
            return attrs.evolve(category, capacity=new_capacity)

    @Logger.io
    async def delete_category(self, *, category_id: int) -> None:
        with self._category_lock(category_id):
            with self._registry_lock:
                if category_id not in self._categories:
                    raise NotFoundError('Category not found')
                check_removable(
                    confirmed_count=self._confirmed_in_category(category_id), resource='category'
                )
                del self._categories[category_id]
                self._category_locks.pop(category_id, None)

    @Logger.io
    async def delete_event(self, *, event_id: int) -> None:
        with self._registry_lock:
            if event_id not in self._events:
                raise NotFoundError('Event not found')
            category_ids = sorted(c.id for c in self._categories.values() if c.event_id == event_id)
            locks = [self._category_locks[category_id] for category_id in category_ids]

        # Fixed id order keeps concurrent multi-category locks deadlock free
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            with self._registry_lock:
                confirmed = sum(self._confirmed_in_category(cid) for cid in category_ids)
                check_removable(confirmed_count=confirmed, resource='event')
                for category_id in category_ids:
                    self._categories.pop(category_id, None)
                    self._category_locks.pop(category_id, None)
                self._events.pop(event_id, None)

    @Logger.io
    async def deactivate_event(self, *, event_id: int, deactivated_at: datetime) -> None:
        with self._registry_lock:
            event = self._events.get(event_id)
            if event is None:
                raise NotFoundError('Event not found')
            if event.is_active:
                event.is_active = False
                event.deactivated_at = deactivated_at

    # ---------------------------------------------------------------------
    # IReservationCommandRepo
    # ---------------------------------------------------------------------

    @Logger.io
    async def admit(
        self, *, reservation: Reservation, policy: ReservationPolicy, now: datetime
    ) -> Reservation:
        with self._category_lock(
            reservation.category_id, missing='Category not found for this event'
        ):
            category = self._build_category_ref(reservation.category_id)
            if category is None or category.event_id != reservation.event_id:
                raise NotFoundError('Category not found for this event')

            owner = OwnerOccupancy()
            if policy.needs_owner_counts:
                with self._registry_lock:
                    mine = [
                        r
                        for r in self._confirmed()
                        if r.principal_id == reservation.principal_id
                        and r.event_id == reservation.event_id
                    ]
                owner = OwnerOccupancy(
                    in_category=sum(1 for r in mine if r.category_id == reservation.category_id),
                    in_event=len(mine),
                )
            check_admission(category=category, owner=owner, policy=policy, now=now)

            with self._registry_lock:
                if reservation.token in self._token_index:
                    raise DuplicateReservationError('Reservation already exists')
                stored = attrs.evolve(reservation, id=self._next_id('reservation'))
                self._reservations[stored.id] = stored  # type: ignore[index]
                self._token_index[stored.token] = stored.id  # type: ignore[index]
                return stored

    @Logger.io
    async def transition(
        self, *, reservation_id: int, target: ReservationStatus
    ) -> Reservation:
        with self._registry_lock:
            current = self._reservations.get(reservation_id)
            if current is None:
                raise NotFoundError('Reservation not found')
            if target is ReservationStatus.CANCELLED:
                updated = current.cancel()
            elif target is ReservationStatus.USED:
                updated = current.mark_used()
            else:
                raise DomainError(f'Cannot move a reservation to {target}')
            self._reservations[reservation_id] = updated
            return updated

    # ---------------------------------------------------------------------
    # IReservationQueryRepo
    # ---------------------------------------------------------------------

    async def get_ref_by_id(self, *, reservation_id: int) -> Optional[ReservationRef]:
        with self._registry_lock:
            reservation = self._reservations.get(reservation_id)
            return self._build_reservation_ref(reservation) if reservation else None

    async def get_ref_by_token(self, *, token: str) -> Optional[ReservationRef]:
        with self._registry_lock:
            reservation_id = self._token_index.get(token)
            if reservation_id is None:
                return None
            return self._build_reservation_ref(self._reservations[reservation_id])

    async def get_by_id(self, *, reservation_id: int) -> Optional[Reservation]:
        with self._registry_lock:
            return self._reservations.get(reservation_id)

    def _select(self, predicate) -> List[Reservation]:
        with self._registry_lock:
            return sorted(
                (r for r in self._reservations.values() if predicate(r)),
                key=lambda r: r.id or 0,
            )

    async def list_by_owner(
        self, *, principal_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        return self._select(
            lambda r: r.principal_id == principal_id and (status is None or r.status is status)
        )

    async def list_by_event(
        self, *, event_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        return self._select(
            lambda r: r.event_id == event_id and (status is None or r.status is status)
        )

    async def list_by_category(self, *, category_id: int) -> List[Reservation]:
        return self._select(lambda r: r.category_id == category_id)
