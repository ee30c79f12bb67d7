"""
SQLAlchemy repositories against a throwaway sqlite+aiosqlite database.

SQLite has no row locks, so these tests cover mapping, guards and
conditional updates; lock behaviour is exercised on PostgreSQL only.
"""

from datetime import datetime, timedelta, timezone

import attrs
import pytest

from src.platform.database.orm_db_setting import Database
from src.service.reservation.driven_adapter.model import (
    AffiliationModel,
    CategoryModel,
    ClubModel,
    EventModel,
    PrincipalModel,
)
from src.service.reservation.driven_adapter.repo.bookable_command_repo_impl import (
    BookableCommandRepoImpl,
)
from src.service.reservation.driven_adapter.repo.bookable_query_repo_impl import (
    BookableQueryRepoImpl,
)
from src.service.reservation.driven_adapter.repo.principal_query_repo_impl import (
    PrincipalQueryRepoImpl,
)
from src.service.reservation.driven_adapter.repo.reservation_command_repo_impl import (
    ReservationCommandRepoImpl,
)
from src.service.reservation.driven_adapter.repo.reservation_query_repo_impl import (
    ReservationQueryRepoImpl,
)


@attrs.define
class SqlSeed:
    club_id: int
    other_club_id: int
    manager_id: int
    member_id: int
    other_member_id: int
    event_id: int
    category_id: int
    empty_category_id: int


@pytest.fixture
async def database(tmp_path):
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "reservation.db"}')
    await db.create_db_and_tables()
    yield db
    await db.drop_tables()
    await db.dispose()


@pytest.fixture
async def seed(database) -> SqlSeed:
    now = datetime.now(timezone.utc)
    async with database.session() as session, session.begin():
        club = ClubModel(name='Chess Club')
        other_club = ClubModel(name='Rowing Club')
        manager = PrincipalModel(email='manager@chess.test', name='Manager', role='manager')
        member = PrincipalModel(email='member@chess.test', name='Member', role='member')
        other_member = PrincipalModel(email='rower@rowing.test', name='Rower', role='member')
        session.add_all([club, other_club, manager, member, other_member])
        await session.flush()

        session.add_all(
            [
                AffiliationModel(principal_id=manager.id, club_id=club.id),
                AffiliationModel(principal_id=manager.id, club_id=other_club.id),
                AffiliationModel(principal_id=member.id, club_id=club.id),
                AffiliationModel(principal_id=other_member.id, club_id=other_club.id),
            ]
        )
        event = EventModel(
            club_id=club.id,
            name='Spring Open',
            start_at=now + timedelta(days=1),
            end_at=now + timedelta(days=1, hours=4),
        )
        session.add(event)
        await session.flush()

        category = CategoryModel(event_id=event.id, name='Floor', capacity=2)
        empty = CategoryModel(event_id=event.id, name='Balcony', capacity=0)
        session.add_all([category, empty])
        await session.flush()

        return SqlSeed(
            club_id=club.id,
            other_club_id=other_club.id,
            manager_id=manager.id,
            member_id=member.id,
            other_member_id=other_member.id,
            event_id=event.id,
            category_id=category.id,
            empty_category_id=empty.id,
        )


@attrs.define
class SqlRepos:
    principal_query: PrincipalQueryRepoImpl
    bookable_query: BookableQueryRepoImpl
    bookable_command: BookableCommandRepoImpl
    reservation_command: ReservationCommandRepoImpl
    reservation_query: ReservationQueryRepoImpl


@pytest.fixture
def repos(database) -> SqlRepos:
    return SqlRepos(
        principal_query=PrincipalQueryRepoImpl(session_factory=database.session),
        bookable_query=BookableQueryRepoImpl(session_factory=database.session),
        bookable_command=BookableCommandRepoImpl(session_factory=database.session),
        reservation_command=ReservationCommandRepoImpl(session_factory=database.session),
        reservation_query=ReservationQueryRepoImpl(session_factory=database.session),
    )
