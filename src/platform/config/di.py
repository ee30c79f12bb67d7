"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.reservation.app.service.authorization_evaluator import AuthorizationEvaluator
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy
from src.service.reservation.driven_adapter.memory.in_memory_store import (
    InMemoryReservationStore,
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
from src.service.reservation.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager, event-loop aware)
    database = providers.Singleton(Database)

    # In-process store; serves every port when STORE_BACKEND=memory
    in_memory_store = providers.Singleton(InMemoryReservationStore)

    # Repositories (stateless - use session_factory per-request)
    principal_query_repo = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=providers.Singleton(
            PrincipalQueryRepoImpl, session_factory=database.provided.session
        ),
        memory=in_memory_store,
    )
    bookable_query_repo = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=providers.Singleton(
            BookableQueryRepoImpl, session_factory=database.provided.session
        ),
        memory=in_memory_store,
    )
    bookable_command_repo = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=providers.Singleton(
            BookableCommandRepoImpl, session_factory=database.provided.session
        ),
        memory=in_memory_store,
    )
    reservation_command_repo = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=providers.Singleton(
            ReservationCommandRepoImpl, session_factory=database.provided.session
        ),
        memory=in_memory_store,
    )
    reservation_query_repo = providers.Selector(
        config_service.provided.STORE_BACKEND,
        postgres=providers.Singleton(
            ReservationQueryRepoImpl, session_factory=database.provided.session
        ),
        memory=in_memory_store,
    )

    # Reservation policy (duplicate / per-event limit / check-in window)
    reservation_policy = providers.Singleton(ReservationPolicy.from_settings, config_service)

    # Principal resolution and authorization (per-request reads, no caching)
    principal_resolver = providers.Singleton(
        PrincipalResolver, principal_query_repo=principal_query_repo
    )
    authorization_evaluator = providers.Singleton(
        AuthorizationEvaluator, principal_query_repo=principal_query_repo
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth, settings=config_service)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
