class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io

    `kind` is the stable error family exposed to callers, `code` the specific reason.
    """

    kind: str = 'error'
    code: str = 'error'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    kind = 'invalid_request'
    code = 'invalid_request'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


# ---------------------------------------------------------------------------
# Authentication / authorization
# ---------------------------------------------------------------------------


class UnauthenticatedError(CustomBaseError):
    kind = 'unauthenticated'
    code = 'unauthenticated'

    def __init__(self, message: str = 'Not authenticated') -> None:
        super().__init__(message, 401)


class AccessDeniedError(CustomBaseError):
    kind = 'access_denied'
    code = 'access_denied'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)

    @property
    def reason(self) -> str:
        return self.message


class AccountDisabledError(AccessDeniedError):
    code = 'account_disabled'


# ---------------------------------------------------------------------------
# Missing resources
# ---------------------------------------------------------------------------


class NotFoundError(CustomBaseError):
    kind = 'not_found'
    code = 'not_found'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class IdentityNotFoundError(NotFoundError):
    code = 'identity_not_found'


class TokenNotFoundError(NotFoundError):
    code = 'token_not_found'


# ---------------------------------------------------------------------------
# Business-state conflicts (terminal for the request, never retried)
# ---------------------------------------------------------------------------


class ConflictError(CustomBaseError):
    kind = 'conflict'
    code = 'conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class CategoryFullError(ConflictError):
    code = 'category_full'


class EventClosedError(ConflictError):
    code = 'event_closed'


class AlreadyTerminalError(ConflictError):
    code = 'already_terminal'


class AlreadyUsedError(AlreadyTerminalError):
    code = 'already_used'


class AlreadyCancelledError(AlreadyTerminalError):
    code = 'already_cancelled'


class CapacityBelowOccupancyError(ConflictError):
    code = 'capacity_below_occupancy'


class HasActiveReservationsError(ConflictError):
    code = 'has_active_reservations'


class DuplicateReservationError(ConflictError):
    code = 'duplicate_reservation'


class ReservationLimitReachedError(ConflictError):
    code = 'reservation_limit_reached'


class CheckInWindowClosedError(ConflictError):
    code = 'check_in_window_closed'


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


class StoreUnavailableError(CustomBaseError):
    """Transient store failure; the request is safe to retry."""

    kind = 'store_unavailable'
    code = 'store_unavailable'

    def __init__(self, message: str = 'Store unavailable') -> None:
        super().__init__(message, 503)
