"""
Unit tests for PrincipalResolver

Test Focus:
1. Anonymous callers are rejected before the store is touched
2. Missing, disabled and unknown-role principals map to their error codes
3. Only MANAGER/ADMIN get a managed club (their first affiliation)
4. Nothing is cached: a role change is visible on the next call
"""

from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    AccessDeniedError,
    AccountDisabledError,
    IdentityNotFoundError,
    UnauthenticatedError,
)
from src.service.reservation.app.service.principal_resolver import PrincipalResolver
from src.service.reservation.domain.enum import PrincipalRole
from src.service.reservation.domain.value_object.principal_snapshot import PrincipalSnapshot


def _snapshot(**overrides) -> PrincipalSnapshot:
    values = {
        'id': 7,
        'role': 'member',
        'is_enabled': True,
        'first_affiliation_club_id': 3,
        'email': 'member@chess.test',
        'name': 'Member',
    }
    values.update(overrides)
    return PrincipalSnapshot(**values)


@pytest.mark.unit
class TestPrincipalResolver:
    @pytest.fixture
    def repo(self):
        repo = AsyncMock()
        repo.get_principal_snapshot.return_value = _snapshot()
        return repo

    @pytest.fixture
    def resolver(self, repo):
        return PrincipalResolver(principal_query_repo=repo)

    @pytest.mark.asyncio
    async def test_anonymous_is_unauthenticated(self, resolver, repo):
        with pytest.raises(UnauthenticatedError):
            await resolver.resolve(None)
        repo.get_principal_snapshot.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_identity(self, resolver, repo):
        repo.get_principal_snapshot.return_value = None

        with pytest.raises(IdentityNotFoundError) as exc_info:
            await resolver.resolve(99)
        assert exc_info.value.code == 'identity_not_found'

    @pytest.mark.asyncio
    async def test_disabled_account_is_denied(self, resolver, repo):
        repo.get_principal_snapshot.return_value = _snapshot(is_enabled=False)

        with pytest.raises(AccountDisabledError) as exc_info:
            await resolver.resolve(7)
        assert exc_info.value.kind == 'access_denied'
        assert exc_info.value.code == 'account_disabled'

    @pytest.mark.asyncio
    async def test_unrecognised_role_is_denied(self, resolver, repo):
        repo.get_principal_snapshot.return_value = _snapshot(role='superuser')

        with pytest.raises(AccessDeniedError):
            await resolver.resolve(7)

    @pytest.mark.asyncio
    async def test_member_has_no_managed_club(self, resolver):
        principal = await resolver.resolve(7)

        assert principal.role is PrincipalRole.MEMBER
        assert principal.managed_club_id is None
        assert not principal.manages(3)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('role', ['manager', 'ADMIN', ' Manager '])
    async def test_staff_manage_their_first_affiliation(self, resolver, repo, role):
        repo.get_principal_snapshot.return_value = _snapshot(role=role)

        principal = await resolver.resolve(7)

        assert principal.is_club_staff
        assert principal.managed_club_id == 3
        assert principal.manages(3)
        assert not principal.manages(4)

    @pytest.mark.asyncio
    async def test_staff_without_affiliation_manage_nothing(self, resolver, repo):
        repo.get_principal_snapshot.return_value = _snapshot(
            role='manager', first_affiliation_club_id=None
        )

        principal = await resolver.resolve(7)

        assert principal.managed_club_id is None

    @pytest.mark.asyncio
    async def test_resolution_is_not_cached(self, resolver, repo):
        first = await resolver.resolve(7)
        repo.get_principal_snapshot.return_value = _snapshot(role='manager')
        second = await resolver.resolve(7)

        assert first.role is PrincipalRole.MEMBER
        assert second.role is PrincipalRole.MANAGER
        assert repo.get_principal_snapshot.await_count == 2
