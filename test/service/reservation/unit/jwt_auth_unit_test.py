from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import UnauthenticatedError
from src.service.reservation.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@pytest.mark.unit
class TestJwtAuth:
    @pytest.fixture
    def settings(self):
        return Settings(SECRET_KEY='unit-test-secret-key-with-enough-bytes')

    @pytest.fixture
    def jwt_auth(self, settings):
        return JwtAuth(settings=settings)

    def test_round_trip_subject(self, jwt_auth):
        token = jwt_auth.create_access_token(principal_id=42)

        assert jwt_auth.get_principal_id_from_jwt(token) == 42

    def test_token_carries_identity_only(self, jwt_auth):
        payload = jwt_auth.decode_jwt_token(jwt_auth.create_access_token(principal_id=42))

        assert set(payload) == {'sub', 'iat', 'exp'}

    @pytest.mark.parametrize('token', [None, ''])
    def test_missing_token(self, jwt_auth, token):
        with pytest.raises(UnauthenticatedError):
            jwt_auth.get_principal_id_from_jwt(token)

    def test_expired_token(self, jwt_auth, settings):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {'sub': '42', 'iat': past, 'exp': past + timedelta(minutes=1)},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(UnauthenticatedError, match='expired'):
            jwt_auth.get_principal_id_from_jwt(token)

    def test_foreign_signature(self, jwt_auth):
        token = jwt.encode({'sub': '42'}, 'another-secret-key-of-enough-length', algorithm='HS256')

        with pytest.raises(UnauthenticatedError, match='Invalid'):
            jwt_auth.get_principal_id_from_jwt(token)

    @pytest.mark.parametrize('claims', [{}, {'sub': 'not-a-number'}])
    def test_bad_subject(self, jwt_auth, settings, claims):
        token = jwt.encode(
            claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
        )

        with pytest.raises(UnauthenticatedError):
            jwt_auth.get_principal_id_from_jwt(token)
