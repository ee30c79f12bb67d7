"""
Bearer credential handling

The token only proves who the caller is (`sub` = principal id). Role and
affiliations are never taken from the token; they are resolved from the
store on every request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.exception.exceptions import UnauthenticatedError


class JwtAuth:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or default_settings
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def create_access_token(self, *, principal_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(principal_id),
            'iat': now,
            'exp': now + self.token_expire,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError('Token expired')
        except jwt.PyJWTError:
            raise UnauthenticatedError('Invalid token')

    def get_principal_id_from_jwt(self, token: Optional[str]) -> int:
        if not token:
            raise UnauthenticatedError()

        payload = self.decode_jwt_token(token)
        try:
            return int(payload['sub'])
        except (KeyError, TypeError, ValueError):
            raise UnauthenticatedError('Invalid token')
