from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.reservation.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


# auto_error=False: a missing header must surface as our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_principal_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> int:
    """Identity id from `Authorization: Bearer <jwt>` (stateless, no DB query)."""
    return jwt_auth.get_principal_id_from_jwt(credentials.credentials if credentials else None)
