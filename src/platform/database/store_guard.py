"""
Bounded store calls

Every call into the backing store runs under `bounded_store_call`, which
enforces STORE_TIMEOUT_SECONDS and turns connectivity failures into
StoreUnavailableError. Business errors raised inside the block pass through
unchanged.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import anyio
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import StoreUnavailableError
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def bounded_store_call(
    operation: str, *, timeout: Optional[float] = None
) -> AsyncGenerator[None, None]:
    limit = settings.STORE_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        with anyio.fail_after(limit):
            yield
    except TimeoutError as e:
        Logger.base.warning(f'⏱️ [STORE] {operation} exceeded {limit}s')
        raise StoreUnavailableError(f'Store timed out during {operation}') from e
    except PoolTimeoutError as e:
        Logger.base.warning(f'⏱️ [STORE] {operation} waited too long for a connection')
        raise StoreUnavailableError(f'No store connection available for {operation}') from e
    except (OperationalError, InterfaceError) as e:
        Logger.base.error(f'❌ [STORE] {operation} failed: {type(e).__name__}')
        raise StoreUnavailableError(f'Store unreachable during {operation}') from e
