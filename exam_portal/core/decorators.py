import functools
import logging
from typing import Callable

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, TimeoutError as PoolTimeoutError

from exam_portal.core.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


def translate_store_errors(func: Callable) -> Callable:
    """Turn transient backend failures into StoreUnavailable.

    Integrity errors are not transient and are left for the caller, which
    either handles them (race losers) or lets them surface as a 500.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            raise
        except (OperationalError, PoolTimeoutError) as exc:
            logger.error(f"Store unavailable in {func.__qualname__}: {exc}")
            raise StoreUnavailable() from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                logger.error(f"Store connection lost in {func.__qualname__}: {exc}")
                raise StoreUnavailable() from exc
            raise

    return wrapper
