from __future__ import annotations

import logging
from contextlib import contextmanager

from ..core.exceptions import DomainError, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_call(action: str):
    """Turn any non-domain failure of a store call into StoreError.

    The original error is logged; callers keep their previous state.
    """
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:
        logger.exception("Store call failed: %s", action)
        raise StoreError(f"Could not {action}, please try again") from exc
