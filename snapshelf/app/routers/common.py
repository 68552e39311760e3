from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool

from snapshelf.app.domain.errors import ItemNotFoundError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING_FIELDS = "Missing required fields"
NOT_AUTHENTICATED = "User not authenticated"


async def call_store(
    operation: str,
    func: Callable[..., T],
    *args: Any,
    not_found: Optional[str] = None,
) -> T:
    """Run a blocking repository call and turn its failures into HTTP errors."""
    try:
        return await run_in_threadpool(func, *args)
    except ItemNotFoundError as exc:
        raise HTTPException(status_code=404, detail=not_found or exc.message)
    except StoreError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        logger.exception("Unexpected error during %s", operation)
        raise HTTPException(status_code=500, detail=str(exc))
