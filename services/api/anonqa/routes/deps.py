"""Shared route dependencies.

The store is built once per process (see main.lifespan) and handed to
handlers through FastAPI dependency injection, never via module globals.
"""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from anonqa.services.board import DEFAULT_CLIENT_ID
from anonqa.services.errors import BoardError
from anonqa.settings import Settings
from anonqa.stores.base import QuestionStore
from anonqa.stores.redis import invalidate_listing_cache

logger = logging.getLogger("uvicorn.error")


class ForbiddenError(BoardError):
    status_code = 403


def get_store(request: Request) -> QuestionStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_id(x_client_id: Annotated[str | None, Header()] = None) -> str:
    """Anonymous vote key sent by the client; not an identity."""
    client_id = (x_client_id or "").strip()
    return client_id[:100] if client_id else DEFAULT_CLIENT_ID


async def require_admin(
    settings: Annotated[Settings, Depends(get_app_settings)],
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    if not settings.admin_token:
        raise ForbiddenError("Admin endpoints are disabled")
    if not x_admin_token or not hmac.compare_digest(x_admin_token, settings.admin_token):
        raise ForbiddenError("Forbidden")


StoreDep = Annotated[QuestionStore, Depends(get_store)]
ClientIdDep = Annotated[str, Depends(get_client_id)]


async def invalidate_listing() -> None:
    """Drop cached listings after a write. Redis is optional."""
    try:
        await invalidate_listing_cache()
    except RuntimeError:
        return
    except Exception as e:
        logger.warning(f"Listing cache invalidation failed: {e}")
