from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Type, TypeVar

from fastapi import Depends, Header, Request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from app.auth.token import Claim, TokenError, TokenService, token_service
from app.core.errors import Unauthenticated, ValidationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

BodyT = TypeVar("BodyT", bound=BaseModel)


def get_token_service() -> TokenService:
    return token_service


def _strip_bearer(authorization: str) -> str:
    # Exact, case-sensitive prefix; anything else is handed over as-is and fails validation
    return authorization.removeprefix(BEARER_PREFIX)


def get_current_claim(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Claim:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.
    Rejects with 401 before the route runs when the header is missing or the token is bad.
    """
    if not authorization:
        raise Unauthenticated("Authentication required")

    try:
        return tokens.validate(_strip_bearer(authorization))
    except TokenError as e:
        logger.info("Rejected token: %s", e.__class__.__name__)
        raise Unauthenticated("Invalid token")


def get_optional_claim(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Claim]:
    """Same as get_current_claim, but anonymous (None) instead of 401."""
    if not authorization:
        return None
    try:
        return tokens.validate(_strip_bearer(authorization))
    except TokenError:
        return None


def authenticated_body(model: Type[BodyT]) -> Callable[..., Awaitable[BodyT]]:
    """
    Body dependency for protected routes.
    FastAPI parses declared bodies before any dependency runs, so the JSON is
    read here instead, after the caller has been authenticated.
    """

    async def dependency(request: Request, claim: Claim = Depends(get_current_claim)) -> BodyT:
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Invalid request body")
        try:
            return model.model_validate(data)
        except SchemaValidationError:
            raise ValidationError("Invalid request body")

    return dependency
