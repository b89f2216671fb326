from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from app.core.config import settings


class TokenError(Exception):
    """Base class for every reason a presented token is rejected."""


class MalformedToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


@dataclass(frozen=True)
class Claim:
    username: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenService:
    """Issues and validates HMAC-signed identity tokens.

    Tokens carry ``{"username", "exp"}``. There is no revocation: a token is
    good until it expires.
    """

    secret: str
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=24)

    @classmethod
    def from_settings(cls, s=settings) -> "TokenService":
        return cls(
            secret=s.JWT_SECRET,
            algorithm=s.JWT_ALG,
            ttl=timedelta(minutes=s.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def issue(self, username: str, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        to_encode = {"username": username, "exp": issued + self.ttl}
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> Claim:
        # Parse first so garbage is told apart from a bad signature
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedToken(str(e)) from e

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except JWTClaimsError as e:
            # Signed by us, but a registered claim such as exp is unusable
            raise MalformedToken(str(e)) from e
        except JWTError as e:
            raise InvalidSignature(str(e)) from e

        username = payload.get("username")
        exp = payload.get("exp")
        if not isinstance(username, str) or not username or exp is None:
            raise MalformedToken("Invalid token payload")

        return Claim(username=username, expires_at=datetime.fromtimestamp(exp, tz=timezone.utc))


# Built once at startup; the secret is never re-read per request
token_service = TokenService.from_settings()
