"""
Authentication service: bearer token issuance/verification + password hashing.

Flow
────
1. Client registers (POST /user) or logs in (POST /user/login).
2. The users service asks `TokenProvider.issue` for a signed JWT whose
   'sub' claim is the user id.
3. Every subsequent request must supply  Authorization: Bearer <token>.
4. The authentication middleware calls `TokenProvider.verify`, which returns
   the user id or raises one of the `TokenError` subclasses.

Tokens are stateless: verification needs only the secret and the clock,
never a database lookup.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from studytrack.config import Settings
from studytrack.errors import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Tokens ────────────────────────────────────────────────────────────────────


class TokenProvider:
    """
    Binds application semantics (subject = user id, fixed lifetime) onto
    python-jose's JWT primitives.

    Parameters
    ----------
    secret_key : str
        Key used to sign and verify tokens.  Must not be empty.
    algorithm : str
        JWS algorithm, ``HS256`` by default.
    expires : timedelta
        Lifetime added to the issue time to build the ``exp`` claim.
    clock : callable, optional
        Returns the current aware datetime.  Tests pass a fake clock to
        move time forward.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires: timedelta = timedelta(minutes=60),
        clock: Optional[Clock] = None,
    ) -> None:
        if not secret_key:
            raise ConfigurationError("A JWT secret key is required to sign tokens.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires = expires
        self._clock = clock or utc_now

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Clock] = None) -> "TokenProvider":
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expires=timedelta(minutes=settings.jwt_expire_minutes),
            clock=clock,
        )

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return int(self._expires.total_seconds())

    def issue(self, user_id: str) -> str:
        """Create a signed JWT whose 'sub' claim is *user_id*."""
        now = self._clock()
        payload = {"sub": user_id, "iat": now, "exp": now + self._expires}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Validate *token* and return the user id it was issued for.

        Raises
        ------
        MalformedTokenError
            The token is not a parseable JWT or lacks 'sub'/'exp'.
        InvalidSignatureError
            The signature does not match the configured secret.
        ExpiredTokenError
            The current time is past the 'exp' claim.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedTokenError(str(exc)) from exc

        try:
            # Expiry is checked below against the injected clock.
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as exc:
            raise MalformedTokenError(str(exc)) from exc
        except JWTError as exc:
            raise InvalidSignatureError(str(exc)) from exc

        subject = claims.get("sub")
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token has no subject.")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise MalformedTokenError("Token has no expiry.")

        if self._clock().timestamp() > expires_at:
            raise ExpiredTokenError("Token has expired.")
        return subject


# ── Passwords ─────────────────────────────────────────────────────────────────


class PasswordHasher:
    """Thin wrapper around a bcrypt passlib context."""

    def __init__(self, rounds: Optional[int] = None) -> None:
        # passlib's default cost unless *rounds* is given (tests use the minimum)
        kwargs = {"bcrypt__rounds": rounds} if rounds else {}
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", **kwargs)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        return self._context.verify(password, password_hash)
