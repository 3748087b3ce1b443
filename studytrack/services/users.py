"""
User account use cases: registration, login and profile lookup.

Registration and login both end with a bearer token issued by
`TokenProvider`, so a freshly registered client can call protected routes
straight away.
"""

import logging
import uuid

from studytrack.dao.base import UserRepository
from studytrack.errors import NotFoundError, UnauthorizedError, ValidationError
from studytrack.services.auth import Clock, PasswordHasher, TokenProvider, utc_now
from studytrack.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    def __init__(
        self,
        repo: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenProvider,
        clock: Clock = utc_now,
    ) -> None:
        self._repo = repo
        self._hasher = hasher
        self._tokens = tokens
        self._clock = clock

    def execute(self, username: str, email: str, password: str) -> dict:
        """
        Register a new account and return it together with a bearer token.

        Raises `ValidationError` when the email or username is already taken.
        """
        email = email.lower()
        if self._repo.find_by_email(email) is not None:
            raise ValidationError("Email already registered.")
        if self._repo.find_by_username(username) is not None:
            raise ValidationError("Username already taken.")

        record = {
            "id": str(uuid.uuid4()),
            "username": username,
            "email": email,
            "password_hash": self._hasher.hash(password),
            "created_at": self._clock().isoformat(),
        }
        self._repo.save(record)
        logger.info("User '%s' registered.", record["id"])
        return {**record, "token": self._tokens.issue(record["id"])}


class LoginUseCase:
    def __init__(self, repo: UserRepository, hasher: PasswordHasher, tokens: TokenProvider) -> None:
        self._repo = repo
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, email: str, password: str) -> dict:
        """Check the credentials and return ``{"id", "token", "expires_in"}``."""
        user = self._repo.find_by_email(email.lower())
        if user is None or not self._hasher.verify(password, user.get("password_hash", "")):
            # One message for unknown email and wrong password
            raise UnauthorizedError("Incorrect email or password")
        logger.info("User '%s' logged in.", user["id"])
        return {
            "id": user["id"],
            "token": self._tokens.issue(user["id"]),
            "expires_in": self._tokens.expires_in,
        }


class GetUserUseCase:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    def execute(self, user_id: str, requested_by: str) -> dict:
        ensure_owner(user_id, requested_by)
        user = self._repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found.")
        return user
