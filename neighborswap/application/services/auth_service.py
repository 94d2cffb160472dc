"""Service for account registration, login and session tokens."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import bcrypt
import jwt

from ...domain.errors import (
    DuplicateAccount,
    InvalidCredentials,
    InvalidToken,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from ...domain.models import Identity, User
from ...domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt rejects longer secrets.
MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class TokenError(str, enum.Enum):
    MISSING = "missing"
    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class TokenVerification:
    """Outcome of checking a session token: an identity or an error kind."""

    identity: Optional[Identity] = None
    error: Optional[TokenError] = None

    @property
    def ok(self) -> bool:
        return self.identity is not None


class AuthService:
    """Registers users, checks credentials and issues session tokens."""

    def __init__(
        self,
        user_repository: UserRepository,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        jwt_expiration_hours: int = 24,
        bcrypt_rounds: int = 12,
    ) -> None:
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is not configured.")
        if jwt_secret == "change-me":
            logger.warning("JWT_SECRET is using the default value. Configure a real secret in production.")
        self.user_repository = user_repository
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.jwt_expiration_hours = jwt_expiration_hours
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, name: str, email: str, phone: str, password: str) -> Tuple[User, str]:
        """
        Register a new user.

        Args:
            name: Display name
            email: Login email, matched case-insensitively
            phone: Contact phone number
            password: Plain text password

        Returns:
            Tuple of (User, session token)

        Raises:
            ValidationError: If a field is empty or the password is too short or too long
            DuplicateAccount: If the email is already registered
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        phone = (phone or "").strip()
        password = password or ""

        missing: List[str] = [
            field_name
            for field_name, value in (("name", name), ("email", email), ("phone", phone), ("password", password))
            if not value
        ]
        if missing:
            raise ValidationError("All fields are required", fields=missing)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", fields=["password"]
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes", fields=["password"]
            )

        if self.user_repository.get_user_by_email(email):
            raise DuplicateAccount("An account with this email already exists")

        password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds)
        ).decode("utf-8")

        # The unique index still rejects a concurrent duplicate.
        user = self.user_repository.create_user(
            name=name, email=email, phone=phone, password_hash=password_hash
        )
        logger.info("Registered user %s", user.id)
        return user, self.create_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user with email and password.

        Unknown emails and wrong passwords fail with the same error.

        Raises:
            InvalidCredentials: If the credentials do not match an account
        """
        email = (email or "").strip().lower()
        secret = (password or "").encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            logger.info("Rejected login attempt")
            raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)
        user = self.user_repository.get_user_by_email(email) if email else None
        if user is None or not bcrypt.checkpw(secret, user.password_hash.encode("utf-8")):
            logger.info("Rejected login attempt")
            raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)
        return user, self.create_token(user)

    def get_current_user(self, token: Optional[str]) -> User:
        """
        Resolve the user a session token belongs to.

        Raises:
            Unauthenticated: If no token was supplied
            InvalidToken: If the token is malformed, forged or expired
            NotFound: If the token's user no longer exists
        """
        return self.user_for_identity(self.require_identity(token))

    def user_for_identity(self, identity: Identity) -> User:
        """Load the account behind a verified identity, or raise ``NotFound``."""
        user = self.user_repository.get_user_by_id(identity.user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def require_identity(self, token: Optional[str]) -> Identity:
        result = self.verify_token(token)
        if result.identity is not None:
            return result.identity
        if result.error is TokenError.MISSING:
            raise Unauthenticated("Access token required")
        if result.error is TokenError.EXPIRED:
            raise InvalidToken("Token has expired")
        raise InvalidToken("Invalid token")

    def create_token(self, user: User) -> str:
        """
        Create a session token for user.

        Args:
            user: User entity

        Returns:
            JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        payload = {
            "user_id": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + timedelta(hours=self.jwt_expiration_hours),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def verify_token(self, token: Optional[str]) -> TokenVerification:
        """Verify and decode a session token without raising."""
        if not token:
            return TokenVerification(error=TokenError.MISSING)
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"require": ["exp", "user_id"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenVerification(error=TokenError.EXPIRED)
        except jwt.InvalidTokenError:
            return TokenVerification(error=TokenError.INVALID)

        user_id = payload.get("user_id")
        email = payload.get("email")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
            return TokenVerification(error=TokenError.INVALID)
        return TokenVerification(identity=Identity(user_id=user_id, email=email))
