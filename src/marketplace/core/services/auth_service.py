"""Password hashing and access token issuance/validation."""

import time

import bcrypt
from authlib.jose import JoseError, JsonWebToken
from authlib.jose.errors import ExpiredTokenError
from loguru import logger

from src.marketplace.core.errors import (
    InternalServiceError,
    InvalidInputError,
    UnauthorizedError,
)
from src.marketplace.core.models.claims import TokenClaims
from src.marketplace.entities.user.entity import User
from src.marketplace.runtime.config.config_data import AuthConfig

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class AuthService:
    """Credential service: bcrypt password hashes and HMAC-signed JWTs."""

    def __init__(self, config: AuthConfig):
        self._secret = config.jwt_secret
        self._algorithm = config.algorithm
        self._token_lifetime = config.token_expiration * 3600
        self._password_cost = config.password_cost
        self._jwt = JsonWebToken([config.algorithm])

    def hash_password(self, password: str) -> str:
        """Return the bcrypt hash of ``password`` using the configured cost."""
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise InvalidInputError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._password_cost))
        except ValueError as e:
            logger.error("Password hashing failed: {}", e)
            raise InternalServiceError("failed to hash password") from e
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Constant-time check of ``password`` against a stored hash.

        Mismatches and malformed hashes return False instead of raising.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False

    def issue_token(self, user: User, *, now: int | None = None) -> str:
        """Sign an access token for ``user``.

        Claims: ``user_id``, ``role``, ``sub`` (email), ``iat`` and ``exp``.
        """
        if not self._secret:
            raise InternalServiceError("JWT signing secret not configured")
        if user.id is None:
            raise InternalServiceError("cannot issue a token for an unsaved user")

        issued_at = int(time.time()) if now is None else now
        payload = {
            "user_id": user.id,
            "role": user.role.value,
            "sub": user.email,
            "iat": issued_at,
            "exp": issued_at + self._token_lifetime,
        }
        header = {"alg": self._algorithm, "typ": "JWT"}

        try:
            token = self._jwt.encode(header, payload, self._secret)
        except JoseError as e:
            raise InternalServiceError(f"JWT encoding failed: {e}") from e
        return token.decode() if isinstance(token, bytes) else token

    def validate_token(self, token: str, *, now: int | None = None) -> TokenClaims:
        """Verify signature and expiry and return the token's claims."""
        if not self._secret:
            raise InternalServiceError("JWT signing secret not configured")

        try:
            claims = self._jwt.decode(
                token,
                self._secret,
                claims_options={
                    "exp": {"essential": True},
                    "sub": {"essential": True},
                },
            )
            claims.validate(now=now)
        except ExpiredTokenError as e:
            raise UnauthorizedError("token has expired") from e
        except (JoseError, ValueError) as e:
            logger.debug("Rejected access token: {}", e)
            raise UnauthorizedError("invalid token") from e

        try:
            return TokenClaims.from_jwt_payload(dict(claims))
        except (KeyError, ValueError) as e:
            raise UnauthorizedError("invalid token claims") from e
