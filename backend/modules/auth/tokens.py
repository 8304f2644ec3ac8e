"""
Token handling for both auth modes.

- SessionTokenIssuer mints and decodes the HS256 session tokens used in
  development mode (cookie-delivered, backed by a sessions row).
- SupabaseIdentityVerifier validates identity tokens issued by Supabase
  Auth; production mode re-verifies one on every request.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from shared.models import User

from .exceptions import ExpiredTokenError, InvalidTokenError, MissingTokenError
from .models import IdentityClaims, SessionClaims


SESSION_TOKEN_ALGORITHM = "HS256"
IDENTITY_TOKEN_AUDIENCE = "authenticated"


class SessionTokenIssuer:
    """Mints self-contained session tokens carrying id, email and role."""

    def __init__(self, secret: str, ttl_days: int = 7):
        if not secret:
            raise RuntimeError(
                "Session token secret missing. Set JWT_SECRET environment variable."
            )
        self._secret = secret
        self._ttl = timedelta(days=ttl_days)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def mint(self, user: User) -> tuple[str, SessionClaims, datetime]:
        """
        Create a signed token for a user.

        Returns:
            Tuple of (encoded token, claims, expiry). The claims' ``jti`` is
            the key of the sessions row that keeps the token revocable.
        """
        now = datetime.now(timezone.utc)
        expires_at = now + self._ttl
        claims = SessionClaims(
            id=user.id,
            email=user.email,
            role=user.role.value,
            jti=uuid.uuid4().hex,
            iat=int(now.timestamp()),
            exp=int(expires_at.timestamp()),
        )
        token = jwt.encode(
            claims.model_dump(), self._secret, algorithm=SESSION_TOKEN_ALGORITHM
        )
        return token, claims, expires_at

    def decode(self, token: Optional[str], verify_exp: bool = True) -> SessionClaims:
        """
        Decode and validate a session token.

        ``verify_exp=False`` still checks the signature; logout uses it so an
        expired cookie can still remove its sessions row.

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token has expired
            InvalidTokenError: If signature or structure is invalid
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[SESSION_TOKEN_ALGORITHM],
                options={"verify_exp": verify_exp},
            )
            return SessionClaims(**payload)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except (jwt.InvalidTokenError, ValueError) as e:
            raise InvalidTokenError(str(e))


class SupabaseIdentityVerifier:
    """
    Verifies Supabase Auth JWTs with the project's JWT secret.

    Verification is stateless and never cached, so a revoked or expired
    token fails on the very next request.
    """

    def __init__(self, jwt_secret: str):
        self._jwt_secret = jwt_secret

    async def verify(self, token: Optional[str]) -> IdentityClaims:
        if not token:
            raise MissingTokenError()

        if not self._jwt_secret:
            raise InvalidTokenError("Server authentication not configured")

        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=["HS256"],
                audience=IDENTITY_TOKEN_AUDIENCE,
            )
            return IdentityClaims(**payload)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except (jwt.InvalidTokenError, ValueError) as e:
            raise InvalidTokenError(str(e))
