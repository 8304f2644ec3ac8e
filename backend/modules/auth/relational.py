"""
Relational auth backend (development mode).

Credentials live in PostgreSQL: bcrypt password hashes on the users table
and one sessions row per issued session token. A token is accepted only
while its row exists and has not expired, so deleting the row revokes it.
"""

import secrets
from typing import Optional

from shared.exceptions import AuthenticationError, ValidationError
from shared.models import User

from .exceptions import (
    AccountDisabledError,
    DuplicateEmailError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    UnauthorizedError,
    UnsupportedForProviderError,
)
from .interfaces import IAuthBackend, IIdentityVerifier
from .models import (
    AuthResult,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCredentials,
    SocialLoginRequest,
    StoredUser,
)
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password
from .repository import RelationalUserRepository, UserTransaction
from .tokens import SessionTokenIssuer


class RelationalAuthBackend(IAuthBackend):
    """Password and session-row authentication against PostgreSQL."""

    def __init__(
        self,
        users: RelationalUserRepository,
        tokens: SessionTokenIssuer,
        identity: IIdentityVerifier,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self._users = users
        self._tokens = tokens
        self._identity = identity
        self._bcrypt_rounds = bcrypt_rounds

    async def login(self, request: LoginRequest) -> AuthResult:
        """
        Check email and password, then open a new session.

        Unknown email, wrong password and a disabled account all surface
        as credential errors with the same public message.
        """
        if not request.password:
            raise ValidationError("Password is required", code="PASSWORD_REQUIRED")

        stored = self._users.get_by_email(request.email)
        if stored is None:
            raise InvalidCredentialsError(request.email)

        if not stored.password_hash or not await verify_password(
            request.password, stored.password_hash
        ):
            self._users.increment_login_attempts(stored.id)
            raise InvalidCredentialsError(request.email)

        self._require_active(stored)

        stored = self._users.record_successful_login(stored.id)
        return self._start_session(stored)

    async def register(self, request: RegisterRequest) -> AuthResult:
        """
        Create a local account.

        The user row and its preferences row are written as two separate
        statements. No session is opened; the client logs in afterwards.
        """
        if not request.password:
            raise ValidationError("Password is required", code="PASSWORD_REQUIRED")

        if self._users.get_by_email(request.email) is not None:
            raise DuplicateEmailError(request.email)

        password_hash = await hash_password(request.password, self._bcrypt_rounds)
        stored = self._users.create_user(
            name=request.name,
            email=request.email,
            password_hash=password_hash,
        )
        self._users.create_default_preferences(stored.id)

        return AuthResult(user=stored.to_user(), created=True)

    async def social_login(self, request: SocialLoginRequest) -> AuthResult:
        claims = await self._identity.verify(request.token)
        if not claims.email:
            raise ValidationError("Email is required", code="EMAIL_REQUIRED")

        provider = request.provider.value
        created = False

        stored = self._users.get_by_provider(provider, claims.sub)
        if stored is not None:
            self._require_active(stored)
            stored = self._users.touch_last_login(stored.id)
        else:
            by_email = self._users.get_by_email(claims.email)
            if by_email is not None:
                self._require_active(by_email)
                stored = self._users.link_provider(by_email.id, provider, claims.sub)
            else:
                stored = self._users.create_user(
                    name=request.user.name or claims.name or "",
                    email=claims.email,
                    provider=provider,
                    provider_id=claims.sub,
                    avatar=request.user.avatar or claims.picture,
                    email_verified=claims.email_verified,
                )
                self._users.create_default_preferences(stored.id)
                created = True

        return self._start_session(stored, created=created)

    async def get_current_user(self, credentials: SessionCredentials) -> User:
        token = credentials.cookie_token or credentials.bearer_token
        if not token:
            raise UnauthorizedError()

        try:
            claims = self._tokens.decode(token)
        except AuthenticationError:
            raise UnauthorizedError("Session token rejected")

        if not self._users.has_active_session(claims.jti):
            raise UnauthorizedError("Session revoked or expired")

        stored = self._users.get_by_id(claims.id)
        if stored is None or not stored.is_active:
            raise UnauthorizedError("Session user missing or inactive")

        return stored.to_user()

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        """
        Apply profile edits and an optional password change together.

        Everything runs in one transaction: if the password check fails the
        name/email/avatar changes are rolled back as well.
        """
        with self._users.transaction() as tx:
            if request.email and tx.email_taken_by_other(request.email, user.id):
                raise DuplicateEmailError(request.email)

            tx.update_profile_fields(user.id, request.name, request.email, request.avatar)

            if request.changes_password:
                await self._replace_password(
                    tx, user.id, request.current_password, request.new_password
                )

            stored = tx.fetch(user.id)

        if stored is None:
            raise UnauthorizedError("Session user missing")
        return stored.to_user()

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        with self._users.transaction() as tx:
            await self._replace_password(
                tx, user.id, request.current_password, request.new_password
            )

    async def logout(self, credentials: SessionCredentials) -> Optional[User]:
        """
        Delete the sessions row behind the presented token.

        Expired tokens are still accepted here so their rows get removed.
        A token that fails its signature check is ignored.
        """
        token = credentials.cookie_token or credentials.bearer_token
        if not token:
            return None

        try:
            claims = self._tokens.decode(token, verify_exp=False)
        except AuthenticationError:
            return None

        self._users.delete_session(claims.jti)

        stored = self._users.get_by_id(claims.id)
        return stored.to_user() if stored else None

    @staticmethod
    def _require_active(stored: StoredUser) -> None:
        if not stored.is_active:
            raise AccountDisabledError(stored.id)

    def _start_session(self, stored: StoredUser, created: bool = False) -> AuthResult:
        user = stored.to_user()
        token, claims, expires_at = self._tokens.mint(user)
        self._users.create_session(
            user.id, claims.jti, secrets.token_urlsafe(32), expires_at
        )
        return AuthResult(user=user, token=token, expires_at=expires_at, created=created)

    async def _replace_password(
        self,
        tx: UserTransaction,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        stored = tx.get_for_update(user_id)
        if stored is None:
            raise UnauthorizedError("Session user missing")

        if not stored.password_hash:
            raise UnsupportedForProviderError(stored.provider.value)

        if not await verify_password(current_password, stored.password_hash):
            raise IncorrectPasswordError()

        new_hash = await hash_password(new_password, self._bcrypt_rounds)
        tx.set_password_hash(user_id, new_hash)
