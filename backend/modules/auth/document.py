"""
Document auth backend (production mode).

Identity is owned by Supabase Auth: the client signs in there and presents
the resulting identity token. This backend verifies that token on every
call and keeps the user profile in the Supabase ``users`` table, keyed by
the token's subject id. There are no server-side session rows.
"""

from typing import Any, Optional

from shared.exceptions import AuthenticationError, ValidationError
from shared.models import AuthProvider, User

from .document_repository import DocumentUserRepository
from .exceptions import (
    AccountDisabledError,
    DuplicateEmailError,
    EmailMismatchError,
    IncorrectPasswordError,
    UnauthorizedError,
    UnsupportedForProviderError,
    UserNotFoundError,
)
from .interfaces import IAuthBackend, IIdentityVerifier
from .models import (
    AuthResult,
    IdentityClaims,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCredentials,
    SocialLoginRequest,
    StoredUser,
)
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password


class DocumentAuthBackend(IAuthBackend):
    """Identity-token authentication with user documents in Supabase."""

    def __init__(
        self,
        users: DocumentUserRepository,
        identity: IIdentityVerifier,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self._users = users
        self._identity = identity
        self._bcrypt_rounds = bcrypt_rounds

    async def login(self, request: LoginRequest) -> AuthResult:
        """
        Accept an identity token for the requested email.

        The same token is handed back; the client keeps using it as its
        bearer credential.
        """
        claims = await self._verified_claims(request.external_token, request.email)

        stored = self._find(claims.sub)
        if stored is None:
            raise UserNotFoundError(claims.sub)
        if not stored.is_active:
            raise AccountDisabledError(stored.id)

        stored = self._users.touch_last_login(stored.id)
        return AuthResult(user=stored.to_user(), token=request.external_token)

    async def register(self, request: RegisterRequest) -> AuthResult:
        claims = await self._verified_claims(request.external_token, request.email)

        if self._find(claims.sub) is not None:
            raise DuplicateEmailError(request.email)
        if self._users.get_by_email(request.email) is not None:
            raise DuplicateEmailError(request.email)

        stored = self._users.create(
            claims.sub,
            {
                "name": request.name,
                "email": request.email,
                "avatar": claims.picture or "",
                "email_verified": claims.email_verified,
                "provider": AuthProvider.EMAIL.value,
            },
        )
        return AuthResult(
            user=stored.to_user(), token=request.external_token, created=True
        )

    async def social_login(self, request: SocialLoginRequest) -> AuthResult:
        """
        Upsert a user from a verified social sign-in.

        Lookup order: subject id, then email (the provider is linked onto
        that account), otherwise a new document is created.
        """
        claims = await self._identity.verify(request.token)
        if not claims.email:
            raise ValidationError("Email is required", code="EMAIL_REQUIRED")

        provider = request.provider.value
        created = False

        stored = self._find(claims.sub)
        if stored is not None:
            if not stored.is_active:
                raise AccountDisabledError(stored.id)
            stored = self._users.touch_last_login(stored.id)
        else:
            by_email = self._users.get_by_email(claims.email)
            if by_email is not None:
                if not by_email.is_active:
                    raise AccountDisabledError(by_email.id)
                stored = self._users.link_provider(by_email.id, provider, claims.sub)
            else:
                stored = self._users.create(
                    claims.sub,
                    {
                        "name": request.user.name or claims.name or "",
                        "email": claims.email,
                        "avatar": request.user.avatar or claims.picture or "",
                        "email_verified": claims.email_verified,
                        "provider": provider,
                        "provider_id": claims.sub,
                    },
                )
                created = True

        return AuthResult(user=stored.to_user(), token=request.token, created=created)

    async def get_current_user(self, credentials: SessionCredentials) -> User:
        """
        Resolve the bearer identity token.

        The token is verified on every call; nothing is cached, so an
        expired token fails on the next request.
        """
        if not credentials.bearer_token:
            raise UnauthorizedError()

        try:
            claims = await self._identity.verify(credentials.bearer_token)
        except AuthenticationError:
            raise UnauthorizedError("Identity token rejected")

        stored = self._find(claims.sub)
        if stored is None or not stored.is_active:
            raise UnauthorizedError("Identity has no active user")

        return stored.to_user()

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        stored = self._require(user.id)
        data: dict[str, Any] = {}

        if request.name is not None:
            data["name"] = request.name
        if request.avatar is not None:
            data["avatar"] = request.avatar
        if request.email is not None:
            other = self._users.get_by_email(request.email)
            if other is not None and other.id != stored.id:
                raise DuplicateEmailError(request.email)
            data["email"] = request.email

        if request.changes_password:
            await self._check_current_password(stored, request.current_password)
            data["password_hash"] = await hash_password(
                request.new_password, self._bcrypt_rounds
            )

        # One document write, so the password and the other fields land together
        return self._users.update(stored.id, data).to_user()

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        stored = self._require(user.id)
        await self._check_current_password(stored, request.current_password)
        self._users.update(
            stored.id,
            {"password_hash": await hash_password(request.new_password, self._bcrypt_rounds)},
        )

    async def logout(self, credentials: SessionCredentials) -> Optional[User]:
        """Identify the user behind a bearer token, if any. Nothing is revoked."""
        if not credentials.bearer_token:
            return None

        try:
            claims = await self._identity.verify(credentials.bearer_token)
        except AuthenticationError:
            return None

        stored = self._find(claims.sub)
        return stored.to_user() if stored else None

    async def _verified_claims(self, token: Optional[str], email: str) -> IdentityClaims:
        if not token:
            raise ValidationError("Identity token is required", code="TOKEN_REQUIRED")

        claims = await self._identity.verify(token)
        if (claims.email or "").lower() != email.lower():
            raise EmailMismatchError(email, claims.email or "")
        return claims

    def _find(self, subject_id: str) -> Optional[StoredUser]:
        return self._users.get_by_id(subject_id) or self._users.get_by_provider_id(subject_id)

    def _require(self, user_id: str) -> StoredUser:
        stored = self._users.get_by_id(user_id)
        if stored is None:
            raise UserNotFoundError(user_id)
        return stored

    async def _check_current_password(
        self, stored: StoredUser, current_password: str
    ) -> None:
        if stored.provider != AuthProvider.EMAIL:
            raise UnsupportedForProviderError(stored.provider.value)

        if stored.password_hash and not await verify_password(
            current_password, stored.password_hash
        ):
            raise IncorrectPasswordError()

