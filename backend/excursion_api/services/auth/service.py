from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import TypeVar

from sqlalchemy.exc import IntegrityError

from excursion_api.models.base import utcnow
from excursion_api.models.password_reset import PasswordReset
from excursion_api.models.user import RoleName, User
from excursion_api.repositories.user import normalize_email
from excursion_api.services._shared.base import BaseService, ServiceContext
from excursion_api.services._shared.errors import (
    AuthErrorKind,
    AuthFailure,
    InvalidSignatureError,
    violates,
)
from excursion_api.services._shared.ports.token_signer import TokenSigner
from excursion_api.services.auth.dto import (
    AuthResult,
    AuthTokenConfig,
    ConfirmEmailIn,
    LoginIn,
    PasswordResetIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UpdatePasswordIn,
    UserOut,
)
from excursion_api.uow.base import UnitOfWork

T = TypeVar("T")

# Operation-specific wording kept for existing clients
USER_NOT_FOUND_ON_VALIDATE = "User not found"
USER_NOT_FOUND_ON_CONFIRM = "Can't find user with id and email."


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Login, registration, refresh-token rotation, password re-validation,
    password reset and e-mail confirmation. Each operation owns one unit of
    work: an expected failure is raised as :class:`AuthFailure` inside it,
    which rolls the transaction back, and is then returned as a failed
    :class:`AuthResult`.
    """

    def __init__(
        self,
        *,
        signer: TokenSigner,
        token_cfg: AuthTokenConfig | None = None,
        logger: logging.Logger | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param signer: Adapter minting and inspecting access tokens.
        :param token_cfg: Access/Refresh lifetime configuration.
        :param logger: Logger for auth events; defaults to this module's logger.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.signer = signer
        self.cfg = token_cfg or AuthTokenConfig(access_expires=timedelta(minutes=15))
        self.log = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResult[TokenPairOut]:
        """
        Authenticate credentials and issue a fresh token pair.

        Deleted accounts are reported as such whatever the password; unknown
        e-mails and wrong passwords share one message.

        :param dto: Login input.
        :returns: Token pair, or ``ACCOUNT_DELETED``/``INVALID_CREDENTIALS``.
        """
        return self._run("login", lambda: self._login(dto))

    def _login(self, dto: LoginIn) -> TokenPairOut:
        with self.rw_uow() as uow:
            user = uow.users.get_by_email_including_deleted(dto.email)
            if user is not None and user.is_deleted:
                raise AuthFailure(AuthErrorKind.ACCOUNT_DELETED)
            if user is None or not user.verify_password(dto.password):
                raise AuthFailure(AuthErrorKind.INVALID_CREDENTIALS)
            user_id = user.id
            pair = self._issue_pair(uow, user)
        self.log.info("login succeeded", extra={"user_id": user_id, "outcome": "ok"})
        return pair

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResult[TokenPairOut]:
        """
        Create a ``CandidateUser`` account pending approval and sign it in.

        The user, its role, its registration request and its refresh token
        are written in one transaction.

        :param dto: Registration input.
        :returns: Token pair, or ``USERNAME_TAKEN``/``EMAIL_TAKEN``.
        """
        return self._run("register", lambda: self._register(dto))

    def _register(self, dto: RegisterIn) -> TokenPairOut:
        with self.rw_uow() as uow:
            if uow.users.username_taken(dto.username):
                raise AuthFailure(AuthErrorKind.USERNAME_TAKEN)
            if uow.users.email_taken(dto.email):
                raise AuthFailure(AuthErrorKind.EMAIL_TAKEN)

            user = User(
                email=dto.email,
                username=dto.username,
                first_name=dto.first_name,
                last_name=dto.last_name,
                phone_number=dto.phone_number,
                birth_date=dto.birth_date,
            )
            user.password = dto.password
            try:
                uow.users.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration
                kind = self._registration_conflict(exc)
                if kind is None:
                    raise
                raise AuthFailure(kind) from exc

            uow.users.add_to_role(user, RoleName.CANDIDATE_USER.value)
            uow.registration_requests.add_for_user(user.id)
            user_id = user.id
            pair = self._issue_pair(uow, user)
        self.log.info("registration succeeded", extra={"user_id": user_id, "outcome": "ok"})
        return pair

    @staticmethod
    def _registration_conflict(exc: IntegrityError) -> AuthErrorKind | None:
        if violates(exc, "uq_users_username"):
            return AuthErrorKind.USERNAME_TAKEN
        if violates(exc, "uq_users_email"):
            return AuthErrorKind.EMAIL_TAKEN
        return None

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthResult[TokenPairOut]:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - The access token may be expired but its signature must be valid.
        - Claims are rebuilt from the current user state.
        - The old token is revoked by a conditional update; if another
          refresh already rotated it, this one is rolled back and fails.
        """
        return self._run("refresh", lambda: self._refresh(dto))

    def _refresh(self, dto: RefreshIn) -> TokenPairOut:
        try:
            claims = self.signer.validate_expired(dto.access_token)
        except InvalidSignatureError as exc:
            raise AuthFailure(AuthErrorKind.INVALID_SIGNATURE) from exc

        with self.rw_uow() as uow:
            user = uow.users.get(claims.subject)
            if user is None:
                raise AuthFailure(AuthErrorKind.USER_NOT_FOUND)
            user_id = user.id
            if not uow.refresh_tokens.is_valid(user_id, dto.refresh_token):
                row = uow.refresh_tokens.get_by_token(dto.refresh_token)
                if row is not None and row.user_id == user_id and row.replaced_by_token:
                    self.log.warning(
                        "refresh token already rotated, possible replay",
                        extra={"user_id": user_id, "outcome": "replay"},
                    )
                raise AuthFailure(AuthErrorKind.INVALID_REFRESH_TOKEN)

            pair = self._issue_pair(uow, user)
            if not uow.refresh_tokens.revoke(user_id, dto.refresh_token, pair.refresh_token):
                self.log.warning(
                    "refresh token already rotated, possible replay",
                    extra={"user_id": user_id, "outcome": "replay"},
                )
                raise AuthFailure(AuthErrorKind.INVALID_REFRESH_TOKEN)
        self.log.info("refresh succeeded", extra={"user_id": user_id, "outcome": "ok"})
        return pair

    # ------------------------------------------------------------------ #
    # Password re-validation / e-mail confirmation / current user
    # ------------------------------------------------------------------ #

    def validate_password(self, dto: LoginIn) -> AuthResult[bool]:
        """Check the password of an active user without changing any state."""
        return self._run("validate_password", lambda: self._validate_password(dto))

    def _validate_password(self, dto: LoginIn) -> bool:
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                raise AuthFailure(AuthErrorKind.USER_NOT_FOUND, USER_NOT_FOUND_ON_VALIDATE)
            if not user.verify_password(dto.password):
                raise AuthFailure(AuthErrorKind.INCORRECT_PASSWORD)
        return True

    def confirm_email(self, dto: ConfirmEmailIn) -> AuthResult[bool]:
        """Mark the e-mail of the active user matching ``(user_id, email)`` confirmed."""
        return self._run("confirm_email", lambda: self._confirm_email(dto))

    def _confirm_email(self, dto: ConfirmEmailIn) -> bool:
        with self.rw_uow() as uow:
            user = uow.users.find_one(id=dto.user_id, email=normalize_email(dto.email))
            if user is None:
                raise AuthFailure(AuthErrorKind.USER_NOT_FOUND, USER_NOT_FOUND_ON_CONFIRM)
            if user.email_confirmed:
                raise AuthFailure(AuthErrorKind.EMAIL_ALREADY_CONFIRMED)
            user.email_confirmed = True
            uow.users.flush()
        self.log.info("email confirmed", extra={"user_id": dto.user_id, "outcome": "ok"})
        return True

    def whoami(self, user_id: str) -> AuthResult[UserOut]:
        """Return the public projection of an active user."""
        return self._run("whoami", lambda: self._whoami(user_id))

    def _whoami(self, user_id: str) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthFailure(AuthErrorKind.USER_NOT_FOUND)
            return UserOut(
                id=user.id,
                email=user.email,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                roles=tuple(user.role_names),
                email_confirmed=user.email_confirmed,
            )

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def request_password_reset(self, email: str) -> AuthResult[str | None]:
        """
        Open a password reset entry for the active user owning ``email``.

        Unknown and deleted addresses succeed too, with no entry written, so
        callers cannot tell registered e-mails apart.

        :param email: Address the reset was requested for.
        :returns: The new reset token, or ``None`` when no user matched.
        """
        return self._run("request_password_reset", lambda: self._request_password_reset(email))

    def _request_password_reset(self, email: str) -> str | None:
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                self.log.info("password reset for unknown e-mail", extra={"outcome": "ignored"})
                return None
            user_id = user.id
            now = utcnow()
            token = uow.password_resets.generate()
            uow.password_resets.add_for_user(user_id, token, now, now + self.cfg.reset_expires)
        self.log.info("password reset requested", extra={"user_id": user_id, "outcome": "ok"})
        return token

    def validate_password_reset(self, dto: PasswordResetIn) -> AuthResult[bool]:
        """Check that a reset entry exists, is unused and has not expired."""
        return self._run("validate_password_reset", lambda: self._validate_password_reset(dto))

    def _validate_password_reset(self, dto: PasswordResetIn) -> bool:
        with self.ro_uow() as uow:
            self._usable_reset(uow, dto.user_id, dto.token)
        return True

    def update_password(self, dto: UpdatePasswordIn) -> AuthResult[bool]:
        """
        Set a new password through a reset entry.

        The entry is consumed and the password replaced in one transaction;
        any failure leaves both untouched.

        :param dto: Entry identification and the new raw password.
        :returns: ``True``, or ``RESET_NOT_FOUND``/``RESET_ALREADY_USED``/
            ``RESET_EXPIRED``/``USER_NOT_FOUND``.
        """
        return self._run("update_password", lambda: self._update_password(dto))

    def _update_password(self, dto: UpdatePasswordIn) -> bool:
        with self.rw_uow() as uow:
            entry = self._usable_reset(uow, dto.user_id, dto.token)
            user = uow.users.get(dto.user_id)
            if user is None:
                raise AuthFailure(AuthErrorKind.USER_NOT_FOUND)
            # Conditional update: a concurrent update_password consumed it first
            if not uow.password_resets.mark_used(entry.id):
                raise AuthFailure(AuthErrorKind.RESET_ALREADY_USED)
            user.password = dto.password
            uow.users.flush()
        self.log.info("password updated", extra={"user_id": dto.user_id, "outcome": "ok"})
        return True

    @staticmethod
    def _usable_reset(uow: UnitOfWork, user_id: str, token: str) -> PasswordReset:
        entry = uow.password_resets.find_by_user_and_token(user_id, token)
        if entry is None:
            raise AuthFailure(AuthErrorKind.RESET_NOT_FOUND)
        if entry.is_used:
            raise AuthFailure(AuthErrorKind.RESET_ALREADY_USED)
        if entry.is_expired:
            raise AuthFailure(AuthErrorKind.RESET_EXPIRED)
        return entry

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, uow: UnitOfWork, user: User) -> TokenPairOut:
        """Sign an access token and append a refresh token to the ledger."""
        now = utcnow()
        claims = self.signer.build_claims(user)
        access = self.signer.issue_access_token(claims, self.cfg.access_expires)
        refresh = uow.refresh_tokens.generate()
        uow.refresh_tokens.store(user.id, refresh, now, now + self.cfg.refresh_expires)
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _run(self, operation: str, fn: Callable[[], T]) -> AuthResult[T]:
        try:
            value = fn()
        except AuthFailure as failure:
            self.log.warning(
                "%s failed: %s",
                operation,
                failure.kind.name,
                extra={"outcome": failure.kind.name},
            )
            return AuthResult.failure(failure.kind, failure.message)
        return AuthResult.success(value)
