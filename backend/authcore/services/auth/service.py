# authcore/services/auth/service.py
from __future__ import annotations

import logging

from authcore.core import errors as api_errors
from authcore.services._shared.base import BaseService
from authcore.services._shared.errors import ConflictError
from authcore.services._shared.ports.user_directory import NewAccount, UserDirectory
from authcore.services.auth.access import AccessValidator
from authcore.services.auth.credentials import CredentialVerifier
from authcore.services.auth.dto import (
    DUPLICATE_IDENTIFIER,
    AuthFailure,
    AuthFailureKind,
    ClaimSet,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    RegisterOut,
    TokenPairOut,
)
from authcore.services.auth.issuer import TokenIssuer
from authcore.services.auth.revocation import SessionRevocationManager
from authcore.services.auth.rotation import RefreshRotator

log = logging.getLogger(__name__)

_FAILURE_STATUS: dict[AuthFailureKind, tuple[int, str]] = {
    AuthFailureKind.INVALID_CREDENTIALS: (401, "invalid_credentials"),
    AuthFailureKind.ACCOUNT_DISABLED: (401, "account_disabled"),
    AuthFailureKind.INVALID_OR_EXPIRED_TOKEN: (401, "invalid_token"),
    AuthFailureKind.DUPLICATE_IDENTIFIER: (409, "conflict"),
}


class AuthService(BaseService):
    """
    Authentication lifecycle API (login / register / refresh / logout).

    A thin facade over the lifecycle components built by
    :func:`~authcore.services.auth.wiring.build_auth_service`. It adds
    structured logging of every outcome and never logs token values,
    passwords or secrets.

    Domain failures come back as :class:`AuthFailure` values; store and
    directory failures propagate as exceptions.
    """

    def __init__(
        self,
        *,
        directory: UserDirectory,
        verifier: CredentialVerifier,
        issuer: TokenIssuer,
        rotator: RefreshRotator,
        revocations: SessionRevocationManager,
        validator: AccessValidator,
    ) -> None:
        super().__init__()
        self.directory = directory
        self.verifier = verifier
        self.issuer = issuer
        self.rotator = rotator
        self.revocations = revocations
        self.validator = validator

    # ------------------------------------------------------------------ #
    # Login / registration
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut | AuthFailure:
        """
        Check credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Token pair, or ``INVALID_CREDENTIALS`` / ``ACCOUNT_DISABLED``.
        """
        result = self.verifier.verify(dto.email, dto.password)
        if isinstance(result, AuthFailure):
            log.info(
                "login rejected",
                extra={"event": "auth.login", "outcome": result.kind.value},
            )
            return result

        pair = self.issuer.issue(result.subject_id, result.identifier, result.role)
        log.info(
            "login succeeded",
            extra={"event": "auth.login", "outcome": "success", "subject_id": result.subject_id},
        )
        return pair

    def register(self, dto: RegisterIn) -> RegisterOut | AuthFailure:
        """
        Create an account through the directory, then issue a pair for it.

        :param dto: Registration input.
        :returns: Pair plus new user id, or ``DUPLICATE_IDENTIFIER``.
        """
        if self.directory.find_by_identifier(dto.email) is not None:
            log.info(
                "registration rejected",
                extra={"event": "auth.register", "outcome": DUPLICATE_IDENTIFIER.kind.value},
            )
            return DUPLICATE_IDENTIFIER

        try:
            account = self.directory.create_account(
                NewAccount(
                    identifier=dto.email,
                    secret=dto.password,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    age=dto.age,
                    avatar_url=dto.avatar_url,
                )
            )
        except ConflictError:
            # Lost a race against a concurrent registration.
            log.info(
                "registration rejected",
                extra={"event": "auth.register", "outcome": DUPLICATE_IDENTIFIER.kind.value},
            )
            return DUPLICATE_IDENTIFIER

        pair = self.issuer.issue(account.id, account.identifier, account.role)
        log.info(
            "registration succeeded",
            extra={"event": "auth.register", "outcome": "success", "subject_id": account.id},
        )
        return RegisterOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            user_id=account.id,
        )

    # ------------------------------------------------------------------ #
    # Rotation / revocation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut | AuthFailure:
        """
        Rotate a refresh token.

        :returns: New pair, or ``INVALID_OR_EXPIRED_TOKEN``.
        """
        result = self.rotator.rotate(dto.refresh_token)
        outcome = result.kind.value if isinstance(result, AuthFailure) else "success"
        log.info("refresh processed", extra={"event": "auth.refresh", "outcome": outcome})
        return result

    def logout(self, dto: LogoutIn) -> None:
        """Revoke one refresh token. Unknown or already revoked tokens are fine."""
        revoked = self.revocations.logout(dto.refresh_token)
        log.info(
            "logout processed",
            extra={"event": "auth.logout", "outcome": "revoked" if revoked else "noop"},
        )

    def logout_everywhere(self, subject_id: str) -> None:
        """Revoke every refresh token of ``subject_id``."""
        count = self.revocations.logout_everywhere(subject_id)
        log.info(
            "logout everywhere processed",
            extra={"event": "auth.logout_all", "subject_id": subject_id, "count": count},
        )

    def purge_expired(self) -> int:
        """Delete expired refresh token records. :returns: Number deleted."""
        count = self.revocations.purge_expired()
        log.info("expired refresh tokens purged", extra={"event": "auth.purge", "count": count})
        return count

    # ------------------------------------------------------------------ #
    # Access
    # ------------------------------------------------------------------ #

    def validate_access_token(self, token: object) -> ClaimSet | None:
        """Return the claims of a valid access token, else ``None``."""
        return self.validator.validate(token)

    # ------------------------------------------------------------------ #
    # HTTP translation
    # ------------------------------------------------------------------ #

    @staticmethod
    def translate_failure(failure: AuthFailure) -> api_errors.APIError:
        """
        Map a domain failure to its API error.

        :param failure: Failure returned by one of the operations.
        :returns: Error ready to be raised by the HTTP layer.
        """
        status, code = _FAILURE_STATUS[failure.kind]
        if status == 409:
            return api_errors.Conflict(failure.message)
        return api_errors.Unauthorized(failure.message, code=code)
