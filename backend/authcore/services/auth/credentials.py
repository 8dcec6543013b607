"""Login credential checks."""

from __future__ import annotations

from authcore.services._shared.ports.user_directory import UserDirectory
from authcore.services.auth.dto import (
    ACCOUNT_DISABLED,
    INVALID_CREDENTIALS,
    AuthFailure,
    VerifiedSubject,
)


class CredentialVerifier:
    """
    Resolve an identifier and check the presented secret.

    Unknown identifiers and wrong secrets produce the same failure value,
    and both run one hash check, so neither message nor timing tells them
    apart. Only a disabled account with the correct secret is reported
    separately.
    """

    def __init__(self, *, directory: UserDirectory) -> None:
        self.directory = directory

    def verify(self, identifier: str, secret: str) -> VerifiedSubject | AuthFailure:
        """
        :param identifier: Login identifier as typed by the user.
        :param secret: Raw password.
        :returns: The verified subject, or ``INVALID_CREDENTIALS`` /
            ``ACCOUNT_DISABLED``.
        :raises DirectoryUnavailableError: If the directory cannot be reached.
        """
        account = self.directory.find_by_identifier(identifier)
        # Hash check first: it must run for unknown identifiers too.
        if not self.directory.verify_secret(account, secret) or account is None:
            return INVALID_CREDENTIALS
        if not account.active:
            return ACCOUNT_DISABLED
        return VerifiedSubject(
            subject_id=account.id,
            identifier=account.identifier,
            role=account.role,
            active=account.active,
        )
