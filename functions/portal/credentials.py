"""
Account registration and login.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from portal.db import AccountRecord, AccountStore
from portal.exceptions import (
    BadCredential,
    ConstraintViolation,
    DuplicateAccount,
    UnknownAccount,
    ValidationError,
)
from portal.passwords import PasswordHasher, exceeds_bcrypt_limit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Role:
    """Role tag stored with an account. Any non-empty string is accepted."""

    value: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Role":
        if not raw:
            raise ValidationError()
        return cls(raw)

    def __str__(self) -> str:
        return self.value


def _require(*values: Optional[str], message: str) -> None:
    if any(not value for value in values):
        raise ValidationError(message)


class CredentialService:
    def __init__(self, store: AccountStore, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def signup(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
    ) -> AccountRecord:
        """
        Create an account with a hashed password.

        The pre-check only spares a hash computation; the unique email
        constraint in the store decides when two signups race.
        """
        _require(name, email, password, role, message="All fields are required")
        account_role = Role.parse(role)
        if exceeds_bcrypt_limit(password):
            raise ValidationError("Password must be at most 72 bytes")

        if self.store.find_account_by_email(email) is not None:
            logger.info("Signup rejected: email already registered")
            raise DuplicateAccount()

        password_hash = self.hasher.hash(password)
        try:
            record = self.store.insert_account(
                name, email, password_hash, str(account_role)
            )
        except ConstraintViolation:
            logger.info("Signup lost a race on a registered email")
            raise DuplicateAccount() from None
        logger.info("Registered account %s with role %s", record.id, record.role)
        return record

    def login(
        self, email: Optional[str], password: Optional[str]
    ) -> AccountRecord:
        _require(email, password, message="Email and password are required")

        account = self.store.find_account_by_email(email)
        if account is None:
            logger.info("Login failed: unknown account")
            raise UnknownAccount()

        # Signup never stores such a password, so it cannot match.
        if exceeds_bcrypt_limit(password) or not self.hasher.verify(
            password, account.password_hash
        ):
            logger.warning("Login failed: bad password for account %s", account.id)
            raise BadCredential()

        logger.info("Account %s logged in", account.id)
        return account
