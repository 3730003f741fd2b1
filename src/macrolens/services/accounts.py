"""Account lifecycle: signup, login and goal updates."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macrolens.domain.accounts import Account, Goals
from macrolens.domain.errors import BadRequestError, InvalidCredentialsError
from macrolens.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountRepository(Protocol):
    """Persistence interface for accounts."""

    def create_account(self, email: str, password_hash: str, name: str) -> Account:
        """Insert an account; raise DuplicateAccountError on a taken email."""

    def get_by_email(self, email: str) -> Account | None:
        """Return the account for an email, if present."""

    def get_by_id(self, account_id: int) -> Account | None:
        """Return the account for an id, if present."""

    def update_goals(self, account_id: int, goals: Goals) -> None:
        """Replace the four daily targets of an account."""


@dataclass
class AccountService:
    """Application service for account actions."""

    repository: AccountRepository

    def signup(self, email: str, password: str, name: str) -> Account:
        """Create an account with a hashed password."""
        normalized = _normalize_email(email)
        if not normalized or not password:
            raise BadRequestError("Email and password are required")
        account = self.repository.create_account(
            normalized, hash_password(password), name.strip()
        )
        logger.info("Created account %s", account.id)
        return account

    def login(self, email: str, password: str) -> Account:
        """Return the account when the credentials match."""
        account = self.repository.get_by_email(_normalize_email(email))
        if account is None or not verify_password(password, account.password_hash):
            raise InvalidCredentialsError
        return account

    def get(self, account_id: int) -> Account | None:
        """Return an account by id."""
        return self.repository.get_by_id(account_id)

    def update_goals(self, account_id: int, goals: Goals) -> None:
        """Persist new daily targets."""
        self.repository.update_goals(account_id, goals)


def _normalize_email(email: str) -> str:
    return email.strip().lower()
