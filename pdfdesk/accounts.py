"""User accounts: an injected store plus signup and login."""
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional, Protocol

from passlib.context import CryptContext

from .errors import DuplicateEmail, InvalidCredentials, MissingFields

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class UserRecord:
    email: str
    name: str
    password_hash: str


class UserStore(Protocol):
    def get(self, email: str) -> Optional[UserRecord]:
        ...

    def add_if_absent(self, record: UserRecord) -> bool:
        """Insert ``record`` unless its email is taken; return whether it was inserted."""
        ...


class InMemoryUserStore:
    """Process-local user map. The lock makes check-and-insert atomic."""

    def __init__(self):
        self._users: Dict[str, UserRecord] = {}
        self._lock = Lock()

    def get(self, email: str) -> Optional[UserRecord]:
        return self._users.get(email)

    def add_if_absent(self, record: UserRecord) -> bool:
        with self._lock:
            if record.email in self._users:
                return False
            self._users[record.email] = record
            return True


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    def __init__(self, store: UserStore):
        self._store = store

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> UserRecord:
        name = (name or "").strip()
        email = _normalize_email(email or "")
        if not name or not email or not password:
            raise MissingFields("All fields are required.")

        if self._store.get(email):
            raise DuplicateEmail()

        # Hashing happens outside the store lock; add_if_absent re-checks the email.
        record = UserRecord(email=email, name=name, password_hash=pwd_context.hash(password))
        if not self._store.add_if_absent(record):
            raise DuplicateEmail()

        logger.info("Registered account %s", email)
        return record

    def authenticate(self, email: Optional[str], password: Optional[str]) -> UserRecord:
        email = _normalize_email(email or "")
        if not email or not password:
            raise MissingFields("Email and password are required.")

        user = self._store.get(email)
        if not user or not pwd_context.verify(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentials()

        logger.info("Logged in %s", email)
        return user


account_service = AccountService(InMemoryUserStore())


def get_account_service() -> AccountService:
    return account_service
