"""
Credential store implementations.

SupabaseCredentialStore is the production store: a `users` table with a
unique index on the lower-cased email (see migrations/001_create_users.sql).
InMemoryCredentialStore backs local development and tests.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from shared.database import reset_client_cache
from shared.repository import BaseRepository

from .exceptions import DuplicateIdentityError, StoreUnavailableError
from .models import NewUser, UserRecord, UserRole, normalize_email

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseCredentialStore(BaseRepository[UserRecord]):
    """
    Credential store backed by a Supabase table.

    Uniqueness of the email is left to the database's unique index, which
    makes concurrent registrations safe without any locking here.
    """

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db, table)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        result = self._execute(
            self._db.table(self._table)
            .select("*")
            .eq("email", normalize_email(email))
            .limit(1)
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        result = self._execute(
            self._db.table(self._table).select("*").eq("id", user_id).limit(1)
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, user: NewUser) -> UserRecord:
        email = normalize_email(user.email)
        row = {
            "name": user.name.strip(),
            "email": email,
            "password_digest": user.password_digest,
            "role": user.role.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            result = self._db.table(self._table).insert(row).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateIdentityError(email)
            logger.exception(f"Insert into {self._table} failed")
            raise StoreUnavailableError()
        except httpx.HTTPError:
            logger.exception(f"Insert into {self._table} failed")
            raise StoreUnavailableError()

        if not result.data:
            logger.error(f"Insert into {self._table} returned no row")
            raise StoreUnavailableError()
        return self._map_to_user(result.data[0])

    def close(self) -> None:
        reset_client_cache()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _execute(self, query: Any) -> Any:
        try:
            return query.execute()
        except (APIError, httpx.HTTPError):
            logger.exception(f"Query on {self._table} failed")
            raise StoreUnavailableError()

    def _map_to_user(self, data: dict[str, Any]) -> UserRecord:
        return UserRecord(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            password_digest=data["password_digest"],
            role=UserRole(data.get("role") or UserRole.STANDARD.value),
            created_at=data["created_at"],
        )


class InMemoryCredentialStore:
    """
    Process-local credential store.

    Records are keyed by normalized email; a lock makes the
    check-then-insert in create() atomic across threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_email: dict[str, UserRecord] = {}
        self._by_id: dict[str, UserRecord] = {}

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            return self._by_email.get(normalize_email(email))

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._by_id.get(user_id)

    def create(self, user: NewUser) -> UserRecord:
        email = normalize_email(user.email)
        with self._lock:
            if email in self._by_email:
                raise DuplicateIdentityError(email)
            record = UserRecord(
                id=str(uuid.uuid4()),
                name=user.name.strip(),
                email=email,
                password_digest=user.password_digest,
                role=user.role,
                created_at=datetime.now(timezone.utc),
            )
            self._by_email[email] = record
            self._by_id[record.id] = record
        return record

    def delete(self, user_id: str) -> bool:
        """Remove a user. Returns False if it did not exist."""
        with self._lock:
            record = self._by_id.pop(user_id, None)
            if record is None:
                return False
            del self._by_email[record.email]
            return True

    def close(self) -> None:
        with self._lock:
            self._by_email.clear()
            self._by_id.clear()
