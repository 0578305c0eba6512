"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the credential
store, the token issuer and the auth service. The app lifespan builds the
container at startup and closes it at shutdown, so there is no connection
created at import time.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, ICredentialStore
    from modules.auth.tokens import TokenIssuer

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use close() to release the store handle.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._store: "ICredentialStore | None" = None
        self._tokens: "TokenIssuer | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store(self) -> "ICredentialStore":
        """Get the credential store for the configured backend."""
        if self._store is None:
            if self.settings.store_backend == "memory":
                from modules.auth.repository import InMemoryCredentialStore
                self._store = InMemoryCredentialStore()
            else:
                from modules.auth.repository import SupabaseCredentialStore
                from shared.database import get_supabase_client
                self._store = SupabaseCredentialStore(
                    get_supabase_client(),
                    table=self.settings.users_table,
                )
            logger.info(f"Credential store opened ({self.settings.store_backend})")
        return self._store

    @property
    def tokens(self) -> "TokenIssuer":
        """Get the session token issuer. Raises ConfigurationError without a secret."""
        if self._tokens is None:
            from modules.auth.tokens import TokenIssuer
            self._tokens = TokenIssuer(
                self.settings.jwt_secret,
                ttl=timedelta(days=self.settings.token_ttl_days),
                algorithm=self.settings.jwt_algorithm,
            )
        return self._tokens

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                store=self.store,
                tokens=self.tokens,
                password_min_length=self.settings.password_min_length,
                bcrypt_rounds=self.settings.bcrypt_rounds,
            )
        return self._auth_service

    def close(self) -> None:
        """Close the store handle and drop all cached services."""
        if self._store is not None:
            self._store.close()
            logger.info("Credential store closed")
        self._store = None
        self._tokens = None
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This closes and clears the cached container, so the next call to
    get_container() will create a fresh one. Primarily used for testing.
    """
    global _container
    if _container is not None:
        _container.close()
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth
