"""Tests for the auth service."""

import asyncio
import threading
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from modules.auth.exceptions import (
    DuplicateIdentityError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    PasswordTooShortError,
    StoreUnavailableError,
    UserNotFoundError,
)
from modules.auth.models import LoginRequest, RegisterRequest, UserRole
from modules.auth.repository import InMemoryCredentialStore
from modules.auth.service import AuthService
from modules.auth.tokens import TokenIssuer

SECRET = "test-secret"


def register_request(
    name: str = "Ann",
    email: str = "Ann@X.com",
    password: str = "Password1",
) -> RegisterRequest:
    return RegisterRequest(name=name, email=email, password=password)


class TestAuthService:
    @pytest.fixture
    def store(self) -> InMemoryCredentialStore:
        return InMemoryCredentialStore()

    @pytest.fixture
    def tokens(self) -> TokenIssuer:
        return TokenIssuer(SECRET)

    @pytest.fixture
    def service(self, store, tokens) -> AuthService:
        return AuthService(store=store, tokens=tokens, bcrypt_rounds=4)

    # -------------------------------------------------------------------------
    # register
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_register_returns_token_and_public_user(self, service, tokens):
        result = await service.register(register_request())

        assert result.message == "User registered successfully"
        assert result.user.name == "Ann"
        assert result.user.email == "ann@x.com"
        assert result.user.role == UserRole.STANDARD
        assert tokens.verify(result.token) == result.user.id

    @pytest.mark.asyncio
    async def test_register_never_exposes_digest(self, service, store):
        result = await service.register(register_request())
        body = result.model_dump()

        assert "password_digest" not in body["user"]
        assert "password" not in body["user"]
        stored = store.find_by_id(result.user.id)
        assert stored.password_digest not in result.model_dump_json()

    @pytest.mark.asyncio
    async def test_register_stores_digest_not_plaintext(self, service, store):
        result = await service.register(register_request())
        stored = store.find_by_id(result.user.id)
        assert stored.password_digest != "Password1"
        assert stored.password_digest.startswith("$2b$04$")

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, service):
        await service.register(register_request(email="ann@x.com"))
        with pytest.raises(DuplicateIdentityError):
            await service.register(register_request(email="ANN@X.COM"))

    @pytest.mark.asyncio
    async def test_register_seven_character_password(self, service, store):
        with pytest.raises(PasswordTooShortError):
            await service.register(register_request(password="Passwo1"))
        assert store.find_by_email("ann@x.com") is None

    @pytest.mark.asyncio
    async def test_register_eight_character_password(self, service):
        result = await service.register(register_request(password="Passwor1"))
        assert result.user.email == "ann@x.com"

    @pytest.mark.asyncio
    async def test_register_short_password_does_no_lookup_or_hashing(self, tokens):
        store = MagicMock()
        service = AuthService(store=store, tokens=tokens, bcrypt_rounds=4)
        with patch("modules.auth.service.hash_password") as mock_hash:
            with pytest.raises(PasswordTooShortError):
                await service.register(register_request(password="short"))
            mock_hash.assert_not_called()
        store.find_by_email.assert_not_called()
        store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_respects_configured_minimum(self, store, tokens):
        service = AuthService(store=store, tokens=tokens, password_min_length=12, bcrypt_rounds=4)
        with pytest.raises(PasswordTooShortError):
            await service.register(register_request(password="Password123"))

    @pytest.mark.asyncio
    async def test_concurrent_registrations_one_wins(self, service):
        """Both pass the pre-check; the store lets exactly one through."""
        results = await asyncio.gather(
            service.register(register_request()),
            service.register(register_request(email="ann@X.COM")),
            return_exceptions=True,
        )
        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], DuplicateIdentityError)

    @pytest.mark.asyncio
    async def test_register_store_failure_propagates(self, tokens):
        store = MagicMock()
        store.find_by_email.return_value = None
        store.create.side_effect = StoreUnavailableError()
        service = AuthService(store=store, tokens=tokens, bcrypt_rounds=4)
        with pytest.raises(StoreUnavailableError):
            await service.register(register_request())

    # -------------------------------------------------------------------------
    # login
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_login_success(self, service, tokens):
        registered = await service.register(register_request())
        result = await service.login(LoginRequest(email="ann@x.com", password="Password1"))

        assert result.message == "Login successful"
        assert result.user == registered.user
        assert tokens.verify(result.token) == registered.user.id

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive(self, service):
        """Register Ann@X.com, log in as ANN@x.com."""
        registered = await service.register(register_request(email="Ann@X.com"))
        assert registered.user.email == "ann@x.com"

        result = await service.login(LoginRequest(email="ANN@x.com", password="Password1"))
        assert result.user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_login_wrong_password_matches_unknown_email(self, service):
        """Wrong password and unknown email fail with an identical error."""
        await service.register(register_request())

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login(LoginRequest(email="ann@x.com", password="Password2"))
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await service.login(LoginRequest(email="nobody@x.com", password="Password1"))

        assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
        assert wrong_password.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email_still_runs_verifier(self, service):
        """Unknown emails cost a bcrypt check too, against a dummy digest."""
        with patch("modules.auth.service.verify_password", return_value=False) as mock_verify:
            with pytest.raises(InvalidCredentialsError):
                await service.login(LoginRequest(email="nobody@x.com", password="Password1"))
            mock_verify.assert_called_once()

    # -------------------------------------------------------------------------
    # authenticate
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_authenticate_round_trip(self, service):
        registered = await service.register(register_request())
        user = await service.authenticate(registered.token)
        assert user.id == registered.user.id

    @pytest.mark.asyncio
    async def test_authenticate_missing_token(self, service):
        with pytest.raises(MissingTokenError):
            await service.authenticate("")

    @pytest.mark.asyncio
    async def test_authenticate_none_token(self, service):
        with pytest.raises(MissingTokenError):
            await service.authenticate(None)

    @pytest.mark.asyncio
    async def test_authenticate_invalid_token(self, service):
        with pytest.raises(InvalidTokenError):
            await service.authenticate("not-a-valid-token")

    @pytest.mark.asyncio
    async def test_authenticate_expired_token(self, service, tokens):
        token = tokens.issue("user-123", now=datetime.now(timezone.utc) - timedelta(days=8))
        with pytest.raises(ExpiredTokenError):
            await service.authenticate(token)

    @pytest.mark.asyncio
    async def test_authenticate_wrong_secret(self, service):
        forged = TokenIssuer("wrong-secret").issue("user-123")
        with pytest.raises(InvalidTokenError):
            await service.authenticate(forged)

    # -------------------------------------------------------------------------
    # get_profile
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_get_profile(self, service):
        registered = await service.register(register_request())
        profile = await service.get_profile(registered.user.id)

        assert profile.id == registered.user.id
        assert profile.email == "ann@x.com"
        assert profile.created_at is not None
        assert "password_digest" not in profile.model_dump()

    @pytest.mark.asyncio
    async def test_get_profile_deleted_user(self, service, store):
        registered = await service.register(register_request())
        store.delete(registered.user.id)
        with pytest.raises(UserNotFoundError):
            await service.get_profile(registered.user.id)

    # -------------------------------------------------------------------------
    # event loop
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_store_calls_run_off_the_event_loop(self, store, tokens):
        """Store lookups and inserts run in worker threads, not on the loop thread."""
        loop_thread = threading.get_ident()
        seen: list[tuple[str, int]] = []

        recording = MagicMock(wraps=store)
        recording.find_by_email.side_effect = lambda email: (
            seen.append(("find_by_email", threading.get_ident())) or store.find_by_email(email)
        )
        recording.find_by_id.side_effect = lambda user_id: (
            seen.append(("find_by_id", threading.get_ident())) or store.find_by_id(user_id)
        )
        recording.create.side_effect = lambda user: (
            seen.append(("create", threading.get_ident())) or store.create(user)
        )
        service = AuthService(store=recording, tokens=tokens, bcrypt_rounds=4)

        registered = await service.register(register_request())
        await service.login(LoginRequest(email="ann@x.com", password="Password1"))
        await service.get_profile(registered.user.id)

        assert {name for name, _ in seen} == {"find_by_email", "create", "find_by_id"}
        assert all(ident != loop_thread for _, ident in seen)
