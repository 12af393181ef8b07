"""
Unit tests for services.account_service module.
"""
import httpx
import pytest
from core.exceptions import AuthError, CreditUpdateError
from services.account_service import AccountService, normalize_email


@pytest.fixture
def accounts(backend_client):
    return AccountService(backend_client)


class TestNormalizeEmail:
    """Tests for normalize_email."""

    def test_trims_and_lowercases(self):
        assert normalize_email('  Reader@Example.COM ') == 'reader@example.com'

    def test_none(self):
        assert normalize_email(None) == ''


class TestLogin:
    """Tests for AccountService.login."""

    @pytest.mark.asyncio
    async def test_login(self, accounts, fake_backend):
        """Test the backend user is returned as-is."""
        user = await accounts.login('Reader@Example.com')

        assert user.id == 'user-1'
        assert user.email == 'reader@example.com'
        assert user.credits == fake_backend.initial_credits
        assert fake_backend.calls_to('/api/users') == [{'email': 'reader@example.com'}]

    @pytest.mark.asyncio
    async def test_empty_email(self, accounts, fake_backend):
        with pytest.raises(ValueError):
            await accounts.login('   ')
        assert fake_backend.calls == []

    @pytest.mark.asyncio
    async def test_rejected(self, accounts, fake_backend):
        """Test the error carries upstream status and text."""
        fake_backend.fail('/api/users', 403, {'detail': 'banned'})

        with pytest.raises(AuthError) as exc_info:
            await accounts.login('a@example.com')

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == 'banned'
        assert str(exc_info.value).startswith('Login failed: 403')

    @pytest.mark.asyncio
    async def test_unreachable(self, accounts, fake_backend):
        fake_backend.raise_on('/api/users', httpx.ConnectError("refused"))

        with pytest.raises(AuthError):
            await accounts.login('a@example.com')

    @pytest.mark.asyncio
    async def test_malformed_user(self, accounts, fake_backend):
        fake_backend.fail('/api/users', 200, {'email': 'a@example.com'})

        with pytest.raises(AuthError):
            await accounts.login('a@example.com')


class TestUpdateCredits:
    """Tests for AccountService.update_credits."""

    @pytest.mark.asyncio
    async def test_relays_signed_delta(self, accounts, fake_backend):
        """Test the delta is sent and the backend balance returned."""
        await accounts.login('a@example.com')

        user = await accounts.update_credits('user-1', -1)

        assert user.credits == fake_backend.initial_credits - 1
        assert fake_backend.calls_to('/api/users/user-1/credits') == [{'amount': -1}]

    @pytest.mark.asyncio
    async def test_unknown_user(self, accounts):
        """Test a 404 becomes CreditUpdateError."""
        with pytest.raises(CreditUpdateError) as exc_info:
            await accounts.update_credits('ghost', 10)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_default_detail(self, accounts, fake_backend):
        fake_backend.fail('/api/users/user-1/credits', 500, 'oops')

        with pytest.raises(CreditUpdateError) as exc_info:
            await accounts.update_credits('user-1', 10)

        assert exc_info.value.detail == 'Failed to update credits'

    @pytest.mark.asyncio
    async def test_transport_error(self, accounts, fake_backend):
        fake_backend.raise_on('/api/users/user-1/credits', httpx.ReadTimeout("slow"))

        with pytest.raises(CreditUpdateError):
            await accounts.update_credits('user-1', -1)
