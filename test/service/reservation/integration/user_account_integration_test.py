import pytest

from bus_reservation.platform.exception.exceptions import (
    ConflictError,
    InvalidInputError,
    LoginError,
    UserNotFoundError,
)
from bus_reservation.service.reservation.domain.enum.user_role import UserRole
from test.test_constants import DEFAULT_PASSWORD, TEST_CUSTOMER_USERNAME


@pytest.mark.integration
class TestUserAccount:
    @pytest.mark.asyncio
    async def test_register_normalizes_profile(self, user_account):
        user = await user_account.register(
            username=' carol ',
            email='Carol@Example.COM',
            password=DEFAULT_PASSWORD,
            full_name='Carol Wu',
        )

        assert user.id is not None
        assert user.username == 'carol'
        assert user.email == 'carol@example.com'
        assert user.role is UserRole.CUSTOMER
        assert user.hashed_password != DEFAULT_PASSWORD

    @pytest.mark.asyncio
    async def test_duplicate_username(self, user_account, customers):
        with pytest.raises(ConflictError):
            await user_account.register(
                username=TEST_CUSTOMER_USERNAME,
                email='someone.else@example.com',
                password=DEFAULT_PASSWORD,
                full_name='Someone Else',
            )

    @pytest.mark.asyncio
    async def test_short_password(self, user_account):
        with pytest.raises(InvalidInputError):
            await user_account.register(
                username='dave', email='dave@example.com', password='123', full_name='Dave'
            )

    @pytest.mark.asyncio
    async def test_authenticate(self, user_account, customers):
        user = await user_account.authenticate(
            username=TEST_CUSTOMER_USERNAME, password=DEFAULT_PASSWORD
        )

        assert user.id == customers['alice'].id
        stored = await user_account.get(user_id=user.id)
        assert stored.last_login_at is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'username,password',
        [(TEST_CUSTOMER_USERNAME, 'wrong-password'), ('nobody', DEFAULT_PASSWORD)],
    )
    async def test_bad_credentials(self, user_account, customers, username, password):
        with pytest.raises(LoginError):
            await user_account.authenticate(username=username, password=password)

    @pytest.mark.asyncio
    async def test_get_unknown_user(self, user_account):
        with pytest.raises(UserNotFoundError):
            await user_account.get(user_id=999)
