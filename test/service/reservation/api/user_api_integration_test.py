import pytest

from test.shared.utils import assert_response_status, create_customer, login_user
from test.test_constants import (
    AUTH_COOKIE,
    DEFAULT_PASSWORD,
    TEST_ADMIN_USERNAME,
    USER_BASE,
    USER_LOGIN,
)


@pytest.mark.integration
class TestUserApi:
    def test_register_creates_customer(self, client):
        user = create_customer(client, 'carol', 'Carol Wu')

        assert user['username'] == 'carol'
        assert user['role'] == 'customer'
        assert 'password' not in user
        assert 'hashed_password' not in user

    def test_register_ignores_role_escalation(self, client):
        response = client.post(
            USER_BASE,
            json={
                'username': 'mallory',
                'email': 'mallory@example.com',
                'password': DEFAULT_PASSWORD,
                'full_name': 'Mallory',
                'role': 'admin',
            },
        )

        assert_response_status(response, 201)
        assert response.json()['role'] == 'customer'

    def test_duplicate_username(self, client):
        create_customer(client, 'carol', 'Carol Wu')

        response = client.post(
            USER_BASE,
            json={
                'username': 'carol',
                'email': 'carol2@example.com',
                'password': DEFAULT_PASSWORD,
                'full_name': 'Carol Two',
            },
        )

        assert_response_status(response, 409)

    def test_invalid_email_is_rejected(self, client):
        response = client.post(
            USER_BASE,
            json={
                'username': 'erin',
                'email': 'not-an-email',
                'password': DEFAULT_PASSWORD,
                'full_name': 'Erin',
            },
        )

        assert_response_status(response, 400)

    def test_login_sets_cookie_and_returns_profile(self, client):
        response = login_user(client, TEST_ADMIN_USERNAME)

        assert AUTH_COOKIE in response.cookies
        assert response.json()['role'] == 'admin'

    def test_login_with_wrong_password(self, client):
        response = client.post(
            USER_LOGIN, json={'username': TEST_ADMIN_USERNAME, 'password': 'wrong-password'}
        )

        assert_response_status(response, 400)
        assert response.json()['detail'] == 'LOGIN_BAD_CREDENTIALS'

    def test_me_requires_login(self, client):
        assert_response_status(client.get(USER_BASE), 401)

    def test_me_returns_current_user(self, client):
        create_customer(client, 'carol', 'Carol Wu')
        login_user(client, 'carol')

        response = client.get(USER_BASE)

        assert_response_status(response, 200)
        assert response.json()['full_name'] == 'Carol Wu'
        assert response.json()['last_login_at'] is not None
