"""Tests for staff login, profile and password routes."""

from salonbook import db
from salonbook.models import User
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


class TestLogin:
    """Test session login and logout."""

    def test_login_and_me(self, client, seed):
        response = client.post('/auth/login', json={'email': ADMIN_EMAIL.upper(), 'password': ADMIN_PASSWORD})
        assert response.status_code == 200
        assert response.get_json()['user']['email'] == ADMIN_EMAIL

        me = client.get('/auth/me').get_json()['user']
        assert me['role'] == 'salon_admin'
        assert me['salon']['slug'] == 'studio-bella'

    def test_wrong_password(self, client, seed):
        response = client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': 'nope'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password.'

    def test_missing_fields(self, client, seed):
        response = client.post('/auth/login', json={'email': 'not-an-email'})
        assert response.status_code == 400
        fields = response.get_json()['fields']
        assert 'email' in fields
        assert 'password' in fields

    def test_deactivated_account(self, app, client, seed):
        with app.app_context():
            User.query.filter_by(email=ADMIN_EMAIL).one().is_active = False
            db.session.commit()

        response = client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
        assert response.status_code == 403

    def test_me_requires_login(self, client):
        response = client.get('/auth/me')
        assert response.status_code == 401
        assert 'error' in response.get_json()

    def test_logout(self, admin_client):
        assert admin_client.post('/auth/logout').status_code == 200
        assert admin_client.get('/auth/me').status_code == 401


class TestProfile:
    """Test profile updates and password changes."""

    def test_update_profile_keeps_unsent_fields(self, admin_client):
        response = admin_client.post('/auth/profile', json={'studio_name': 'Bella Hair'})
        user = response.get_json()['user']

        assert response.status_code == 200
        assert user['studio_name'] == 'Bella Hair'
        assert user['name'] == 'Owner'

    def test_change_password(self, admin_client):
        response = admin_client.post('/auth/change-password', json={
            'current_password': ADMIN_PASSWORD,
            'password': 'newsecret',
            'confirm_password': 'newsecret',
        })
        assert response.status_code == 200

        admin_client.post('/auth/logout')
        response = admin_client.post('/auth/login', json={'email': ADMIN_EMAIL, 'password': 'newsecret'})
        assert response.status_code == 200

    def test_change_password_wrong_current(self, admin_client):
        response = admin_client.post('/auth/change-password', json={
            'current_password': 'wrong',
            'password': 'newsecret',
            'confirm_password': 'newsecret',
        })
        assert response.status_code == 400

    def test_change_password_mismatch(self, admin_client):
        response = admin_client.post('/auth/change-password', json={
            'current_password': ADMIN_PASSWORD,
            'password': 'newsecret',
            'confirm_password': 'other',
        })
        assert response.status_code == 400
        assert 'confirm_password' in response.get_json()['fields']
