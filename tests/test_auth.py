import pytest

from models import User
from services.auth import AuthError, authenticate, register_user

PASSWORD = 'password123'


def login(client, email, password=PASSWORD):
    return client.post('/auth/login', data={'email': email, 'password': password})


class TestAuthService:
    def test_register_normalizes_email_and_hashes_password(self, ctx):
        user = register_user('  Sam  ', 'Sam@Example.COM ', 'supersecret')
        assert user.name == 'Sam'
        assert user.email == 'sam@example.com'
        assert user.password_hash != 'supersecret'
        assert user.check_password('supersecret')

    def test_duplicate_email(self, ctx):
        register_user('Sam', 'sam@example.com', 'supersecret')
        with pytest.raises(AuthError, match='User with this email already exists'):
            register_user('Other Sam', 'SAM@example.com', 'supersecret')

    def test_short_password(self, ctx):
        with pytest.raises(AuthError, match='Password must be at least 8 characters long'):
            register_user('Sam', 'sam@example.com', 'short')
        assert User.query.count() == 0

    def test_invalid_email(self, ctx):
        with pytest.raises(AuthError):
            register_user('Sam', 'not-an-email', 'supersecret')

    def test_authenticate(self, ctx):
        register_user('Sam', 'sam@example.com', 'supersecret')
        assert authenticate('SAM@example.com', 'supersecret').name == 'Sam'
        with pytest.raises(AuthError):
            authenticate('sam@example.com', 'wrong-password')
        with pytest.raises(AuthError):
            authenticate('nobody@example.com', 'supersecret')


class TestAuthRoutes:
    def test_pages_require_login(self, client):
        response = client.get('/recipes')
        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

    def test_api_requires_login(self, client):
        response = client.post('/api/calculate', json={})
        assert response.status_code == 401
        assert response.get_json() == {'error': 'Authentication required'}

    def test_login_sets_session_cookie(self, client, user):
        response = login(client, user['email'])
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/')
        assert client.get_cookie('__session') is not None
        assert client.get('/').status_code == 200

    def test_login_follows_local_next(self, client, user):
        response = client.post('/auth/login?next=/menus',
                               data={'email': user['email'], 'password': PASSWORD})
        assert response.headers['Location'].endswith('/menus')

    def test_login_ignores_external_next(self, client, user):
        response = client.post('/auth/login?next=//evil.example.com/',
                               data={'email': user['email'], 'password': PASSWORD})
        assert 'evil.example.com' not in response.headers['Location']

    def test_login_invalid_credentials(self, client, user):
        response = login(client, user['email'], 'wrong-password')
        assert response.status_code == 200
        assert b'Invalid credentials. Please try again.' in response.data

    def test_register(self, client, app):
        response = client.post('/auth/register', data={
            'name': 'New Bartender', 'email': 'new@example.com',
            'password': 'longenough', 'confirmPassword': 'longenough',
        })
        assert response.status_code == 302
        assert client.get('/profile').status_code == 200
        with app.app_context():
            assert User.query.filter_by(email='new@example.com').count() == 1

    @pytest.mark.parametrize('form, message', [
        ({'name': 'A', 'email': 'a@example.com', 'password': 'longenough', 'confirmPassword': 'different1'},
         b'Passwords do not match'),
        ({'name': '', 'email': 'a@example.com', 'password': 'longenough', 'confirmPassword': 'longenough'},
         b'All fields are required'),
        ({'name': 'A', 'email': 'a@example.com', 'password': 'short', 'confirmPassword': 'short'},
         b'Password must be at least 8 characters long'),
    ])
    def test_register_errors(self, client, form, message):
        response = client.post('/auth/register', data=form)
        assert response.status_code == 200
        assert message in response.data

    def test_register_existing_email(self, client, user):
        response = client.post('/auth/register', data={
            'name': 'Dup', 'email': user['email'],
            'password': 'longenough', 'confirmPassword': 'longenough',
        })
        assert b'User with this email already exists' in response.data

    def test_logout(self, auth_client):
        response = auth_client.post('/auth/logout')
        assert response.status_code == 302
        assert auth_client.get('/').status_code == 302
