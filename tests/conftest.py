import os
import sys
import pytest

# Ensure the repo root (containing `config.py` and the `gstrong` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from gstrong import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET_KEY = 'test-jwt-secret-that-is-long-enough-for-hs256'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_TOKEN_LOCATION = ['headers']
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'WARNING'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def file_app(tmp_path):
    """Same app on a SQLite file, so requests on other threads share the data."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{tmp_path / "gstrong.db"}'

    application = create_app(FileConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(client, username='george', email=None, password='secret123'):
    res = client.post('/api/auth/register', json={
        'email': email or f'{username}@example.com',
        'username': username,
        'password': password,
    })
    assert res.status_code == 201, res.get_json()
    return res.get_json()


@pytest.fixture()
def auth(client):
    """Registers a user and returns (user_id, headers)."""
    data = register(client)
    headers = {'Authorization': f"Bearer {data['token']}"}
    return data['user']['id'], headers


@pytest.fixture()
def stats_user(flask_app):
    """A bare user + stats row created through the ORM, returns the user id."""
    from gstrong.models.user import User
    from gstrong.models.user_stats import UserStats

    user = User(email='ledger@example.com', username='ledger')
    user.set_password('secret123')
    db.session.add(user)
    db.session.flush()
    db.session.add(UserStats(id=user.id, points=100, xp=100, level=1))
    db.session.commit()
    return user.id
