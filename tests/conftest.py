import json

import pytest

from config import TestingConfig
from taskboard import create_app, db
from taskboard.client.adapters import LocalAdapter, MemoryStorage, RemoteAdapter
from taskboard.client.notifications import Notifier
from taskboard.client.session import TaskboardSession
from taskboard.client.timers import ManualClock, TimerQueue

API_BASE = 'http://testserver/api'


class ClientResponse:
    """The parts of ``requests.Response`` the remote adapter reads."""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.content = response.get_data()

    def json(self):
        return json.loads(self.content.decode('utf-8'))


class FlaskClientSession:
    """A ``requests.Session`` stand-in that sends requests to the Flask test client."""

    def __init__(self, client, base='http://testserver'):
        self.client = client
        self.base = base
        self.calls = []

    def request(self, method, url, headers=None, json=None, timeout=None):
        path = url[len(self.base):] if url.startswith(self.base) else url
        self.calls.append((method, path, json))
        response = self.client.open(path, method=method, headers=headers, json=json)
        return ClientResponse(response)


def register(client, username='alice', email=None, password='secret123'):
    return client.post('/api/auth/register', json={
        'username': username,
        'email': email or f'{username}@example.com',
        'password': password,
    })


def login(client, username='alice', password='secret123'):
    return client.post('/api/auth/login', json={'username': username, 'password': password})


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """A test client logged in as a freshly registered user."""
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timers(clock):
    return TimerQueue(clock=clock)


@pytest.fixture
def remote_adapter(auth_client):
    return RemoteAdapter(API_BASE, session=FlaskClientSession(auth_client))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def local_adapter(storage):
    return LocalAdapter(storage)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def guest_session(local_adapter, timers, notifier):
    session = TaskboardSession(local_adapter, timers=timers, notifier=notifier)
    assert session.load()
    return session


@pytest.fixture
def online_session(remote_adapter, timers, notifier):
    session = TaskboardSession(remote_adapter, timers=timers, notifier=notifier)
    assert session.load()
    return session
