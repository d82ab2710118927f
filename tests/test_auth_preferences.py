from config import TestingConfig
from taskboard import create_app, db
from taskboard.models.user import User
from conftest import login, register


def test_register_and_me(client):
    response = register(client)
    assert response.status_code == 201
    assert response.get_json()['username'] == 'alice'

    assert client.get('/api/auth/me').status_code == 401
    assert login(client).status_code == 200
    assert client.get('/api/auth/me').get_json()['email'] == 'alice@example.com'


def test_register_rejects_duplicates_and_bad_input(client):
    register(client)
    response = register(client, email='other@example.com')
    assert response.status_code == 400
    assert 'Username already taken' in response.get_json()['message']

    response = register(client, username='bob', email='alice@example.com')
    assert 'Email already registered' in response.get_json()['message']

    assert register(client, username='carol', email='not-an-email').status_code == 400
    assert register(client, username='dave', password='123').status_code == 400


def test_login_with_wrong_password(client):
    register(client)
    response = login(client, password='wrong-password')
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid username or password.'


def test_logout(auth_client):
    assert auth_client.post('/api/auth/logout').status_code == 200
    assert auth_client.get('/api/boards/list').status_code == 401


def test_preferences_defaults(auth_client):
    prefs = auth_client.get('/api/user/preferences').get_json()
    assert prefs['wallpaper'] == '/wallpapers/wallpaper-0.webp'
    assert prefs['customWallpapers'] == []


def test_update_preferences(auth_client):
    urls = [f'https://example.com/{n}.jpg' for n in range(6)]
    response = auth_client.put('/api/user/preferences', json={
        'wallpaper': urls[0],
        'customWallpapers': urls,
        'lastActiveBoardId': None,
    })
    assert response.status_code == 200
    prefs = response.get_json()
    assert prefs['wallpaper'] == urls[0]
    assert prefs['customWallpapers'] == urls[:4]
    assert prefs['lastActiveBoardId'] is None


def test_custom_wallpapers_stored_as_json_list(app):
    with app.app_context():
        user = User(username='bob', email='bob@example.com')
        user.set_password('secret123')
        user.custom_wallpapers = (f'https://example.com/{n}.jpg' for n in range(6))
        db.session.add(user)
        db.session.commit()
        db.session.expire_all()

        user = User.query.filter_by(username='bob').first()
        assert user.custom_wallpapers == [f'https://example.com/{n}.jpg' for n in range(4)]
        assert user.preferences()['customWallpapers'] == user.custom_wallpapers

        fresh = User(username='carol', email='carol@example.com')
        db.session.add(fresh)
        db.session.commit()
        assert fresh.preferences()['customWallpapers'] == []


def test_update_preferences_validation(auth_client):
    assert auth_client.put('/api/user/preferences', json={'lastActiveBoardId': 'nope'}).status_code == 400
    assert auth_client.put('/api/user/preferences', json={'wallpaper': ''}).status_code == 400
    assert auth_client.put('/api/user/preferences', json={'customWallpapers': 'x'}).status_code == 400
    assert auth_client.put('/api/user/preferences', json=[1, 2]).status_code == 400


class CSRFConfig(TestingConfig):
    WTF_CSRF_ENABLED = True


def test_csrf_token_required_when_enabled():
    app = create_app(CSRFConfig)
    client = app.test_client()

    response = register(client)
    assert response.status_code == 400
    assert 'CSRF' in response.get_json()['message']

    token = client.get('/api/auth/csrf').get_json()['csrfToken']
    response = client.post('/api/auth/register', headers={'X-CSRFToken': token}, json={
        'username': 'alice', 'email': 'alice@example.com', 'password': 'secret123'})
    assert response.status_code == 201
