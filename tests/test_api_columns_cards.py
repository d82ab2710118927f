import pytest


@pytest.fixture
def board(auth_client):
    response = auth_client.post('/api/boards', json={
        'title': 'Work',
        'columns': [
            {'title': 'A', 'cards': [{'title': 'a1'}, {'title': 'a2'}, {'title': 'a3'}]},
            {'title': 'B', 'cards': [{'title': 'b1'}]},
            {'title': 'C'},
        ],
    })
    return response.get_json()


def fetch(client, board_id):
    return client.get(f'/api/boards/{board_id}').get_json()


def column_id(board, title):
    return next(c['id'] for c in board['columns'] if c['title'] == title)


def card_id(board, title):
    return next(c['id'] for c in board['cards'] if c['title'] == title)


def test_create_column_appends(auth_client, board):
    response = auth_client.post(f"/api/boards/{board['id']}/columns", json={'title': 'D', 'color': '#123456'})
    assert response.status_code == 201
    column = response.get_json()
    assert column['order'] == 3
    assert column['color'] == '#123456'
    assert column['boardId'] == board['id']


def test_create_column_accepts_empty_title(auth_client, board):
    response = auth_client.post(f"/api/boards/{board['id']}/columns", json={'title': ''})
    assert response.status_code == 201
    assert response.get_json()['color'] == '#8b949e'


def test_create_column_requires_title_key(auth_client, board):
    response = auth_client.post(f"/api/boards/{board['id']}/columns", json={'color': '#fff'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'The column title is required.'


def test_update_column(auth_client, board):
    col = column_id(board, 'A')
    response = auth_client.put(f'/api/columns/{col}', json={'color': '#000000'})
    assert response.get_json()['color'] == '#000000'
    assert response.get_json()['title'] == 'A'

    assert auth_client.put(f'/api/columns/{col}', json={}).status_code == 400
    assert auth_client.put('/api/columns/bad', json={'title': 'x'}).status_code == 400
    assert auth_client.put('/api/columns/' + 'f' * 32, json={'title': 'x'}).status_code == 404


def test_reorder_columns(auth_client, board):
    a, b, c = (column_id(board, t) for t in 'ABC')
    response = auth_client.put(f"/api/boards/{board['id']}/reorder-columns", json={'columnIds': [c, a, b]})
    assert response.status_code == 200
    assert [col['title'] for col in fetch(auth_client, board['id'])['columns']] == ['C', 'A', 'B']


def test_delete_column_cascades_without_renormalizing(auth_client, board):
    a = column_id(board, 'A')
    assert auth_client.delete(f'/api/columns/{a}').status_code == 200

    after = fetch(auth_client, board['id'])
    assert [(c['title'], c['order']) for c in after['columns']] == [('B', 1), ('C', 2)]
    assert [c['title'] for c in after['cards']] == ['b1']


def test_create_card(auth_client, board):
    c = column_id(board, 'C')
    response = auth_client.post(f'/api/columns/{c}/cards', json={'title': ' new '})
    assert response.status_code == 201
    card = response.get_json()
    assert card['title'] == 'new'
    assert card['order'] == 0
    assert card['columnId'] == c
    assert card['boardId'] == board['id']

    b = column_id(board, 'B')
    assert auth_client.post(f'/api/columns/{b}/cards', json={'title': 'b2'}).get_json()['order'] == 1


def test_create_card_requires_title(auth_client, board):
    response = auth_client.post(f"/api/columns/{column_id(board, 'A')}/cards", json={'title': ' '})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'The card title is required.'


def test_update_and_delete_card(auth_client, board):
    card = card_id(board, 'a1')
    response = auth_client.put(f'/api/cards/{card}', json={'title': 'renamed'})
    assert response.get_json()['title'] == 'renamed'
    assert auth_client.put(f'/api/cards/{card}', json={'title': ''}).status_code == 400

    assert auth_client.delete(f'/api/cards/{card}').status_code == 200
    assert auth_client.delete(f'/api/cards/{card}').status_code == 404


def test_reorder_cards_moves_between_columns(auth_client, board):
    a, b = column_id(board, 'A'), column_id(board, 'B')
    a1, a2, a3, b1 = (card_id(board, t) for t in ('a1', 'a2', 'a3', 'b1'))

    response = auth_client.put(f"/api/boards/{board['id']}/reorder-cards", json={'cards': [
        {'id': a1, 'order': 0, 'columnId': a},
        {'id': a3, 'order': 1, 'columnId': a},
        {'id': b1, 'order': 0, 'columnId': b},
        {'id': a2, 'order': 1, 'columnId': b},
    ]})
    assert response.status_code == 200

    after = fetch(auth_client, board['id'])
    assert [(c['title'], c['order'], c['columnId']) for c in after['cards']] == [
        ('a1', 0, a), ('a3', 1, a), ('b1', 0, b), ('a2', 1, b)]


def test_reorder_cards_validates_entries(auth_client, board):
    url = f"/api/boards/{board['id']}/reorder-cards"
    a1 = card_id(board, 'a1')
    a = column_id(board, 'A')

    assert auth_client.put(url, json={}).status_code == 400
    assert auth_client.put(url, json={'cards': [{'id': 'x', 'order': 0, 'columnId': a}]}).status_code == 400
    assert auth_client.put(url, json={'cards': [{'id': a1, 'order': '1', 'columnId': a}]}).status_code == 400
    assert auth_client.put(url, json={'cards': [{'id': a1, 'order': 0, 'columnId': 'f' * 32}]}).status_code == 400
    assert auth_client.put(url, json={'cards': []}).status_code == 200
