import json

import pytest

from taskboard.client.adapters import FileStorage, LocalAdapter, MemoryStorage
from taskboard.client.adapters.local import STORAGE_KEY
from taskboard.errors import NotFoundError, PersistenceFailure, ValidationError


def test_first_use_seeds_guest_board(local_adapter, storage):
    boards = local_adapter.list_boards()
    assert [b['title'] for b in boards] == ['Welcome, Guest!']

    board = local_adapter.get_board_details(boards[0]['id'])
    assert [c['title'] for c in board['columns']] == ['To Do', 'In Progress', 'Done']
    assert len(board['cards']) == 4
    assert local_adapter.get_preferences()['lastActiveBoardId'] == boards[0]['id']

    stored = json.loads(storage.get_item(STORAGE_KEY))
    assert set(stored) == {'boards', 'columns', 'cards', 'preferences'}


def test_create_board_with_columns(local_adapter):
    board = local_adapter.create_board({'title': 'Mine', 'columns': [{'title': 'To Do', 'color': '#42A5F5'}]})
    assert board['order'] == 1
    assert [c['title'] for c in board['columns']] == ['To Do']
    assert board['cards'] == []

    with pytest.raises(ValidationError):
        local_adapter.create_board({'title': '  '})


def test_delete_board_cascades_and_renormalizes(local_adapter, storage):
    welcome = local_adapter.list_boards()[0]
    second = local_adapter.create_board({'title': 'Second'})
    third = local_adapter.create_board({'title': 'Third'})

    local_adapter.delete_board(welcome['id'])

    assert [(b['id'], b['order']) for b in local_adapter.list_boards()] == [
        (second['id'], 0), (third['id'], 1)]
    stored = json.loads(storage.get_item(STORAGE_KEY))
    assert not [c for c in stored['columns'] if c['boardId'] == welcome['id']]
    assert not [c for c in stored['cards'] if c['boardId'] == welcome['id']]
    assert stored['preferences']['lastActiveBoardId'] is None

    with pytest.raises(NotFoundError):
        local_adapter.delete_board(welcome['id'])


def test_columns_and_cards(local_adapter):
    board = local_adapter.create_board({'title': 'B'})
    col = local_adapter.create_column(board['id'], {'title': 'Todo'})
    assert col['order'] == 0
    assert col['color'] == '#8b949e'

    card = local_adapter.create_card(col['id'], {'title': 'task'})
    assert card['order'] == 0
    assert local_adapter.create_card(col['id'], {'title': 'next'})['order'] == 1

    assert local_adapter.update_card(card['id'], {'title': 'done'})['title'] == 'done'
    assert local_adapter.update_column(col['id'], {'color': '#fff'})['color'] == '#fff'
    with pytest.raises(ValidationError):
        local_adapter.update_column(col['id'], {})
    with pytest.raises(ValidationError):
        local_adapter.create_card(col['id'], {'title': ''})

    local_adapter.delete_card(card['id'])
    assert [c['title'] for c in local_adapter.get_board_details(board['id'])['cards']] == ['next']
    with pytest.raises(NotFoundError):
        local_adapter.update_card(card['id'], {'title': 'x'})


def test_delete_column_removes_cards_only_from_that_column(local_adapter):
    board_id = local_adapter.list_boards()[0]['id']
    details = local_adapter.get_board_details(board_id)
    todo = details['columns'][0]

    local_adapter.delete_column(todo['id'])

    after = local_adapter.get_board_details(board_id)
    assert [(c['title'], c['order']) for c in after['columns']] == [('In Progress', 1), ('Done', 2)]
    assert all(c['columnId'] != todo['id'] for c in after['cards'])
    assert len(after['cards']) == 2


def test_reorder_columns_and_cards(local_adapter):
    board_id = local_adapter.list_boards()[0]['id']
    details = local_adapter.get_board_details(board_id)
    todo, doing, done = (c['id'] for c in details['columns'])

    local_adapter.reorder_columns(board_id, [done, todo, doing])
    assert [c['id'] for c in local_adapter.get_board_details(board_id)['columns']] == [done, todo, doing]

    first_card = details['cards'][0]
    local_adapter.reorder_cards(board_id, [{'id': first_card['id'], 'order': 0, 'columnId': done}])
    moved = next(c for c in local_adapter.get_board_details(board_id)['cards'] if c['id'] == first_card['id'])
    assert moved['columnId'] == done

    with pytest.raises(ValidationError):
        local_adapter.reorder_cards(board_id, [{'id': first_card['id'], 'order': 0, 'columnId': 'elsewhere'}])


def test_preferences_are_capped(local_adapter):
    urls = [f'u{n}' for n in range(6)]
    prefs = local_adapter.update_preferences({'wallpaper': 'u0', 'customWallpapers': urls})
    assert prefs['wallpaper'] == 'u0'
    assert prefs['customWallpapers'] == urls[:4]


def test_migrates_flat_record():
    storage = MemoryStorage({STORAGE_KEY: json.dumps({
        'columns': [{'id': 'old-2', 'title': 'Later', 'order': 1}, {'id': 'old-1', 'title': 'Now', 'order': 0}],
        'cards': [{'id': 'k', 'title': 'thing', 'column': 'old-1', 'order': 0},
                  {'id': 'orphan', 'title': 'lost', 'column': 'gone', 'order': 0}],
        'preferences': {'wallpaper': '/wallpapers/wallpaper-3.webp'},
    })})
    adapter = LocalAdapter(storage)

    boards = adapter.list_boards()
    assert len(boards) == 1
    details = adapter.get_board_details(boards[0]['id'])
    assert [c['title'] for c in details['columns']] == ['Now', 'Later']
    assert [(c['title'], c['columnId']) for c in details['cards']] == [('thing', details['columns'][0]['id'])]
    assert adapter.get_preferences()['wallpaper'] == '/wallpapers/wallpaper-3.webp'
    assert 'boards' in json.loads(storage.get_item(STORAGE_KEY))


def test_migrates_separate_legacy_keys():
    storage = MemoryStorage({
        'columns': json.dumps([{'id': 'c', 'title': 'Todo'}]),
        'cards': json.dumps([{'id': 'k', 'title': 'thing', 'column': 'c'}]),
    })
    adapter = LocalAdapter(storage)

    details = adapter.get_board_details(adapter.list_boards()[0]['id'])
    assert [c['title'] for c in details['cards']] == ['thing']
    assert storage.get_item('columns') is None
    assert storage.get_item('cards') is None


class BrokenStorage(MemoryStorage):
    def set_item(self, key, value):
        raise OSError('disk full')


def test_storage_errors_become_persistence_failures():
    with pytest.raises(PersistenceFailure):
        LocalAdapter(BrokenStorage()).list_boards()


def test_file_storage_round_trip(tmp_path):
    adapter = LocalAdapter(FileStorage(str(tmp_path / 'data')))
    board = adapter.create_board({'title': 'On disk'})

    reopened = LocalAdapter(FileStorage(str(tmp_path / 'data')))
    assert board['id'] in [b['id'] for b in reopened.list_boards()]
    assert (tmp_path / 'data' / f'{STORAGE_KEY}.json').exists()
