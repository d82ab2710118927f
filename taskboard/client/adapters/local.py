"""
Guest-mode persistence: the REST contract served from device storage.

Everything lives in one JSON record under ``taskboardData``::

    {"boards": [...], "columns": [...], "cards": [...], "preferences": {...}}

Each operation loads the whole record, applies one change and writes the
whole record back before returning.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from taskboard.client.adapters.base import PersistenceAdapter, Payload
from taskboard.client.adapters.storage import dumps
from taskboard.errors import NotFoundError, PersistenceFailure, ValidationError
from taskboard.utils.defaults import (
    DEFAULT_COLUMN_COLOR, DEFAULT_WALLPAPER, GUEST_WELCOME_BOARD, MAX_CUSTOM_WALLPAPERS
)
from taskboard.utils.ids import new_id
from taskboard.utils.ordering import positions, sort_by_order

logger = logging.getLogger(__name__)

STORAGE_KEY = 'taskboardData'
# Older releases kept columns and cards under keys of their own
LEGACY_KEYS = ('columns', 'cards')
MIGRATED_BOARD_TITLE = 'My Board'


def _now():
    return datetime.now(timezone.utc).isoformat()


def _by_order(records):
    return sort_by_order(records, key=lambda record: record.get('order'))


def _title(data, label):
    title = data.get('title') if isinstance(data, dict) else None
    title = title.strip() if isinstance(title, str) else ''
    if not title:
        raise ValidationError(f'The {label} title is required.')
    return title


def _column_record(board_id, data, order):
    return {
        'id': new_id(),
        'boardId': board_id,
        'title': (data.get('title') or '').strip(),
        'color': data.get('color') or DEFAULT_COLUMN_COLOR,
        'order': order,
    }


def _card_record(board_id, column_id, title, order):
    return {
        'id': new_id(),
        'boardId': board_id,
        'columnId': column_id,
        'title': title,
        'order': order,
    }


class LocalAdapter(PersistenceAdapter):
    def __init__(self, storage):
        self.storage = storage

    # Record access

    def _read(self, key):
        try:
            raw = self.storage.get_item(key)
        except OSError as e:
            raise PersistenceFailure(f'Could not read local data: {e}') from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning('Discarding unreadable local data under %r', key)
            return None

    def _save(self, data):
        try:
            self.storage.set_item(STORAGE_KEY, dumps(data))
        except OSError as e:
            raise PersistenceFailure(f'Could not save local data: {e}') from e

    def _load(self) -> Dict[str, Any]:
        data = self._read(STORAGE_KEY)
        if isinstance(data, dict) and isinstance(data.get('boards'), list):
            return data

        migrated = self._migrate(data)
        if migrated is None:
            migrated = self._seed()
        self._save(migrated)
        for key in LEGACY_KEYS:
            self.storage.remove_item(key)
        return migrated

    def _seed(self):
        logger.info('No local data found, creating the guest welcome board')
        data = {'boards': [], 'columns': [], 'cards': [], 'preferences': {}}
        board = self._insert_board(data, GUEST_WELCOME_BOARD['title'], GUEST_WELCOME_BOARD['columns'])
        data['preferences'] = {
            'lastActiveBoardId': board['id'],
            'wallpaper': DEFAULT_WALLPAPER,
            'customWallpapers': [],
        }
        return data

    def _migrate(self, data):
        """Convert a flat record, or separately stored columns/cards, to the current shape."""
        if isinstance(data, dict):
            columns = data.get('columns')
            cards = data.get('cards')
            preferences = data.get('preferences') or {}
        else:
            columns = self._read('columns')
            cards = self._read('cards')
            preferences = {}
        if not isinstance(columns, list):
            return None
        if not isinstance(cards, list):
            cards = []

        logger.info('Migrating %d columns and %d cards from the legacy local format',
                    len(columns), len(cards))
        board_id = new_id()
        migrated = {
            'boards': [{
                'id': board_id,
                'title': MIGRATED_BOARD_TITLE,
                'order': 0,
                'createdAt': _now(),
                'updatedAt': _now(),
            }],
            'columns': [],
            'cards': [],
            'preferences': {
                'lastActiveBoardId': board_id,
                'wallpaper': preferences.get('wallpaper') or DEFAULT_WALLPAPER,
                'customWallpapers': list(preferences.get('customWallpapers') or []),
            },
        }

        column_ids = {}
        for index, col in enumerate(_by_order(c for c in columns if isinstance(c, dict))):
            record = _column_record(board_id, col, index)
            old_id = col.get('id') or col.get('_id')
            if old_id is not None:
                column_ids[old_id] = record['id']
            migrated['columns'].append(record)

        counters = {}
        for card in _by_order(c for c in cards if isinstance(c, dict)):
            column_id = column_ids.get(card.get('columnId') or card.get('column'))
            if column_id is None or not card.get('title'):
                continue
            migrated['cards'].append(
                _card_record(board_id, column_id, card['title'], counters.get(column_id, 0)))
            counters[column_id] = counters.get(column_id, 0) + 1
        return migrated

    @staticmethod
    def _find(records, record_id, label):
        record = next((r for r in records if r['id'] == record_id), None)
        if record is None:
            raise NotFoundError(f'{label} not found.')
        return record

    @staticmethod
    def _insert_board(data, title, columns=()):
        board = {
            'id': new_id(),
            'title': title,
            'order': len(data['boards']),
            'createdAt': _now(),
            'updatedAt': _now(),
        }
        data['boards'].append(board)
        for col_index, col_data in enumerate(columns or []):
            column = _column_record(board['id'], col_data, col_index)
            data['columns'].append(column)
            for card_index, card_data in enumerate(col_data.get('cards') or []):
                data['cards'].append(_card_record(
                    board['id'], column['id'], _title(card_data, 'card'), card_index))
        return board

    def _populated(self, data, board):
        columns = _by_order(c for c in data['columns'] if c['boardId'] == board['id'])
        rank = {col['id']: index for index, col in enumerate(columns)}
        cards = sorted((c for c in data['cards'] if c['columnId'] in rank),
                       key=lambda c: (rank[c['columnId']], c['order']))
        return dict(board, columns=[dict(c) for c in columns], cards=[dict(c) for c in cards])

    # Preferences

    def get_preferences(self) -> Payload:
        prefs = self._load().get('preferences') or {}
        return {
            'lastActiveBoardId': prefs.get('lastActiveBoardId'),
            'wallpaper': prefs.get('wallpaper') or DEFAULT_WALLPAPER,
            'customWallpapers': list(prefs.get('customWallpapers') or []),
        }

    def update_preferences(self, patch: Payload) -> Payload:
        data = self._load()
        prefs = data.setdefault('preferences', {})
        if 'lastActiveBoardId' in patch:
            prefs['lastActiveBoardId'] = patch['lastActiveBoardId']
        if patch.get('wallpaper'):
            prefs['wallpaper'] = patch['wallpaper']
        if 'customWallpapers' in patch:
            prefs['customWallpapers'] = list(patch['customWallpapers'] or [])[:MAX_CUSTOM_WALLPAPERS]
        self._save(data)
        return self.get_preferences()

    # Boards

    def list_boards(self) -> List[Payload]:
        return [{'id': b['id'], 'title': b['title'], 'order': b['order']}
                for b in _by_order(self._load()['boards'])]

    def get_board_details(self, board_id: str) -> Payload:
        data = self._load()
        return self._populated(data, self._find(data['boards'], board_id, 'Board'))

    def create_board(self, data: Payload) -> Payload:
        title = _title(data, 'board')
        record = self._load()
        board = self._insert_board(record, title, data.get('columns'))
        self._save(record)
        return self._populated(record, board)

    def update_board(self, board_id: str, patch: Payload) -> Payload:
        title = _title(patch, 'board')
        data = self._load()
        board = self._find(data['boards'], board_id, 'Board')
        board['title'] = title
        board['updatedAt'] = _now()
        self._save(data)
        return self._populated(data, board)

    def delete_board(self, board_id: str) -> Optional[Payload]:
        data = self._load()
        self._find(data['boards'], board_id, 'Board')

        column_ids = {c['id'] for c in data['columns'] if c['boardId'] == board_id}
        data['boards'] = [b for b in data['boards'] if b['id'] != board_id]
        data['columns'] = [c for c in data['columns'] if c['boardId'] != board_id]
        data['cards'] = [c for c in data['cards'] if c['columnId'] not in column_ids]
        for index, board in enumerate(_by_order(data['boards'])):
            board['order'] = index

        prefs = data.get('preferences') or {}
        if prefs.get('lastActiveBoardId') == board_id:
            prefs['lastActiveBoardId'] = None
        self._save(data)
        return {'message': 'Board and all of its content deleted.'}

    def reorder_boards(self, ordered_ids: List[str]) -> Optional[Payload]:
        data = self._load()
        new_order = positions(ordered_ids)
        for board in data['boards']:
            board['order'] = new_order.get(board['id'], board['order'])
        self._save(data)
        return {'message': 'Board order updated.'}

    # Columns

    def create_column(self, board_id: str, data: Payload) -> Payload:
        record = self._load()
        self._find(record['boards'], board_id, 'Board')
        order = sum(1 for c in record['columns'] if c['boardId'] == board_id)
        column = _column_record(board_id, data, order)
        record['columns'].append(column)
        self._save(record)
        return dict(column)

    def update_column(self, column_id: str, patch: Payload) -> Payload:
        data = self._load()
        column = self._find(data['columns'], column_id, 'Column')
        title = (patch.get('title') or '').strip()
        color = patch.get('color')
        if not title and not color:
            raise ValidationError('No data provided to update.')
        if title:
            column['title'] = title
        if color:
            column['color'] = color
        self._save(data)
        return dict(column)

    def delete_column(self, column_id: str) -> Optional[Payload]:
        data = self._load()
        self._find(data['columns'], column_id, 'Column')
        data['columns'] = [c for c in data['columns'] if c['id'] != column_id]
        data['cards'] = [c for c in data['cards'] if c['columnId'] != column_id]
        self._save(data)
        return {'message': 'Column and its cards deleted.'}

    def reorder_columns(self, board_id: str, ordered_ids: List[str]) -> Optional[Payload]:
        data = self._load()
        self._find(data['boards'], board_id, 'Board')
        new_order = positions(ordered_ids)
        for column in data['columns']:
            if column['boardId'] == board_id:
                column['order'] = new_order.get(column['id'], column['order'])
        self._save(data)
        return {'message': 'Column order updated.'}

    # Cards

    def create_card(self, column_id: str, data: Payload) -> Payload:
        title = _title(data, 'card')
        record = self._load()
        column = self._find(record['columns'], column_id, 'Column')
        order = sum(1 for c in record['cards'] if c['columnId'] == column_id)
        card = _card_record(column['boardId'], column_id, title, order)
        record['cards'].append(card)
        self._save(record)
        return dict(card)

    def update_card(self, card_id: str, patch: Payload) -> Payload:
        title = _title(patch, 'card')
        data = self._load()
        card = self._find(data['cards'], card_id, 'Card')
        card['title'] = title
        self._save(data)
        return dict(card)

    def delete_card(self, card_id: str) -> Optional[Payload]:
        data = self._load()
        self._find(data['cards'], card_id, 'Card')
        data['cards'] = [c for c in data['cards'] if c['id'] != card_id]
        self._save(data)
        return {'message': 'Card deleted.'}

    def reorder_cards(self, board_id: str, card_patches: List[Payload]) -> Optional[Payload]:
        data = self._load()
        self._find(data['boards'], board_id, 'Board')
        column_ids = {c['id'] for c in data['columns'] if c['boardId'] == board_id}
        cards = {c['id']: c for c in data['cards'] if c['boardId'] == board_id}
        for patch in card_patches:
            if patch.get('columnId') not in column_ids:
                raise ValidationError('Each card entry needs a column of this board.')
        for patch in card_patches:
            card = cards.get(patch.get('id'))
            if card is not None:
                card['order'] = patch['order']
                card['columnId'] = patch['columnId']
        self._save(data)
        return {'message': 'Card order updated.'}
