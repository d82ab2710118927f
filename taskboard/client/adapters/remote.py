"""
Persistence adapter for the REST backend.

Uses a ``requests.Session`` so the login cookie and CSRF token carry over
between calls. Error responses are mapped back onto the shared error
taxonomy using the status code and the ``message`` field of the body.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from taskboard.client.adapters.base import PersistenceAdapter, Payload
from taskboard.errors import NotFoundError, PersistenceFailure, ValidationError

logger = logging.getLogger(__name__)


class RemoteAdapter(PersistenceAdapter):
    def __init__(self, base_url: str, session=None, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self._csrf_token: Optional[str] = None

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        headers = {'Content-Type': 'application/json'}
        if method != 'GET':
            if self._csrf_token is None:
                self.fetch_csrf_token()
            headers['X-CSRFToken'] = self._csrf_token

        try:
            response = self.session.request(
                method,
                f'{self.base_url}{path}',
                headers=headers,
                json=json,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning('%s %s failed: %s', method, path, e)
            raise PersistenceFailure(f'Could not reach the server: {e}') from e

        if response.status_code >= 400:
            raise self._error_for(method, path, response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PersistenceFailure('The server sent an unreadable response.',
                                     upstream_status=response.status_code) from e

    def _error_for(self, method, path, response):
        try:
            message = response.json().get('message')
        except (ValueError, AttributeError):
            message = None
        status = response.status_code
        logger.info('%s %s returned %s: %s', method, path, status, message)

        if status in (400, 422):
            return ValidationError(message or 'The request was not valid.')
        if status == 404:
            return NotFoundError(message or 'Not found.')
        return PersistenceFailure(message or f'The server returned {status}.',
                                  upstream_status=status)

    # Session

    def fetch_csrf_token(self) -> str:
        self._csrf_token = self._request('GET', '/auth/csrf')['csrfToken']
        return self._csrf_token

    def login(self, username: str, password: str, remember: bool = False) -> Payload:
        return self._request('POST', '/auth/login', {
            'username': username,
            'password': password,
            'remember': remember
        })

    def register(self, username: str, email: str, password: str) -> Payload:
        return self._request('POST', '/auth/register', {
            'username': username,
            'email': email,
            'password': password
        })

    def logout(self):
        self._request('POST', '/auth/logout')
        self._csrf_token = None

    def current_user(self) -> Payload:
        return self._request('GET', '/auth/me')

    # Preferences

    def get_preferences(self) -> Payload:
        return self._request('GET', '/user/preferences')

    def update_preferences(self, patch: Payload) -> Payload:
        return self._request('PUT', '/user/preferences', patch)

    # Boards

    def list_boards(self) -> List[Payload]:
        return self._request('GET', '/boards/list')

    def get_board_details(self, board_id: str) -> Payload:
        return self._request('GET', f'/boards/{board_id}')

    def create_board(self, data: Payload) -> Payload:
        return self._request('POST', '/boards', data)

    def update_board(self, board_id: str, patch: Payload) -> Payload:
        return self._request('PUT', f'/boards/{board_id}', patch)

    def delete_board(self, board_id: str) -> Optional[Payload]:
        return self._request('DELETE', f'/boards/{board_id}')

    def reorder_boards(self, ordered_ids: List[str]) -> Optional[Payload]:
        return self._request('PUT', '/boards/reorder', {'boardIds': list(ordered_ids)})

    # Columns

    def create_column(self, board_id: str, data: Payload) -> Payload:
        return self._request('POST', f'/boards/{board_id}/columns', data)

    def update_column(self, column_id: str, patch: Payload) -> Payload:
        return self._request('PUT', f'/columns/{column_id}', patch)

    def delete_column(self, column_id: str) -> Optional[Payload]:
        return self._request('DELETE', f'/columns/{column_id}')

    def reorder_columns(self, board_id: str, ordered_ids: List[str]) -> Optional[Payload]:
        return self._request('PUT', f'/boards/{board_id}/reorder-columns',
                             {'columnIds': list(ordered_ids)})

    # Cards

    def create_card(self, column_id: str, data: Payload) -> Payload:
        return self._request('POST', f'/columns/{column_id}/cards', data)

    def update_card(self, card_id: str, patch: Payload) -> Payload:
        return self._request('PUT', f'/cards/{card_id}', patch)

    def delete_card(self, card_id: str) -> Optional[Payload]:
        return self._request('DELETE', f'/cards/{card_id}')

    def reorder_cards(self, board_id: str, card_patches: List[Dict[str, Any]]) -> Optional[Payload]:
        return self._request('PUT', f'/boards/{board_id}/reorder-cards', {'cards': list(card_patches)})
