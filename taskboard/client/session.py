"""
The client application state.

A :class:`TaskboardSession` owns one entity store and the persistence
adapter picked for it, and exposes the operations a board UI needs: load,
board switching, inline editing of cards and columns, animated deletes,
drag and drop, and wallpaper preferences. Every mutation updates the store
first; the matching persistence call runs afterwards and its failures are
reported through the notifier without undoing the change.
"""
import logging
from dataclasses import replace
from typing import Optional
from uuid import uuid4

from config import ClientConfig
from taskboard.client import reorder
from taskboard.client.drag import DragSessionController
from taskboard.client.entities import (
    Card, Column, Preferences, board_from_payload, card_from_payload, column_from_payload
)
from taskboard.client.lifecycle import BoardLifecycleManager, is_temporary
from taskboard.client.notifications import Notifier
from taskboard.client.store import EntityStore
from taskboard.client.timers import TimerQueue
from taskboard.errors import NotFoundError, TaskboardError, ValidationError
from taskboard.utils.defaults import MAX_CUSTOM_WALLPAPERS, NEW_COLUMN_TITLE, WELCOME_BOARD
from taskboard.utils.ordering import sort_by_order

logger = logging.getLogger(__name__)

DRAFT_PREFIX = 'draft-'


def is_draft(item_id):
    return item_id is not None and item_id.startswith(DRAFT_PREFIX)


def draft_id():
    return f'{DRAFT_PREFIX}{uuid4().hex}'


class TaskboardSession:
    def __init__(self, adapter, config=ClientConfig, timers=None, notifier=None):
        self.adapter = adapter
        self.config = config
        self.timers = timers or TimerQueue()
        self.notifier = notifier or Notifier()
        self.store = EntityStore(writer=self._run_write)
        self.preferences = Preferences()

        self.is_loading = False
        self.exiting_ids = set()
        self.editing_card_id: Optional[str] = None
        self.editing_column_id: Optional[str] = None
        self.column_to_delete: Optional[str] = None

        self.lifecycle = BoardLifecycleManager(self.store, adapter, self.notifier,
                                               activate=self.set_active_board)
        self.drag = DragSessionController(self)

    @property
    def boards(self):
        return self.store.boards

    @property
    def active_board(self):
        return self.store.active_board

    # Write boundary

    def _run_write(self, write):
        try:
            write()
        except TaskboardError as e:
            self._report(e)

    def _report(self, error: TaskboardError):
        logger.warning('%s: %s', type(error).__name__, error.message)
        if isinstance(error, NotFoundError):
            message = f'Not found: {error.message}'
        elif isinstance(error, ValidationError):
            message = error.message
        else:
            message = f'Your changes could not be saved. {error.message}'
        self.notifier.notify(message, 'danger')

    # Loading

    def load(self) -> bool:
        """Fetch the board list and preferences, then open the last active board.

        An account without boards gets the welcome board.
        """
        self.is_loading = True
        try:
            summaries = self.adapter.list_boards()
            if not summaries:
                summaries = [self.adapter.create_board(WELCOME_BOARD)]
            prefs = self.adapter.get_preferences()
        except TaskboardError as e:
            self._report(e)
            return False
        finally:
            self.is_loading = False

        self.preferences = Preferences.from_payload(prefs)
        self.store.replace_all(sort_by_order(board_from_payload(s) for s in summaries))
        logger.info('Loaded %d boards', len(self.store.boards))
        self.set_active_board(self.preferences.last_active_board_id)
        return True

    def set_active_board(self, board_id: Optional[str]) -> Optional[str]:
        """Switch boards, loading the board's content the first time it is opened."""
        resolved = self.store.set_active_board(board_id)
        if resolved is None or is_temporary(resolved):
            return resolved

        self.load_board_details(resolved)
        if resolved != self.preferences.last_active_board_id:
            self.preferences.last_active_board_id = resolved
            self._run_write(lambda: self.adapter.update_preferences({'lastActiveBoardId': resolved}))
        return resolved

    def load_board_details(self, board_id: str) -> bool:
        board = self.store.board(board_id)
        if board is None or board.loaded or is_temporary(board_id):
            return False
        try:
            payload = self.adapter.get_board_details(board_id)
        except TaskboardError as e:
            self._report(e)
            return False

        details = board_from_payload(payload)
        return self.store.mutate_board(board_id, lambda current: replace(details, order=current.order))

    # Hooks used by the drag controller

    def update_active_board(self, updater) -> bool:
        return self.store.mutate_active_board(updater)

    def persist_card_order(self):
        board = self.active_board
        if board is None or is_temporary(board.id):
            return
        patches = [patch for patch in reorder.card_patches(board) if not is_draft(patch['id'])]
        self._run_write(lambda: self.adapter.reorder_cards(board.id, patches))

    def persist_column_order(self):
        board = self.active_board
        if board is None or is_temporary(board.id):
            return
        column_ids = [col_id for col_id in reorder.column_ids(board) if not is_draft(col_id)]
        self._run_write(lambda: self.adapter.reorder_columns(board.id, column_ids))

    def remove_card_later(self, card_id: str):
        """Mark a card as exiting and delete it once the exit animation is over."""
        self.exiting_ids.add(card_id)
        self.timers.call_later(self.config.EXIT_ANIMATION_MS, lambda: self.delete_card(card_id))

    def is_exiting(self, item_id: str) -> bool:
        return item_id in self.exiting_ids

    # Cards

    def _board_with_card(self, card_id):
        return next((board for board in self.store.boards if board.card(card_id) is not None), None)

    def _board_with_column(self, column_id):
        return next((board for board in self.store.boards if board.column(column_id) is not None), None)

    def add_card(self, column_id: str) -> Optional[str]:
        """Append an empty card to a column and open it for editing."""
        board = self.active_board
        if board is None or board.column(column_id) is None or is_draft(column_id):
            return None
        draft = Card(id=draft_id(), title='', column_id=column_id)
        self.store.mutate_active_board(lambda b: b.append_card(draft))
        self.editing_card_id = draft.id
        return draft.id

    def finish_card_edit(self, card_id: str, title: str) -> Optional[str]:
        """Save an edited card title and return the card's id.

        A card left blank is removed after the exit animation.
        """
        self.editing_card_id = None
        title = (title or '').strip()
        board = self._board_with_card(card_id)
        if board is None:
            return None
        card = board.card(card_id)

        if not title:
            self.remove_card_later(card_id)
            return None
        if is_draft(card_id):
            return self._create_card(board.id, card, title)

        if title == card.title:
            return card_id
        self.store.mutate_board(
            board.id,
            lambda b: b.update_card(card_id, title=title),
            write=lambda: self.adapter.update_card(card_id, {'title': title})
        )
        return card_id

    def _create_card(self, board_id, draft, title):
        self.store.mutate_board(board_id, lambda b: b.update_card(draft.id, title=title))
        try:
            payload = self.adapter.create_card(draft.column_id, {'title': title})
        except TaskboardError as e:
            self._report(e)
            return draft.id

        created = card_from_payload(payload)
        self.store.mutate_board(board_id, lambda b: b.update_card(draft.id, id=created.id))
        return created.id

    def delete_card(self, card_id: str) -> bool:
        self.exiting_ids.discard(card_id)
        board = self._board_with_card(card_id)
        if board is None:
            return False
        write = None if is_draft(card_id) else (lambda: self.adapter.delete_card(card_id))
        return self.store.mutate_board(board.id, lambda b: b.without_card(card_id), write)

    # Columns

    def add_column(self) -> Optional[str]:
        """Append an empty column to the active board and open it for editing."""
        draft = Column(id=draft_id(), title='')
        if not self.store.mutate_active_board(lambda b: b.append_column(draft)):
            return None
        self.editing_column_id = draft.id
        return draft.id

    def finish_column_edit(self, column_id: str, title: str) -> Optional[str]:
        self.editing_column_id = None
        board = self._board_with_column(column_id)
        if board is None:
            return None
        column = board.column(column_id)
        title = (title or '').strip() or NEW_COLUMN_TITLE

        if is_draft(column_id):
            self.store.mutate_board(board.id, lambda b: b.update_column(column_id, title=title))
            try:
                payload = self.adapter.create_column(board.id, {'title': title, 'color': column.color})
            except TaskboardError as e:
                self._report(e)
                return column_id
            created = column_from_payload(payload)
            self.store.mutate_board(board.id, lambda b: b.update_column(column_id, id=created.id))
            return created.id

        if title != column.title:
            self.store.mutate_board(
                board.id,
                lambda b: b.update_column(column_id, title=title),
                write=lambda: self.adapter.update_column(column_id, {'title': title})
            )
        return column_id

    def set_column_color(self, column_id: str, color: str) -> bool:
        board = self._board_with_column(column_id)
        if board is None or not color or board.column(column_id).color == color:
            return False
        write = None if is_draft(column_id) else (
            lambda: self.adapter.update_column(column_id, {'color': color}))
        return self.store.mutate_board(board.id, lambda b: b.update_column(column_id, color=color), write)

    def request_delete_column(self, column_id: str):
        self.column_to_delete = column_id

    def cancel_delete_column(self):
        self.column_to_delete = None

    def confirm_delete_column(self) -> bool:
        """Start the exit animation of the column awaiting confirmation; it is removed afterwards."""
        column_id = self.column_to_delete
        self.column_to_delete = None
        if column_id is None or self._board_with_column(column_id) is None:
            return False
        self.exiting_ids.add(column_id)
        self.timers.call_later(self.config.EXIT_ANIMATION_MS, lambda: self._remove_column(column_id))
        return True

    def _remove_column(self, column_id):
        self.exiting_ids.discard(column_id)
        board = self._board_with_column(column_id)
        if board is None:
            return
        write = None if is_draft(column_id) else (lambda: self.adapter.delete_column(column_id))
        self.store.mutate_board(board.id, lambda b: b.without_column(column_id), write)

    # Wallpapers

    def set_wallpaper(self, url: str):
        if not url or url == self.preferences.wallpaper:
            return
        self.preferences.wallpaper = url
        self._run_write(lambda: self.adapter.update_preferences({'wallpaper': url}))

    def add_custom_wallpaper(self, url: str):
        """Remember a custom wallpaper URL (most recent first) and select it."""
        if not url:
            return
        custom = [url] + [item for item in self.preferences.custom_wallpapers if item != url]
        self.preferences.custom_wallpapers = custom[:MAX_CUSTOM_WALLPAPERS]
        self.preferences.wallpaper = url
        patch = {'wallpaper': url, 'customWallpapers': list(self.preferences.custom_wallpapers)}
        self._run_write(lambda: self.adapter.update_preferences(patch))

    def remove_custom_wallpaper(self, url: str):
        if url not in self.preferences.custom_wallpapers:
            return
        self.preferences.custom_wallpapers = [item for item in self.preferences.custom_wallpapers
                                              if item != url]
        patch = {'customWallpapers': list(self.preferences.custom_wallpapers)}
        self._run_write(lambda: self.adapter.update_preferences(patch))

    def close(self):
        """Run deferred deletions that are still waiting on their animation."""
        self.timers.flush()
