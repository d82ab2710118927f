"""Board Lifecycle Manager: create, rename, delete and reorder whole boards."""
import logging
from dataclasses import replace
from typing import Callable, Optional
from uuid import uuid4

from taskboard.client import reorder
from taskboard.client.entities import Board, Column, board_from_payload
from taskboard.errors import TaskboardError
from taskboard.utils.defaults import NEW_BOARD_COLUMNS, NEW_BOARD_TITLE

logger = logging.getLogger(__name__)

TEMP_PREFIX = 'temp-'


def is_temporary(board_id):
    return board_id is not None and board_id.startswith(TEMP_PREFIX)


class BoardLifecycleManager:
    def __init__(self, store, adapter, notifier,
                 activate: Optional[Callable[[Optional[str]], object]] = None):
        self.store = store
        self.adapter = adapter
        self.notifier = notifier
        self.activate = activate or store.set_active_board
        # Board waiting for the user to confirm its deletion
        self.board_to_delete: Optional[str] = None
        # Board whose title the UI should open for editing
        self.new_board_id_to_edit: Optional[str] = None

    def create_board(self) -> Optional[str]:
        """Add a board with the default column, activate it and flag it for renaming.

        The board is shown at once under a temporary id and swapped for the
        persisted one when the adapter answers. Returns the persisted id, or
        None if the board could not be created.
        """
        temp_id = f'{TEMP_PREFIX}{uuid4().hex}'
        columns = tuple(
            Column(id=f'{TEMP_PREFIX}col-{uuid4().hex}', title=col['title'],
                   board_id=temp_id, color=col['color'], order=index)
            for index, col in enumerate(NEW_BOARD_COLUMNS)
        )
        placeholder = Board(id=temp_id, title=f'{NEW_BOARD_TITLE}...', order=len(self.store.boards),
                            columns=columns, loaded=True)
        self.store.commit_boards(self.store.boards + (placeholder,))
        self.store.set_active_board(temp_id)
        self.new_board_id_to_edit = temp_id

        try:
            payload = self.adapter.create_board({'title': NEW_BOARD_TITLE, 'columns': NEW_BOARD_COLUMNS})
        except TaskboardError as e:
            logger.warning('Could not create board: %s', e.message)
            self.new_board_id_to_edit = None
            self.store.commit_boards(b for b in self.store.boards if b.id != temp_id)
            self.notifier.notify('Could not create the board.', 'danger')
            return None

        created = board_from_payload(payload)
        self.store.commit_boards(created if b.id == temp_id else b for b in self.store.boards)
        self.activate(created.id)
        self.new_board_id_to_edit = created.id
        return created.id

    def finish_new_board_edit(self):
        self.new_board_id_to_edit = None

    def rename_board(self, board_id: str, title: str) -> bool:
        """Rename a board; blank titles are rejected without touching anything."""
        title = (title or '').strip()
        if not title:
            return False
        return self.store.mutate_board(
            board_id,
            lambda board: board if board.title == title else replace(board, title=title),
            write=lambda: self.adapter.update_board(board_id, {'title': title})
        )

    def request_delete_board(self, board_id: str):
        self.board_to_delete = board_id

    def cancel_delete_board(self):
        self.board_to_delete = None

    def confirm_delete_board(self) -> bool:
        board_id = self.board_to_delete
        self.board_to_delete = None
        if board_id is None or self.store.board(board_id) is None:
            return False

        was_active = self.store.active_board_id == board_id
        remaining = reorder.renormalize_boards(b for b in self.store.boards if b.id != board_id)
        remaining_ids = [board.id for board in remaining]

        def write():
            self.adapter.delete_board(board_id)
            if remaining_ids:
                self.adapter.reorder_boards(remaining_ids)
            self.notifier.notify('Board deleted.', 'success')

        self.store.commit_boards(remaining, write)
        if was_active:
            self.activate(self.store.active_board_id)
        return True

    def reorder_boards(self, old_index: int, new_index: int) -> bool:
        boards = self.store.boards
        if old_index == new_index or not 0 <= old_index < len(boards):
            return False
        moved = reorder.move_board(boards, old_index, new_index)
        board_ids = [board.id for board in moved]
        self.store.commit_boards(moved, write=lambda: self.adapter.reorder_boards(board_ids))
        return True
