"""
In-memory entity store: the client's single source of truth.

The store holds an immutable tuple of board snapshots plus the id of the
active board. Mutations go through updater functions that receive the
current snapshot and return a new one; the store commits the result,
notifies subscribers with ``(previous, current)`` and hands the optional
persistence write attached to the mutation to its writer.
"""
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from taskboard.client.entities import Board, Card

logger = logging.getLogger(__name__)

Updater = Callable[[Board], Board]
Write = Callable[[], object]
Listener = Callable[[Tuple[Board, ...], Tuple[Board, ...]], None]


def run_now(write: Write):
    write()


class EntityStore:
    def __init__(self, writer: Callable[[Write], None] = run_now):
        self._boards: Tuple[Board, ...] = ()
        self._active_board_id: Optional[str] = None
        self._listeners: List[Listener] = []
        self._writer = writer

    @property
    def boards(self) -> Tuple[Board, ...]:
        return self._boards

    @property
    def active_board_id(self) -> Optional[str]:
        return self._active_board_id

    @property
    def active_board(self) -> Optional[Board]:
        return self.board(self._active_board_id)

    def board(self, board_id: Optional[str]) -> Optional[Board]:
        if board_id is None:
            return None
        return next((board for board in self._boards if board.id == board_id), None)

    def find_card(self, card_id: str) -> Optional[Card]:
        for board in self._boards:
            card = board.card(card_id)
            if card is not None:
                return card
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def replace_all(self, boards: Iterable[Board]):
        """Bulk-load boards from persistence, keeping the active board if it survives."""
        self._commit(tuple(boards), resolve_active=True)

    def commit_boards(self, boards: Iterable[Board], write: Optional[Write] = None):
        """Replace the board list (create, delete, reorder boards)."""
        self._commit(tuple(boards), write, resolve_active=True)

    def mutate_board(self, board_id: Optional[str], updater: Updater,
                     write: Optional[Write] = None) -> bool:
        current = self.board(board_id)
        if current is None:
            return False
        updated = updater(current)
        if updated is current:
            return False
        self._commit(tuple(updated if board.id == board_id else board for board in self._boards), write)
        return True

    def mutate_active_board(self, updater: Updater, write: Optional[Write] = None) -> bool:
        """Apply ``updater`` to the active board and commit the new snapshot.

        Does nothing without an active board, or when the updater hands back
        the snapshot it was given.
        """
        return self.mutate_board(self._active_board_id, updater, write)

    def set_active_board(self, board_id: Optional[str]) -> Optional[str]:
        """Activate ``board_id``, falling back to the first board (or None)."""
        resolved = self._resolve(board_id)
        if resolved != board_id:
            logger.debug('Board %s is not available, activating %s', board_id, resolved)
        self._active_board_id = resolved
        return resolved

    def _resolve(self, board_id: Optional[str]) -> Optional[str]:
        if self.board(board_id) is not None:
            return board_id
        if not self._boards:
            return None
        return min(self._boards, key=lambda board: board.order).id

    def _commit(self, boards: Tuple[Board, ...], write: Optional[Write] = None,
                resolve_active=False):
        previous = self._boards
        self._boards = boards
        if resolve_active:
            self._active_board_id = self._resolve(self._active_board_id)
        for listener in list(self._listeners):
            listener(previous, boards)
        if write is not None:
            self._writer(write)
