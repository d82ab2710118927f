"""
Drag Session Controller.

Tracks one drag gesture at a time and turns hover and drop events into
Reorder Engine moves on the active board. Cross-column card moves and
column moves are applied while hovering so the board updates live; moves
inside a single column and every persistence call wait for the drop.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from taskboard.client import reorder

logger = logging.getLogger(__name__)

DELETE_ZONE_ID = 'delete-zone'


class ItemType(Enum):
    CARD = 'Card'
    COLUMN = 'Column'


class DragState(Enum):
    IDLE = 'idle'
    DRAGGING_CARD = 'dragging-card'
    DRAGGING_COLUMN = 'dragging-column'


@dataclass(frozen=True)
class DragItem:
    """A drag source or drop target. ``type`` is None for anything that is not a card or column."""
    id: str
    type: Optional[ItemType] = None

    @property
    def is_delete_zone(self) -> bool:
        return self.id == DELETE_ZONE_ID

    @classmethod
    def card(cls, card_id):
        return cls(card_id, ItemType.CARD)

    @classmethod
    def column(cls, column_id):
        return cls(column_id, ItemType.COLUMN)

    @classmethod
    def delete_zone(cls):
        return cls(DELETE_ZONE_ID)


_DRAG_STATES = {
    ItemType.CARD: DragState.DRAGGING_CARD,
    ItemType.COLUMN: DragState.DRAGGING_COLUMN,
}


class DragSessionController:
    """
    ``board`` is the object that owns the active board; it must provide
    ``active_board``, ``update_active_board(updater)``, ``persist_card_order()``,
    ``persist_column_order()`` and ``remove_card_later(card_id)``.
    """

    def __init__(self, board):
        self.board = board
        self.state = DragState.IDLE
        self.active: Optional[DragItem] = None
        self.is_over_delete_zone = False
        self._applied_over_id: Optional[str] = None
        self._column_ids_at_start = None

    @property
    def is_dragging(self) -> bool:
        return self.state is not DragState.IDLE

    def drag_start(self, item: DragItem) -> bool:
        state = _DRAG_STATES.get(item.type)
        if state is None:
            logger.debug('Ignoring drag of %r', item)
            return False

        self.state = state
        self.active = item
        self.is_over_delete_zone = False
        self._applied_over_id = None
        board = self.board.active_board
        self._column_ids_at_start = reorder.column_ids(board) if board is not None else []
        return True

    def drag_over(self, over: Optional[DragItem]):
        if not self.is_dragging or over is None:
            return
        self.is_over_delete_zone = over.is_delete_zone

        if self.state is DragState.DRAGGING_COLUMN:
            if over.type is ItemType.COLUMN and over.id != self.active.id:
                self._apply(over, lambda b: reorder.move_column(b, self.active.id, over.id))
        elif self.state is DragState.DRAGGING_CARD:
            self._hover_card(over)

    def drag_end(self, over: Optional[DragItem]):
        state, active, applied = self.state, self.active, self._applied_over_id
        self._reset()
        if state is DragState.IDLE or over is None:
            # A card moved to another column while hovering stays there
            return

        if state is DragState.DRAGGING_CARD:
            self._drop_card(active, over, applied)
        elif state is DragState.DRAGGING_COLUMN:
            self._drop_column(active, over, applied)

    def drag_cancel(self):
        self._reset()

    def _reset(self):
        self.state = DragState.IDLE
        self.active = None
        self.is_over_delete_zone = False
        self._applied_over_id = None

    def _apply(self, over, updater):
        if self.board.update_active_board(updater):
            self._applied_over_id = over.id

    def _hover_card(self, over):
        board = self.board.active_board
        if board is None or over.id == self.active.id:
            return
        card = board.card(self.active.id)
        if card is None:
            return

        if over.type is ItemType.COLUMN:
            if card.column_id != over.id:
                self._apply(over, lambda b: reorder.move_card_to_column(b, card.id, over.id))
        elif over.type is ItemType.CARD:
            over_card = board.card(over.id)
            if over_card is not None and over_card.column_id != card.column_id:
                self._apply(over, lambda b: reorder.move_card_over_card(b, card.id, over.id))

    def _drop_card(self, active, over, applied):
        if over.is_delete_zone:
            self.board.remove_card_later(active.id)
            return

        if over.id != active.id and over.id != applied:
            if over.type is ItemType.CARD:
                self.board.update_active_board(
                    lambda b: reorder.move_card_over_card(b, active.id, over.id))
            elif over.type is ItemType.COLUMN:
                self.board.update_active_board(
                    lambda b: reorder.move_card_to_column(b, active.id, over.id))
        self.board.persist_card_order()

    def _drop_column(self, active, over, applied):
        if (over.type is ItemType.COLUMN and over.id != active.id
                and over.id != applied):
            self.board.update_active_board(lambda b: reorder.move_column(b, active.id, over.id))

        board = self.board.active_board
        if board is not None and reorder.column_ids(board) != self._column_ids_at_start:
            self.board.persist_column_order()
