"""
Immutable snapshots of the board tree held by the client.

A board keeps its columns in display order and a flat tuple of cards, also
in display order; each card names the column it belongs to. Reorder and
move operations build new snapshots instead of mutating existing ones.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, List, Dict, Any

from taskboard.utils.defaults import DEFAULT_COLUMN_COLOR


@dataclass(frozen=True)
class Card:
    id: str
    title: str
    column_id: str
    order: int = 0

    def to_patch(self) -> Dict[str, Any]:
        return {'id': self.id, 'order': self.order, 'columnId': self.column_id}


@dataclass(frozen=True)
class Column:
    id: str
    title: str
    board_id: Optional[str] = None
    color: str = DEFAULT_COLUMN_COLOR
    order: int = 0


@dataclass(frozen=True)
class Board:
    id: str
    title: str
    order: int = 0
    columns: Tuple[Column, ...] = ()
    cards: Tuple[Card, ...] = ()
    # False until the columns and cards have been fetched from persistence
    loaded: bool = False

    def column(self, column_id: str) -> Optional[Column]:
        return next((col for col in self.columns if col.id == column_id), None)

    def card(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.cards if card.id == card_id), None)

    def cards_in(self, column_id: str) -> List[Card]:
        return [card for card in self.cards if card.column_id == column_id]

    def column_index(self, column_id: str) -> int:
        return next((i for i, col in enumerate(self.columns) if col.id == column_id), -1)

    def card_index(self, card_id: str) -> int:
        return next((i for i, card in enumerate(self.cards) if card.id == card_id), -1)

    def with_columns(self, columns) -> 'Board':
        return replace(self, columns=tuple(columns))

    def with_cards(self, cards) -> 'Board':
        return replace(self, cards=tuple(cards))

    def update_card(self, card_id: str, **changes) -> 'Board':
        return self.with_cards(replace(card, **changes) if card.id == card_id else card
                               for card in self.cards)

    def update_column(self, column_id: str, **changes) -> 'Board':
        return self.with_columns(replace(col, **changes) if col.id == column_id else col
                                 for col in self.columns)

    def append_card(self, card: Card) -> 'Board':
        # New cards start at the end of their column
        card = replace(card, order=len(self.cards_in(card.column_id)))
        return self.with_cards(self.cards + (card,))

    def append_column(self, column: Column) -> 'Board':
        column = replace(column, board_id=self.id, order=len(self.columns))
        return self.with_columns(self.columns + (column,))

    def without_card(self, card_id: str) -> 'Board':
        return self.with_cards(card for card in self.cards if card.id != card_id)

    def without_column(self, column_id: str) -> 'Board':
        """Drop a column together with its cards; sibling positions are left as they are."""
        return replace(
            self,
            columns=tuple(col for col in self.columns if col.id != column_id),
            cards=tuple(card for card in self.cards if card.column_id != column_id),
        )


def _payload_id(data):
    return data.get('id') or data.get('_id')


def card_from_payload(data: Dict[str, Any]) -> Card:
    return Card(
        id=_payload_id(data),
        title=data.get('title') or '',
        column_id=data.get('columnId') or data.get('column'),
        order=data.get('order') or 0,
    )


def column_from_payload(data: Dict[str, Any]) -> Column:
    return Column(
        id=_payload_id(data),
        title=data.get('title') or '',
        board_id=data.get('boardId') or data.get('board'),
        color=data.get('color') or DEFAULT_COLUMN_COLOR,
        order=data.get('order') or 0,
    )


def board_from_payload(data: Dict[str, Any]) -> Board:
    """Build a board snapshot from a list entry or a populated board payload.

    Payloads that carry a ``columns`` key are treated as fully loaded. Cards
    are arranged by column position, then by card position.
    """
    loaded = 'columns' in data
    columns = sorted((column_from_payload(col) for col in data.get('columns') or []),
                     key=lambda col: col.order)
    column_rank = {col.id: index for index, col in enumerate(columns)}
    cards = sorted((card_from_payload(card) for card in data.get('cards') or []),
                   key=lambda card: (column_rank.get(card.column_id, len(column_rank)), card.order))
    return Board(
        id=_payload_id(data),
        title=data.get('title') or '',
        order=data.get('order') or 0,
        columns=tuple(columns),
        cards=tuple(cards),
        loaded=loaded,
    )


@dataclass
class Preferences:
    last_active_board_id: Optional[str] = None
    wallpaper: Optional[str] = None
    custom_wallpapers: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: Optional[Dict[str, Any]]) -> 'Preferences':
        data = data or {}
        return cls(
            last_active_board_id=data.get('lastActiveBoardId'),
            wallpaper=data.get('wallpaper'),
            custom_wallpapers=list(data.get('customWallpapers') or []),
        )
