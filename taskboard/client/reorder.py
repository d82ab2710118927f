"""
Reorder engine: new orderings for drag-and-drop moves.

Every function takes a snapshot and returns a new one; when a move does not
apply (same source and target, unknown ids) the input snapshot is returned
unchanged so callers can detect the no-op with an identity check.
"""
from dataclasses import replace
from typing import List, Dict, Any, Sequence

from taskboard.utils.ordering import array_move, sort_by_order
from taskboard.client.entities import Board


def renumber(board: Board) -> Board:
    """Rewrite positions from display order: columns 0..M-1, cards 0..K-1 per column."""
    columns = tuple(col if col.order == index else replace(col, order=index)
                    for index, col in enumerate(board.columns))
    counters: Dict[str, int] = {}
    cards = []
    for card in board.cards:
        position = counters.get(card.column_id, 0)
        counters[card.column_id] = position + 1
        cards.append(card if card.order == position else replace(card, order=position))
    return replace(board, columns=columns, cards=tuple(cards))


def column_ids(board: Board) -> List[str]:
    return [col.id for col in board.columns]


def card_patches(board: Board) -> List[Dict[str, Any]]:
    """Order and column of every card, as sent to ``reorder_cards``."""
    return [card.to_patch() for card in renumber(board).cards]


def move_column(board: Board, active_id: str, over_id: str) -> Board:
    """Move column ``active_id`` to the index currently held by ``over_id``."""
    if active_id == over_id:
        return board
    old_index = board.column_index(active_id)
    new_index = board.column_index(over_id)
    if old_index == -1 or new_index == -1:
        return board
    return renumber(board.with_columns(array_move(board.columns, old_index, new_index)))


def move_card_within_column(board: Board, card_id: str, new_index: int) -> Board:
    """Move a card to ``new_index`` among the cards of its own column."""
    card = board.card(card_id)
    if card is None:
        return board
    siblings = board.cards_in(card.column_id)
    old_index = siblings.index(card)
    if old_index == new_index:
        return board

    moved = iter(array_move(siblings, old_index, new_index))
    cards = [next(moved) if item.column_id == card.column_id else item for item in board.cards]
    return renumber(board.with_cards(cards))


def move_card_to_column(board: Board, card_id: str, column_id: str) -> Board:
    """Reassign a card to another column, placing it after that column's cards."""
    card = board.card(card_id)
    if card is None or board.column(column_id) is None or card.column_id == column_id:
        return board

    cards = [item for item in board.cards if item.id != card_id]
    target_positions = [i for i, item in enumerate(cards) if item.column_id == column_id]
    insert_at = target_positions[-1] + 1 if target_positions else len(cards)
    cards.insert(insert_at, replace(card, column_id=column_id))
    return renumber(board.with_cards(cards))


def move_card_over_card(board: Board, card_id: str, over_card_id: str) -> Board:
    """Move a card to the flat index of another card, taking over its column."""
    if card_id == over_card_id:
        return board
    active_index = board.card_index(card_id)
    over_index = board.card_index(over_card_id)
    if active_index == -1 or over_index == -1:
        return board

    target_column = board.cards[over_index].column_id
    cards = list(board.cards)
    if cards[active_index].column_id != target_column:
        cards[active_index] = replace(cards[active_index], column_id=target_column)
    return renumber(board.with_cards(array_move(cards, active_index, over_index)))


def move_board(boards: Sequence[Board], old_index: int, new_index: int) -> List[Board]:
    """Move one board in the board list and rewrite every board position."""
    if old_index == new_index:
        return list(boards)
    return renumber_boards(array_move(boards, old_index, new_index))


def renumber_boards(boards: Sequence[Board]) -> List[Board]:
    return [board if board.order == index else replace(board, order=index)
            for index, board in enumerate(boards)]


def renormalize_boards(boards: Sequence[Board]) -> List[Board]:
    """Sort boards by their stored position and make positions contiguous from 0."""
    return renumber_boards(sort_by_order(boards))
