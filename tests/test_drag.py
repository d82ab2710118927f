import pytest

from taskboard.client.drag import DragItem, DragState, ItemType


@pytest.fixture
def session(guest_session):
    return guest_session


def column_ids(session):
    return [col.id for col in session.active_board.columns]


def cards_in(session, column_id):
    return [card.id for card in session.active_board.cards_in(column_id)]


def stored_cards(session):
    details = session.adapter.get_board_details(session.active_board.id)
    return [(c['id'], c['columnId'], c['order']) for c in details['cards']]


def test_only_cards_and_columns_start_a_drag(session):
    assert not session.drag.drag_start(DragItem('board-1'))
    assert session.drag.state is DragState.IDLE

    card = session.active_board.cards[0]
    assert session.drag.drag_start(DragItem.card(card.id))
    assert session.drag.state is DragState.DRAGGING_CARD
    session.drag.drag_end(None)
    assert session.drag.state is DragState.IDLE


def test_card_reorder_within_column_persists_on_drop(session):
    todo = session.active_board.columns[0].id
    first, second = cards_in(session, todo)

    session.drag.drag_start(DragItem.card(first))
    session.drag.drag_over(DragItem.card(second))
    # Same-column moves wait for the drop
    assert cards_in(session, todo) == [first, second]
    session.drag.drag_end(DragItem.card(second))

    assert cards_in(session, todo) == [second, first]
    assert [c.order for c in session.active_board.cards_in(todo)] == [0, 1]
    assert stored_cards(session)[:2] == [(second, todo, 0), (first, todo, 1)]


def test_card_moves_to_other_column_while_hovering(session):
    todo, doing, done = column_ids(session)
    card = cards_in(session, todo)[0]

    session.drag.drag_start(DragItem.card(card))
    session.drag.drag_over(DragItem.column(done))
    assert session.active_board.card(card).column_id == done
    assert cards_in(session, done)[-1] == card

    session.drag.drag_end(DragItem.column(done))
    assert (card, done, 1) in stored_cards(session)


def test_hover_reassignment_sticks_without_drop_target(session):
    todo, doing, _ = column_ids(session)
    card = cards_in(session, todo)[0]
    before = stored_cards(session)

    session.drag.drag_start(DragItem.card(card))
    session.drag.drag_over(DragItem.column(doing))
    session.drag.drag_end(None)

    assert session.active_board.card(card).column_id == doing
    assert stored_cards(session) == before


def test_drop_on_card_already_applied_during_hover(session):
    todo, doing, _ = column_ids(session)
    card = cards_in(session, todo)[0]
    target = cards_in(session, doing)[0]

    session.drag.drag_start(DragItem.card(card))
    session.drag.drag_over(DragItem.card(target))
    hovered = cards_in(session, doing)
    session.drag.drag_end(DragItem.card(target))

    assert cards_in(session, doing) == hovered
    assert session.active_board.card(card).column_id == doing


def test_delete_zone_removes_card_after_animation(session, clock, timers):
    card = session.active_board.cards[0].id

    session.drag.drag_start(DragItem.card(card))
    session.drag.drag_over(DragItem.delete_zone())
    assert session.drag.is_over_delete_zone
    session.drag.drag_end(DragItem.delete_zone())
    assert not session.drag.is_over_delete_zone

    assert session.is_exiting(card)
    assert session.store.find_card(card) is not None

    clock.advance(0.399)
    timers.run_due()
    assert session.store.find_card(card) is not None

    clock.advance(0.002)
    timers.run_due()
    assert session.store.find_card(card) is None
    assert not session.is_exiting(card)
    assert card not in [c[0] for c in stored_cards(session)]


def test_column_drag_moves_live_and_persists_on_drop(session):
    todo, doing, done = column_ids(session)

    session.drag.drag_start(DragItem.column(todo))
    session.drag.drag_over(DragItem.column(done))
    assert column_ids(session) == [doing, done, todo]
    session.drag.drag_end(DragItem.column(done))

    details = session.adapter.get_board_details(session.active_board.id)
    assert [c['id'] for c in details['columns']] == [doing, done, todo]


def test_column_drag_without_target_is_not_persisted(session):
    todo, doing, done = column_ids(session)

    session.drag.drag_start(DragItem.column(todo))
    session.drag.drag_over(DragItem.column(doing))
    session.drag.drag_end(None)

    assert column_ids(session) == [doing, todo, done]
    details = session.adapter.get_board_details(session.active_board.id)
    assert [c['id'] for c in details['columns']] == [todo, doing, done]


def test_column_dropped_on_itself_does_nothing(session):
    before = column_ids(session)
    session.drag.drag_start(DragItem.column(before[0]))
    session.drag.drag_end(DragItem.column(before[0]))
    assert column_ids(session) == before


def test_drag_item_types():
    assert DragItem.card('x').type is ItemType.CARD
    assert DragItem.delete_zone().is_delete_zone
    assert DragItem.delete_zone().type is None
