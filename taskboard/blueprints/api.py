from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional
from taskboard import db
from taskboard.errors import ValidationError, NotFoundError
from taskboard.models import Board, Column, Card
from taskboard.models.board import build_board
from taskboard.utils.defaults import DEFAULT_COLUMN_COLOR
from taskboard.utils.ids import require_valid_id
from taskboard.utils.forms import JSONForm, json_body, validated, strip_filter

api_bp = Blueprint('api', __name__)


class BoardForm(JSONForm):
    title = StringField('Title', filters=[strip_filter], validators=[
        DataRequired(message='The board title is required.'),
        Length(max=200)
    ])


class ColumnForm(JSONForm):
    title = StringField('Title', filters=[strip_filter], validators=[Optional(), Length(max=200)])
    color = StringField('Color', filters=[strip_filter], validators=[Optional(), Length(max=32)])


class CardForm(JSONForm):
    title = StringField('Title', filters=[strip_filter], validators=[
        DataRequired(message='The card title is required.'),
        Length(max=500)
    ])


def id_list(data, key, label):
    ids = data.get(key)
    if not isinstance(ids, list):
        raise ValidationError(f'An array of {label} IDs is required.')
    for item_id in ids:
        require_valid_id(item_id, label)
    return ids


def nested_columns(columns):
    """Validate the optional ``columns`` payload of a new board."""
    if columns is None:
        return []
    if not isinstance(columns, list) or not all(isinstance(col, dict) for col in columns):
        raise ValidationError('Columns must be an array of objects.')

    cleaned = []
    for col_data in columns:
        cards = col_data.get('cards') or []
        if not isinstance(cards, list):
            raise ValidationError('Cards must be an array of objects.')
        card_titles = []
        for card_data in cards:
            title = strip_filter(card_data.get('title')) if isinstance(card_data, dict) else None
            if not title:
                raise ValidationError('The card title is required.')
            card_titles.append({'title': title})
        cleaned.append({
            'title': strip_filter(col_data.get('title')) or '',
            'color': col_data.get('color'),
            'cards': card_titles,
        })
    return cleaned


def get_owned_board(board_id):
    require_valid_id(board_id, 'board')
    board = Board.query.filter_by(id=board_id, owner_id=current_user.id).first()
    if board is None:
        raise NotFoundError('Board not found.')
    return board


def get_owned_column(column_id):
    require_valid_id(column_id, 'column')
    column = Column.query.join(Board).filter(
        Column.id == column_id,
        Board.owner_id == current_user.id
    ).first()
    if column is None:
        raise NotFoundError('Column not found.')
    return column


def get_owned_card(card_id):
    require_valid_id(card_id, 'card')
    card = Card.query.join(Board, Card.board_id == Board.id).filter(
        Card.id == card_id,
        Board.owner_id == current_user.id
    ).first()
    if card is None:
        raise NotFoundError('Card not found.')
    return card


# Boards

@api_bp.route('/boards/list', methods=['GET'])
@login_required
def list_boards():
    boards = Board.query.filter_by(owner_id=current_user.id).order_by(Board.order.asc()).all()
    return jsonify([board.summary() for board in boards])


@api_bp.route('/boards', methods=['GET'])
@login_required
def get_boards():
    boards = Board.query.filter_by(owner_id=current_user.id).order_by(Board.order.asc()).all()
    return jsonify([board.to_dict() for board in boards])


@api_bp.route('/boards/<board_id>', methods=['GET'])
@login_required
def get_board(board_id):
    board = get_owned_board(board_id)
    return jsonify(board.to_dict())


@api_bp.route('/boards', methods=['POST'])
@login_required
def create_board():
    data = json_body()
    form = validated(BoardForm, data)

    columns = nested_columns(data.get('columns'))

    board_count = Board.query.filter_by(owner_id=current_user.id).count()
    board = build_board(current_user.id, form.title.data, board_count, columns)
    db.session.commit()
    return jsonify(board.to_dict()), 201


@api_bp.route('/boards/reorder', methods=['PUT'])
@login_required
def reorder_boards():
    board_ids = id_list(json_body(), 'boardIds', 'board')

    boards = {board.id: board for board in
              Board.query.filter(Board.owner_id == current_user.id, Board.id.in_(board_ids)).all()}
    for index, board_id in enumerate(board_ids):
        if board_id in boards:
            boards[board_id].order = index

    db.session.commit()
    return jsonify({'message': 'Board order updated.'})


@api_bp.route('/boards/<board_id>', methods=['PUT'])
@login_required
def update_board(board_id):
    board = get_owned_board(board_id)
    form = validated(BoardForm, json_body())

    board.title = form.title.data
    db.session.commit()
    return jsonify(board.to_dict())


@api_bp.route('/boards/<board_id>', methods=['DELETE'])
@login_required
def delete_board(board_id):
    board = get_owned_board(board_id)

    db.session.delete(board)
    db.session.flush()
    Board.renormalize(current_user.id)

    if current_user.last_active_board_id == board_id:
        current_user.last_active_board_id = None

    db.session.commit()
    current_app.logger.info('Deleted board %s for user %s', board_id, current_user.id)
    return jsonify({'message': 'Board and all of its content deleted.'})


# Columns

@api_bp.route('/boards/<board_id>/columns', methods=['POST'])
@login_required
def create_column(board_id):
    board = get_owned_board(board_id)
    data = json_body()
    if data.get('title') is None:
        raise ValidationError('The column title is required.')
    form = validated(ColumnForm, data)

    column_count = Column.query.filter_by(board_id=board.id).count()
    column = Column(
        title=form.title.data or '',
        color=form.color.data or DEFAULT_COLUMN_COLOR,
        order=column_count,
        board_id=board.id
    )
    db.session.add(column)
    db.session.commit()
    return jsonify(column.to_dict()), 201


@api_bp.route('/boards/<board_id>/reorder-columns', methods=['PUT'])
@login_required
def reorder_columns(board_id):
    board = get_owned_board(board_id)
    column_ids = id_list(json_body(), 'columnIds', 'column')

    columns = {column.id: column for column in board.columns}
    for index, column_id in enumerate(column_ids):
        if column_id in columns:
            columns[column_id].order = index

    db.session.commit()
    return jsonify({'message': 'Column order updated.'})


@api_bp.route('/columns/<column_id>', methods=['PUT'])
@login_required
def update_column(column_id):
    column = get_owned_column(column_id)
    form = validated(ColumnForm, json_body())

    changed = False
    if form.title.data:
        column.title = form.title.data
        changed = True
    if form.color.data:
        column.color = form.color.data
        changed = True

    if not changed:
        raise ValidationError('No data provided to update.')

    db.session.commit()
    return jsonify(column.to_dict())


@api_bp.route('/columns/<column_id>', methods=['DELETE'])
@login_required
def delete_column(column_id):
    column = get_owned_column(column_id)
    # Sibling columns keep their positions
    db.session.delete(column)
    db.session.commit()
    return jsonify({'message': 'Column and its cards deleted.'})


# Cards

@api_bp.route('/boards/<board_id>/reorder-cards', methods=['PUT'])
@login_required
def reorder_cards(board_id):
    board = get_owned_board(board_id)
    patches = json_body().get('cards')
    if not isinstance(patches, list):
        raise ValidationError('An array of cards is required.')

    column_ids = {column.id for column in board.columns}
    for patch in patches:
        if not isinstance(patch, dict):
            raise ValidationError('Each card entry must be an object.')
        require_valid_id(patch.get('id'), 'card')
        if not isinstance(patch.get('order'), int) or isinstance(patch.get('order'), bool):
            raise ValidationError('Each card entry needs an integer order.')
        if patch.get('columnId') not in column_ids:
            raise ValidationError('Each card entry needs a column of this board.')

    if not patches:
        return jsonify({'message': 'No cards to update.'})

    cards = {card.id: card for card in
             Card.query.filter(Card.board_id == board.id,
                               Card.id.in_([patch['id'] for patch in patches])).all()}
    for patch in patches:
        card = cards.get(patch['id'])
        if card is not None:
            card.order = patch['order']
            card.column_id = patch['columnId']

    db.session.commit()
    return jsonify({'message': 'Card order updated.'})


@api_bp.route('/columns/<column_id>/cards', methods=['POST'])
@login_required
def create_card(column_id):
    column = get_owned_column(column_id)
    form = validated(CardForm, json_body())

    card_count = Card.query.filter_by(column_id=column.id).count()
    card = Card(
        title=form.title.data,
        column_id=column.id,
        board_id=column.board_id,
        order=card_count
    )
    db.session.add(card)
    db.session.commit()
    return jsonify(card.to_dict()), 201


@api_bp.route('/cards/<card_id>', methods=['PUT'])
@login_required
def update_card(card_id):
    card = get_owned_card(card_id)
    form = validated(CardForm, json_body())

    card.title = form.title.data
    db.session.commit()
    return jsonify(card.to_dict())


@api_bp.route('/cards/<card_id>', methods=['DELETE'])
@login_required
def delete_card(card_id):
    card = get_owned_card(card_id)
    db.session.delete(card)
    db.session.commit()
    return jsonify({'message': 'Card deleted.'})
