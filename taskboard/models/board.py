from datetime import datetime

from taskboard import db
from taskboard.utils.ids import new_id
from taskboard.utils.defaults import DEFAULT_COLUMN_COLOR


class Board(db.Model):
    __tablename__ = 'boards'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    columns = db.relationship('Column', backref='board', order_by='Column.order',
                              cascade='all, delete-orphan')

    @classmethod
    def renormalize(cls, owner_id):
        """Rewrite the owner's board positions as 0..N-1, keeping relative order."""
        boards = cls.query.filter_by(owner_id=owner_id).order_by(cls.order.asc(), cls.created_at.asc()).all()
        for index, board in enumerate(boards):
            board.order = index
        return boards

    def ordered_cards(self):
        cards = []
        for column in self.columns:
            cards.extend(column.cards)
        return cards

    def summary(self):
        return {'id': self.id, 'title': self.title, 'order': self.order}

    def to_dict(self, populated=True):
        data = {
            'id': self.id,
            'title': self.title,
            'order': self.order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if populated:
            data['columns'] = [column.to_dict() for column in self.columns]
            data['cards'] = [card.to_dict() for card in self.ordered_cards()]
        return data

    def __repr__(self):
        return f'<Board {self.title}>'


class Column(db.Model):
    __tablename__ = 'board_columns'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False, default='')
    color = db.Column(db.String(32), nullable=False, default=DEFAULT_COLUMN_COLOR)
    order = db.Column(db.Integer, default=0, nullable=False)
    board_id = db.Column(db.String(32), db.ForeignKey('boards.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    cards = db.relationship('Card', backref='column', order_by='Card.order',
                            cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'color': self.color,
            'order': self.order,
            'boardId': self.board_id,
        }

    def __repr__(self):
        return f'<Column {self.title}>'


class Card(db.Model):
    __tablename__ = 'cards'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(500), nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    column_id = db.Column(db.String(32), db.ForeignKey('board_columns.id', ondelete='CASCADE'), nullable=False)
    board_id = db.Column(db.String(32), db.ForeignKey('boards.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'order': self.order,
            'columnId': self.column_id,
            'boardId': self.board_id,
        }

    def __repr__(self):
        return f'<Card {self.title}>'


def build_board(owner_id, title, order, columns=()):
    """Create a board with nested columns and cards, positions taken from list order.

    ``columns`` is a list of ``{title, color?, cards?: [{title}]}`` mappings.
    The board is added to the session; the caller commits.
    """
    board = Board(id=new_id(), title=title, order=order, owner_id=owner_id)
    db.session.add(board)

    for col_index, col_data in enumerate(columns):
        column = Column(
            title=(col_data.get('title') or '').strip(),
            color=col_data.get('color') or DEFAULT_COLUMN_COLOR,
            order=col_index,
            board_id=board.id
        )
        board.columns.append(column)
        for card_index, card_data in enumerate(col_data.get('cards') or []):
            column.cards.append(Card(
                title=card_data['title'].strip(),
                order=card_index,
                board_id=board.id
            ))

    return board
