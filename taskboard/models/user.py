from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash

from taskboard import db, login_manager
from taskboard.utils.defaults import DEFAULT_WALLPAPER, MAX_CUSTOM_WALLPAPERS


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))
    last_active_board_id = db.Column(db.String(32))
    wallpaper = db.Column(db.String(500), default=DEFAULT_WALLPAPER)
    custom_wallpapers = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    boards = db.relationship('Board', backref='owner', lazy='dynamic',
                             foreign_keys='Board.owner_id', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @validates('custom_wallpapers')
    def validate_custom_wallpapers(self, key, urls):
        return list(urls or [])[:MAX_CUSTOM_WALLPAPERS]

    def preferences(self):
        return {
            'lastActiveBoardId': self.last_active_board_id,
            'wallpaper': self.wallpaper or DEFAULT_WALLPAPER,
            'customWallpapers': list(self.custom_wallpapers or []),
        }

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.username}>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
