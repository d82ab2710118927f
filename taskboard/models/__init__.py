from taskboard import db
from .user import User
from .board import Board, Column, Card

__all__ = ['db', 'User', 'Board', 'Column', 'Card']
