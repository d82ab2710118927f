from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Email, Length, ValidationError as FieldError
from taskboard import db
from taskboard.errors import ValidationError
from taskboard.models import User
from taskboard.models.board import build_board
from taskboard.utils.defaults import WELCOME_BOARD
from taskboard.utils.forms import JSONForm, json_body, validated, strip_filter

auth_bp = Blueprint('auth', __name__)


class LoginForm(JSONForm):
    username = StringField('Username', filters=[strip_filter],
                           validators=[DataRequired(message='Username is required.')])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required.')])
    remember = BooleanField('Remember Me')


class RegistrationForm(JSONForm):
    username = StringField('Username', filters=[strip_filter], validators=[
        DataRequired(message='Username is required.'),
        Length(min=3, max=80)
    ])
    email = StringField('Email', filters=[strip_filter], validators=[
        DataRequired(message='Email is required.'),
        Email()
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required.'),
        Length(min=6)
    ])

    def validate_username(self, username):
        user = User.query.filter_by(username=username.data).first()
        if user:
            raise FieldError('Username already taken. Please choose a different one.')

    def validate_email(self, email):
        user = User.query.filter_by(email=email.data).first()
        if user:
            raise FieldError('Email already registered. Please use a different one.')


@auth_bp.route('/csrf', methods=['GET'])
def csrf_token():
    return jsonify({'csrfToken': generate_csrf()})


@auth_bp.route('/register', methods=['POST'])
def register():
    form = validated(RegistrationForm, json_body())

    user = User(username=form.username.data, email=form.email.data)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.flush()  # Flush to get user ID

    # Every new account starts with a welcome board
    board = build_board(user.id, WELCOME_BOARD['title'], 0, WELCOME_BOARD['columns'])
    user.last_active_board_id = board.id
    db.session.commit()

    current_app.logger.info('Registered user %s', user.username)
    return jsonify(user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    form = validated(LoginForm, json_body())

    user = User.query.filter_by(username=form.username.data).first()
    if user is None or not user.check_password(form.password.data):
        raise ValidationError('Invalid username or password.')

    login_user(user, remember=form.remember.data)
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'You have been logged out.'})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_user.to_dict())
