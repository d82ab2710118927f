import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'taskboard-dev-key'

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'taskboard.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'taskboard-test-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'WARNING'
    LOG_FILE = None


class ClientConfig:
    """Settings for the board client (adapters, storage and animations)."""
    API_BASE_URL = os.environ.get('TASKBOARD_API_URL') or 'http://localhost:5001/api'
    STORAGE_DIR = os.environ.get('TASKBOARD_STORAGE_DIR') or \
        os.path.join(os.path.expanduser('~'), '.local', 'share', 'taskboard')
    REQUEST_TIMEOUT = float(os.environ.get('TASKBOARD_REQUEST_TIMEOUT', 10))

    # Delay between marking an item as exiting and removing it
    EXIT_ANIMATION_MS = 400
