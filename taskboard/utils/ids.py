import re
import uuid

from taskboard.errors import ValidationError

_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')


def new_id():
    """Generate a new entity identifier (32 lowercase hex characters)."""
    return uuid.uuid4().hex


def is_valid_id(value):
    return isinstance(value, str) and _ID_PATTERN.match(value) is not None


def require_valid_id(value, label='entity'):
    """Raise ValidationError unless ``value`` is a well-formed identifier."""
    if not is_valid_id(value):
        raise ValidationError(f'The {label} ID is not valid.')
    return value
