from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from taskboard.errors import ValidationError


def strip_filter(value):
    return str(value).strip() if value is not None else value


class JSONForm(FlaskForm):
    """Form validated against a JSON request body instead of form data."""

    # CSRF is checked globally by CSRFProtect through the X-CSRFToken header
    class Meta:
        csrf = False


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('The request body must be a JSON object.')
    return data


def validated(form_class, data):
    """Bind ``data`` to ``form_class`` and raise ValidationError on the first failure."""
    form = form_class(formdata=MultiDict(data))
    if not form.validate():
        messages = next(iter(form.errors.values()))
        raise ValidationError(messages[0])
    return form
