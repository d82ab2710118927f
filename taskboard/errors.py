"""
Error taxonomy shared by the REST backend and the board client.

Every error carries a human-readable message and the HTTP status it maps to,
so route handlers can raise them directly and the remote adapter can rebuild
them from a response.
"""


class TaskboardError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(TaskboardError):
    """Missing or invalid required field, or a malformed identifier."""
    status_code = 400


class NotFoundError(TaskboardError):
    """The entity does not exist (or is not visible to the current user)."""
    status_code = 404


class PersistenceFailure(TaskboardError):
    """Network or storage-layer failure while reading or writing data."""
    status_code = 503

    def __init__(self, message, status_code=None, upstream_status=None):
        super().__init__(message, status_code)
        self.upstream_status = upstream_status
