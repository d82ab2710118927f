from enum import Enum

from taskboard.client.adapters.base import PersistenceAdapter
from taskboard.client.adapters.local import LocalAdapter
from taskboard.client.adapters.remote import RemoteAdapter
from taskboard.client.adapters.storage import FileStorage, MemoryStorage


class AuthMode(Enum):
    ONLINE = 'online'
    GUEST = 'guest'


def create_adapter(mode, config=None, storage=None, session=None) -> PersistenceAdapter:
    """Pick the persistence adapter for a session; called once, at session start."""
    if mode is AuthMode.ONLINE:
        return RemoteAdapter(
            config.API_BASE_URL,
            session=session,
            timeout=config.REQUEST_TIMEOUT
        )
    if mode is AuthMode.GUEST:
        return LocalAdapter(storage or FileStorage(config.STORAGE_DIR))
    raise ValueError(f'Unknown auth mode: {mode!r}')


__all__ = [
    'AuthMode', 'create_adapter', 'PersistenceAdapter',
    'LocalAdapter', 'RemoteAdapter', 'FileStorage', 'MemoryStorage',
]
