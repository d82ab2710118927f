"""
Board client core: entity store, persistence adapters, reorder engine,
drag controller and board lifecycle, independent of any UI toolkit.
"""
from config import ClientConfig
from taskboard.client.adapters import AuthMode, create_adapter
from taskboard.client.session import TaskboardSession


def open_session(mode, config=None, **adapter_options):
    """Create a session with the adapter for ``mode`` and load its boards."""
    config = config or ClientConfig
    session = TaskboardSession(create_adapter(mode, config, **adapter_options), config=config)
    session.load()
    return session


__all__ = ['AuthMode', 'TaskboardSession', 'create_adapter', 'open_session']
