"""Key/value device storage backing the guest-mode adapter."""
import json
import os
import tempfile
from typing import Dict, Optional


class MemoryStorage:
    """Storage that lives as long as the process; used by tests and previews."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value

    def remove_item(self, key: str):
        self._items.pop(key, None)


class FileStorage:
    """One JSON document per key under ``directory``."""

    def __init__(self, directory: str):
        self.directory = os.path.expanduser(directory)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f'{key}.json')

    def get_item(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str):
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def remove_item(self, key: str):
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass


def dumps(data) -> str:
    return json.dumps(data, separators=(',', ':'))
