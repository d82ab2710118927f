"""Log setup shared by the Flask app and the board client.

Everything under the ``taskboard`` logger goes to stderr, and to a file when
``LOG_FILE`` is configured.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

DEFAULT_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'

# Chatty dependencies and the least they are allowed to log
_QUIET_LOGGERS = {
    'urllib3': logging.WARNING,
    'werkzeug': logging.INFO,
}


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _build_handlers(log_file: Optional[Union[str, Path]]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))
    return handlers


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None,
                  format_string: str = DEFAULT_FORMAT) -> None:
    """Configure root handlers and the ``taskboard`` level.

    Unknown level names fall back to INFO.
    """
    level = _resolve_level(level)
    logging.basicConfig(level=level, format=format_string, handlers=_build_handlers(log_file))
    logging.getLogger('taskboard').setLevel(level)

    for name, floor in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))
