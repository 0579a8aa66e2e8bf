"""Reference-counted guard around process-wide libav state.

While at least one session is active, libav messages at LIBAV_LOG_LEVEL and
above are forwarded to Python logging. The level that was in place before the
first session is restored when the last one ends.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

import av.logging

LIBAV_LOG_LEVEL = av.logging.ERROR

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_users = 0
_saved_level = None


def acquire() -> None:
    global _users, _saved_level
    with _lock:
        if _users == 0:
            _saved_level = av.logging.get_level()
            av.logging.set_level(LIBAV_LOG_LEVEL)
            logger.debug("libav session started")
        _users += 1


def release() -> None:
    global _users, _saved_level
    with _lock:
        if _users == 0:
            raise RuntimeError("library session released more often than acquired")
        _users -= 1
        if _users == 0:
            av.logging.set_level(_saved_level)
            _saved_level = None
            logger.debug("libav session ended")


def active_sessions() -> int:
    with _lock:
        return _users


@contextmanager
def library_session() -> Iterator[None]:
    acquire()
    try:
        yield
    finally:
        release()
