import av.logging
import pytest

from frame_picker.utils.library import LIBAV_LOG_LEVEL, acquire, active_sessions, library_session, release


def test_nested_sessions_share_state():
    level_before = av.logging.get_level()

    with library_session():
        assert av.logging.get_level() == LIBAV_LOG_LEVEL
        with library_session():
            assert active_sessions() == 2
        # Inner release must not tear down state the outer session still uses
        assert active_sessions() == 1
        assert av.logging.get_level() == LIBAV_LOG_LEVEL

    assert active_sessions() == 0
    assert av.logging.get_level() == level_before


def test_session_released_on_error():
    with pytest.raises(RuntimeError, match="boom"):
        with library_session():
            raise RuntimeError("boom")
    assert active_sessions() == 0


def test_release_without_acquire():
    with pytest.raises(RuntimeError):
        release()


def test_acquire_release_pairs():
    acquire()
    acquire()
    release()
    assert active_sessions() == 1
    release()
    assert active_sessions() == 0
