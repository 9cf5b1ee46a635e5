import time

import pytest

from tcpchat.protocol import FrameProtocol


def wait_for(condition, timeout=5.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


def read_until(sock, predicate, limit=20):
    """Read frames until one matches; fail the test if none does."""
    for _ in range(limit):
        frame = FrameProtocol.read_frame(sock)
        if predicate(frame):
            return frame
    pytest.fail("Expected frame never arrived")
