import socket

import pytest

from tcpchat.errors import RecipientSendFailure


class FakeSession:
    """Stands in for a Session when only delivery needs observing."""

    def __init__(self, name, fail=False, log=None):
        self.name = name
        self.address = ("127.0.0.1", 0)
        self.fail = fail
        self.is_open = True
        self.closed = False
        self.received = []
        self.log = log

    def send(self, text):
        if self.fail:
            raise RecipientSendFailure("Broken pipe")
        self.received.append(text)
        if self.log is not None:
            self.log.append((self.name, text))

    def assign_name(self, name):
        self.name = name

    def describe(self):
        return self.name or str(self.address)

    def close(self):
        self.closed = True


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def socket_pair():
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5)
    yield server_side, client_side
    for sock in (server_side, client_side):
        sock.close()
