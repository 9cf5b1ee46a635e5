import logging
import socket
import threading
from enum import Enum

from tcpchat.errors import (
    FrameError,
    HandshakeFailure,
    RecipientSendFailure,
    UnexpectedDisconnect,
)
from tcpchat.protocol import (
    EXIT_TOKEN,
    NAME_SEPARATOR,
    FrameProtocol,
    chat_line,
    joined_notice,
    left_notice,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    HANDSHAKING = "handshaking"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


class Session:
    """Server-side state of one connected client.

    A session is created by the listener, registered, then driven by
    ``run()`` on its own thread. The first frame it reads is the display
    name; every later frame is chat text, except ``salir()`` which ends the
    session. Whatever ends the session, cleanup runs exactly once.

    Attributes:
        sock (socket.socket): The client connection.
        address (tuple): Peer address as returned by ``accept()``.
        registry (Registry): Shared set of live sessions.
        broadcaster (Broadcaster): Used to relay chat lines and notices.
        state (SessionState): Current protocol state.
    """

    def __init__(self, sock, address, registry, broadcaster):
        self.sock = sock
        self.address = address
        self.registry = registry
        self.broadcaster = broadcaster
        self.state = SessionState.HANDSHAKING
        self._name = None
        self._send_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._finished = False

    @property
    def name(self):
        """Display name, or None until the handshake completes."""
        return self._name

    def assign_name(self, name):
        """Set the display name once; the registry calls this under its lock."""
        if self._name is not None:
            raise RuntimeError("Display name is already set")
        self._name = name

    @property
    def is_open(self):
        return self.state in (SessionState.HANDSHAKING, SessionState.ACTIVE)

    def describe(self):
        return self._name or str(self.address)

    def send(self, text):
        """Write one frame to this client.

        Concurrent callers are serialized so frames never interleave.

        Raises:
            RecipientSendFailure: If the session is closed or the write fails.
        """
        with self._send_lock:
            if not self.is_open:
                raise RecipientSendFailure(f"Session {self.describe()} is closed")
            try:
                FrameProtocol.send_frame(self.sock, text)
            except (FrameError, OSError) as e:
                raise RecipientSendFailure(str(e)) from e

    def run(self):
        reason = None
        try:
            self._handshake()
            self.broadcaster.announce(joined_notice(self._name), exclude=self)
            self._read_loop()
        except HandshakeFailure as e:
            logger.warning(f"Handshake with {self.address} failed: {e}")
            reason = e
        except UnexpectedDisconnect as e:
            logger.warning(f"{self._name} disconnected unexpectedly: {e}")
            reason = e
        except Exception as e:
            logger.error(f"Error handling client {self.describe()}: {e}")
            reason = e
        finally:
            self._finish(reason)

    def _handshake(self):
        try:
            name = FrameProtocol.read_frame(self.sock)
        except (FrameError, OSError) as e:
            raise HandshakeFailure(str(e)) from e
        if not name.strip():
            raise HandshakeFailure("Empty display name")
        if NAME_SEPARATOR in name:
            raise HandshakeFailure(f"Display name may not contain {NAME_SEPARATOR!r}")
        if not self.registry.claim_name(self, name):
            raise HandshakeFailure(f"Display name {name!r} is already in use")
        self.state = SessionState.ACTIVE
        logger.info(f"User {name} ready to chat")

    def _read_loop(self):
        while True:
            try:
                frame = FrameProtocol.read_frame(self.sock)
            except (FrameError, OSError) as e:
                raise UnexpectedDisconnect(str(e)) from e

            if frame == EXIT_TOKEN:
                return

            logger.info(chat_line(self._name, frame))
            self.broadcaster.broadcast_all(self._name, frame)

    def _finish(self, reason=None):
        with self._state_lock:
            if self._finished:
                return
            self._finished = True
            self.state = SessionState.CLOSING

        # Free the slot before telling the others, so the departure notice
        # never precedes the slot becoming available.
        self.registry.remove(self)
        if self._name is not None:
            self.broadcaster.announce(left_notice(self._name), exclude=self)
            if reason is None:
                logger.info(f"User {self._name} left the chat")

        self._close_socket()
        self.state = SessionState.CLOSED

    def close(self):
        """Force the session down from another thread.

        Shuts the socket down so the blocked read fails; the session thread
        then runs its normal cleanup. Does not wait for that thread.
        """
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Shutdown of {self.describe()} skipped: {e}")

    def _close_socket(self):
        self.close()
        with self._send_lock:
            try:
                self.sock.close()
            except OSError as e:
                logger.error(f"Error closing connection of {self.describe()}: {e}")
