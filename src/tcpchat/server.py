import logging
import socket
import threading

from tcpchat.broadcaster import Broadcaster
from tcpchat.config import ChatConfig
from tcpchat.errors import BindFailure
from tcpchat.protocol import REJECT_NOTICE, FrameProtocol
from tcpchat.registry import Registry
from tcpchat.session import Session

logger = logging.getLogger(__name__)


class ChatServer:
    """A multi-threaded broadcast chat server.

    One thread runs the accept loop; each admitted client gets a daemon
    thread running its ``Session``. Admission is decided by
    ``Registry.try_add``, which checks the limit and registers the session
    atomically.

    Attributes:
        host (str): The address the server binds to.
        port (int): The port number; the bound port once ``bind()`` ran.
        max_connections (int): Maximum number of concurrent sessions.
        registry (Registry): The live sessions.
        broadcaster (Broadcaster): Fan-out over ``registry``.
        server (socket.socket): The listening socket.
        running (bool): Whether the accept loop should keep going.
        ready (threading.Event): Set once the socket is listening.
    """

    def __init__(self, host=None, port=None, max_connections=None, config=None):
        """Initializes the chat server.

        Args:
            host (str, optional): Bind address. Defaults to the config value.
            port (int, optional): Port, 0 for an ephemeral one. Defaults to
                the config value.
            max_connections (int, optional): Admission limit. Defaults to
                the config value.
            config (ChatConfig, optional): Settings source.
        """
        self.config = config or ChatConfig()
        self.host = host if host is not None else self.config.get("host")
        self.port = port if port is not None else self.config.get("port")
        if max_connections is None:
            self.max_connections = self.config.max_connections()
        else:
            self.max_connections = ChatConfig.validate_limit(max_connections)
        self.registry = Registry(self.max_connections)
        self.broadcaster = Broadcaster(self.registry)
        self.server = None
        self.running = False
        self.ready = threading.Event()

    def bind(self):
        """Open the listening socket.

        Raises:
            BindFailure: If the address cannot be bound.
        """
        self.server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.server.settimeout(1)
        try:
            self.server.bind((self.host, self.port))
            self.server.listen(self.max_connections)
        except OSError as e:
            self.server.close()
            self.server = None
            logger.error(f"Error starting server on port {self.port}: {e}")
            raise BindFailure(str(e)) from e

        self.port = self.server.getsockname()[1]
        self.running = True
        self.ready.set()
        logger.info(f"Server started on {self.host}:{self.port}")

    def start(self):
        if self.server is None:
            self.bind()

        try:
            while self.running:
                try:
                    client_socket, address = self.server.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if self.running:
                        logger.error(f"Error accepting connection: {e}")
                        continue
                    break
                client_socket.settimeout(None)
                self.admit(client_socket, address)
        finally:
            if self.server is not None:
                self.server.close()

    def admit(self, client_socket, address):
        """Register and start a session, or turn the connection away.

        Returns:
            Session: The new session, or None if the server was full.
        """
        session = Session(client_socket, address, self.registry, self.broadcaster)
        if not self.registry.try_add(session):
            if self.registry.closed:
                logger.info(f"Server is stopping. Dropping connection from {address[0]}")
                client_socket.close()
            else:
                self.reject(client_socket, address)
            return None

        logger.info(f"New user connected: {address[0]}")
        threading.Thread(target=session.run, daemon=True).start()
        return session

    def reject(self, client_socket, address):
        logger.warning(
            f"Connection limit reached ({self.max_connections}). Rejecting {address[0]}"
        )
        try:
            FrameProtocol.send_frame(client_socket, REJECT_NOTICE)
        except OSError as e:
            logger.warning(f"Error sending rejection to {address[0]}: {e}")
        finally:
            client_socket.close()

    def serve_in_background(self):
        """Bind, then run the accept loop on a daemon thread."""
        self.bind()
        thread = threading.Thread(target=self.start, daemon=True)
        thread.start()
        return thread

    def stop(self):
        """Stop accepting and close every session without joining them."""
        self.running = False
        if self.server:
            self.server.close()
        self.registry.close_all()
        logger.info("Server stopped")
