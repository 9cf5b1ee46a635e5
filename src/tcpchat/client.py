import logging
import socket
import threading

from tcpchat.errors import FrameError
from tcpchat.protocol import EXIT_TOKEN, FrameProtocol, split_chat_line
from tcpchat.utils import format_log_time

logger = logging.getLogger(__name__)


class ChatClient:
    """Chat client: sends the display name, then chat lines.

    Incoming frames are read on a background thread and handed to a
    callback; writes happen on the caller's thread.
    """

    def __init__(self, host, port, name):
        """Initializes the chat client.

        Args:
            host (str): Server address.
            port (int): Server port.
            name (str): Display name sent during the handshake.
        """
        self.host = host
        self.port = port
        self.name = name
        self.client_socket = None
        self._closed = threading.Event()
        self._close_lock = threading.Lock()

    def connect(self):
        """Connects to the server and sends the display name."""
        self.client_socket = socket.create_connection((self.host, self.port))
        FrameProtocol.send_frame(self.client_socket, self.name)

    def send(self, text):
        FrameProtocol.send_frame(self.client_socket, text)

    def leave(self):
        """Asks the server to end the session, then closes the socket."""
        try:
            self.send(EXIT_TOKEN)
        finally:
            self.close()

    def close(self):
        with self._close_lock:
            if self._closed.is_set():
                return
            self._closed.set()
        if self.client_socket is not None:
            self.client_socket.close()

    @property
    def closed(self):
        return self._closed.is_set()

    def should_display(self, frame):
        """Whether a received frame should be shown to the user.

        Only the server echo of this client's own chat lines is hidden.
        The sender field is compared exactly, so a line that merely
        mentions this client's name is still shown.
        """
        sender, _ = split_chat_line(frame)
        return sender != self.name

    def receive_loop(self, on_message, on_close=None):
        """Reads frames until the connection drops.

        Args:
            on_message (callable): Called with each frame to display.
            on_close (callable, optional): Called once the loop ends.
        """
        try:
            while True:
                frame = FrameProtocol.read_frame(self.client_socket)
                if self.should_display(frame):
                    on_message(frame)
        except (FrameError, OSError) as e:
            if not self.closed:
                logger.info(f"Connection closed: {e}")
        finally:
            self.close()
            if on_close:
                on_close()

    def start_receiving(self, on_message, on_close=None):
        thread = threading.Thread(
            target=self.receive_loop, args=(on_message, on_close), daemon=True
        )
        thread.start()
        return thread


def run_terminal(host, port, name, input_func=input, output_func=print):
    """Runs an interactive chat session on the terminal."""
    client = ChatClient(host, port, name)
    client.connect()
    client.start_receiving(
        lambda frame: output_func(f"[{format_log_time()}] {frame}"),
        on_close=lambda: output_func("Connection closed."),
    )
    output_func(f'You can chat now, or type "{EXIT_TOKEN}" to leave:')
    try:
        while not client.closed:
            try:
                line = input_func()
            except EOFError:
                line = EXIT_TOKEN
            if client.closed:
                break
            if line == EXIT_TOKEN:
                client.leave()
                break
            client.send(line)
    except OSError as e:
        output_func(f"Error sending message: {e}")
    finally:
        client.close()
    return client
