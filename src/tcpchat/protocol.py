import struct

from tcpchat.errors import ConnectionClosed, FrameError

# Reserved client->server message that ends a session.
EXIT_TOKEN = "salir()"

HEADER_SIZE = 2
MAX_FRAME_SIZE = 0xFFFF

REJECT_NOTICE = "Server is full, try again later"

# Separates sender and text in a chat line; display names may not contain it.
NAME_SEPARATOR = ": "


class FrameProtocol:
    """
    Length-prefixed text framing shared by server and client.
    Frame format:
    - 2 bytes: payload length (unsigned short, big-endian)
    - Remaining bytes: UTF-8 text
    """

    @staticmethod
    def encode_frame(text):
        """Encode one text message as a frame.

        Args:
            text (str): The message to encode.

        Returns:
            bytes: Length prefix followed by the UTF-8 payload.

        Raises:
            FrameError: If the encoded text does not fit in one frame.
        """
        encoded = text.encode('utf-8')
        if len(encoded) > MAX_FRAME_SIZE:
            raise FrameError(f"Frame too large: {len(encoded)} bytes")
        return struct.pack('!H', len(encoded)) + encoded

    @staticmethod
    def decode_frame(buffer):
        """Decode the first complete frame in a buffer.

        Args:
            buffer (bytes): Bytes received so far.

        Returns:
            tuple: (text, remaining). text is None if the buffer does not
            hold a complete frame yet; remaining is then the buffer itself.
        """
        if len(buffer) < HEADER_SIZE:
            return None, buffer
        length = struct.unpack('!H', buffer[:HEADER_SIZE])[0]
        end = HEADER_SIZE + length
        if len(buffer) < end:
            return None, buffer
        try:
            text = buffer[HEADER_SIZE:end].decode('utf-8')
        except UnicodeDecodeError as e:
            raise FrameError(f"Invalid UTF-8 payload: {e}") from e
        return text, buffer[end:]

    @staticmethod
    def recv_exact(sock, size):
        """Read exactly size bytes from a socket.

        Raises:
            ConnectionClosed: If the peer closes before size bytes arrive.
        """
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = sock.recv(remaining)
            if not chunk:
                raise ConnectionClosed("Connection closed by peer")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b''.join(chunks)

    @classmethod
    def read_frame(cls, sock):
        """Block until one full frame is read and return its text."""
        header = cls.recv_exact(sock, HEADER_SIZE)
        length = struct.unpack('!H', header)[0]
        payload = cls.recv_exact(sock, length) if length else b''
        text, _ = cls.decode_frame(header + payload)
        return text

    @classmethod
    def send_frame(cls, sock, text):
        sock.sendall(cls.encode_frame(text))


def chat_line(name, text):
    return f"{name}{NAME_SEPARATOR}{text}"


def split_chat_line(frame):
    """Split a chat line into (sender, text).

    Returns (None, frame) for frames that are not chat lines, such as
    join/leave notices.
    """
    sender, sep, text = frame.partition(NAME_SEPARATOR)
    if not sep:
        return None, frame
    return sender, text


def joined_notice(name):
    return f"{name} joined the chat"


def left_notice(name):
    return f"{name} left the chat"
