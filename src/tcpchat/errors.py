class ChatError(Exception):
    """Base class for all chat server errors."""


class FrameError(ChatError):
    """A frame could not be encoded or decoded."""


class ConnectionClosed(FrameError):
    """The peer closed the connection before a full frame arrived."""


class HandshakeFailure(ChatError):
    """The connection failed before a display name was received."""


class UnexpectedDisconnect(ChatError):
    """The connection failed in the middle of an active session."""


class RecipientSendFailure(ChatError):
    """A frame could not be written to one broadcast recipient."""


class CapacityExceeded(ChatError):
    """The registry already holds the maximum number of sessions."""


class BindFailure(ChatError):
    """The listening socket could not be opened."""
