"""Multi-user TCP broadcast chat."""

from tcpchat.broadcaster import Broadcaster
from tcpchat.registry import Registry
from tcpchat.server import ChatServer
from tcpchat.session import Session, SessionState

__version__ = "0.1.0"

__all__ = ["Broadcaster", "ChatServer", "Registry", "Session", "SessionState"]
