import logging

from tcpchat.errors import RecipientSendFailure
from tcpchat.protocol import chat_line

logger = logging.getLogger(__name__)


class Broadcaster:
    """Fans messages out to the sessions in a registry.

    A failed write to one recipient is logged and skipped; it never stops
    delivery to the others and never propagates to the caller.
    """

    def __init__(self, registry):
        self.registry = registry

    def broadcast_all(self, sender_name, message):
        """Send a chat line to every open session, the sender included.

        Args:
            sender_name (str): Display name of the author.
            message (str): Chat text as typed by the author.

        Returns:
            int: Number of sessions the line was delivered to.
        """
        return self._deliver(chat_line(sender_name, message), exclude=None)

    def announce(self, message, exclude=None):
        """Send a bare notice to every open session except ``exclude``.

        Returns:
            int: Number of sessions the notice was delivered to.
        """
        return self._deliver(message, exclude=exclude)

    def _deliver(self, text, exclude):
        delivered = 0
        for session in self.registry.snapshot():
            if session is exclude or not session.is_open:
                continue
            try:
                session.send(text)
                delivered += 1
            except (RecipientSendFailure, OSError) as e:
                logger.warning(f"Error relaying message to {session.describe()}: {e}")
        return delivered
