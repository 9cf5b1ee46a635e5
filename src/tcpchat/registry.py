import logging
import threading

from tcpchat.errors import CapacityExceeded

logger = logging.getLogger(__name__)


class Registry:
    """The shared set of live sessions.

    Every membership change and every size read goes through ``self.lock``.
    Broadcasts iterate over a copy taken under the lock, so slow network
    writes never block admissions or removals.

    Attributes:
        limit (int): Maximum number of sessions held at once.
        lock (threading.Lock): Guards ``_sessions`` and ``closed``.
        closed (bool): Set by ``close_all``; no session is admitted after it.
    """

    def __init__(self, limit):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.lock = threading.Lock()
        self._sessions = []
        self.closed = False

    def add(self, session):
        """Insert a session.

        Raises:
            CapacityExceeded: If the registry is already full or closed.
        """
        with self.lock:
            self._insert(session)

    def try_add(self, session):
        """Check capacity and insert in a single critical section.

        Returns:
            bool: True if the session was admitted.
        """
        with self.lock:
            try:
                self._insert(session)
            except CapacityExceeded:
                return False
        return True

    def _insert(self, session):
        if self.closed:
            raise CapacityExceeded("Registry is closed")
        if len(self._sessions) >= self.limit:
            raise CapacityExceeded(
                f"Connection limit of {self.limit} reached"
            )
        if session not in self._sessions:
            self._sessions.append(session)

    def remove(self, session):
        """Remove a session; removing an absent session is a no-op.

        Returns:
            bool: True if the session was present.
        """
        with self.lock:
            if session in self._sessions:
                self._sessions.remove(session)
                return True
        return False

    def snapshot(self):
        with self.lock:
            return list(self._sessions)

    def names(self):
        """Display names of members that completed the handshake."""
        return [s.name for s in self.snapshot() if s.name is not None]

    def claim_name(self, session, name):
        """Give a member its display name unless another member has it.

        Returns:
            bool: False if the name is already taken.
        """
        with self.lock:
            if any(s.name == name for s in self._sessions if s is not session):
                return False
            session.assign_name(name)
        return True

    def is_full(self):
        with self.lock:
            return len(self._sessions) >= self.limit

    def close_all(self):
        """Close every member's connection and stop admitting new ones.

        Each session notices the failed read and cleans itself up, so this
        never waits on a session thread.
        """
        with self.lock:
            self.closed = True
            sessions = list(self._sessions)
        for session in sessions:
            session.close()
        logger.info(f"Closed {len(sessions)} session(s)")

    def __len__(self):
        with self.lock:
            return len(self._sessions)

    def __contains__(self, session):
        with self.lock:
            return session in self._sessions
