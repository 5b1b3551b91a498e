from collections import deque
from dataclasses import dataclass
from enum import Enum, auto


class Delivery(Enum):
    DELIVERED = auto()
    UNAVAILABLE = auto()


@dataclass(frozen=True)
class EmergencyRequest:
    sender_id: int
    has_vacated_before: bool
    priority_level: int
    sent_at: float


class MessageBus:
    """
    Local, order-preserving delivery of emergency requests.

    Requests sent during a cycle are drained by the negotiation phase of
    the same cycle. `reliability` is the chance a send or a connection
    check succeeds; an unavailable bus is a missed turn, not an error.
    """

    def __init__(self, random_source, reliability=1.0):
        self.random_source = random_source
        self.reliability = reliability
        self._queue = deque()
        self.dropped = 0

    def available(self):
        return self.random_source.bernoulli(self.reliability)

    def send(self, request):
        if not self.available():
            self.dropped += 1
            return Delivery.UNAVAILABLE
        self._queue.append(request)
        return Delivery.DELIVERED

    def has_pending(self):
        return bool(self._queue)

    def receive(self):
        if not self._queue:
            return None
        return self._queue.popleft()
