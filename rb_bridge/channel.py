"""In-process message channel connecting a view to a host.

Posting is fire-and-forget: the message is JSON-encoded and queued. Nothing
is delivered until :meth:`LoopbackChannel.pump` runs, which hands messages
to the receiving endpoint strictly in the order they were posted.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], None]

DEFAULT_PUMP_LIMIT = 10_000


class ChannelEndpoint:
    """One side of a loopback channel."""

    def __init__(self, channel: "LoopbackChannel", name: str) -> None:
        self._channel = channel
        self.name = name
        self._handler: MessageHandler | None = None
        self.peer: ChannelEndpoint | None = None

    def on_message(self, handler: MessageHandler) -> None:
        self._handler = handler

    def post(self, message: Mapping[str, Any]) -> None:
        if self.peer is None:
            raise RuntimeError(f"endpoint {self.name!r} is not connected")
        self._channel.enqueue(self.peer, json.dumps(dict(message)))

    def deliver(self, raw: str) -> None:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping undecodable message for %s", self.name)
            return
        if self._handler is None:
            logger.debug("No handler on %s; dropping message", self.name)
            return
        self._handler(payload)


class LoopbackChannel:
    """A FIFO pair of endpoints: ``view`` and ``host``."""

    def __init__(self) -> None:
        self._queue: deque[tuple[ChannelEndpoint, str]] = deque()
        self.view = ChannelEndpoint(self, "view")
        self.host = ChannelEndpoint(self, "host")
        self.view.peer = self.host
        self.host.peer = self.view

    def enqueue(self, target: ChannelEndpoint, raw: str) -> None:
        self._queue.append((target, raw))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def pump(self, limit: int = DEFAULT_PUMP_LIMIT) -> int:
        """Deliver queued messages in arrival order until empty.

        Handlers may post further messages; those join the back of the queue.
        Stops after ``limit`` deliveries and returns the number delivered.
        """
        delivered = 0
        while self._queue and delivered < limit:
            target, raw = self._queue.popleft()
            target.deliver(raw)
            delivered += 1
        if self._queue:
            logger.warning("Channel pump stopped with %d messages pending", len(self._queue))
        return delivered
