import threading
from queue import Queue, Empty
from typing import Optional

from models import Action


class InMemoryQueue:
    """
    Thread-safe FIFO of actions for one consumer.
    All synchronization is internal - callers never need to lock.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self):
        self._main_queue: Queue[Action] = Queue()
        self._shutdown_event = threading.Event()

    def publish_message(self, message: Action) -> None:
        """Add message to queue. Thread-safe."""
        self._main_queue.put(message)

    def consume_message(self) -> Optional[Action]:
        """
        Get next message from queue.
        Returns None if queue is empty after timeout.
        Thread-safe.
        """
        try:
            return self._main_queue.get(timeout=self.DEFAULT_TIMEOUT)
        except Empty:
            return None

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return self._main_queue.empty()

    def shutdown(self) -> None:
        """Signal no more messages will be published."""
        self._shutdown_event.set()

    def is_shutdown(self) -> bool:
        """Check if shutdown has been signaled."""
        return self._shutdown_event.is_set()
