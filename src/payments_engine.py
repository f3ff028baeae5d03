import logging
import threading
from typing import List, Optional, TextIO

from csv_codec import read_actions
from engine import Engine, SharedStateEngine, SingleOwnerEngine
from errors import EngineError
from message_queue import InMemoryQueue
from models import Action, ClientAccount, ProcessingStats

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Runs a CSV file of actions through an engine with the publisher-consumer pattern.
    The publisher routes each action to a queue by client id, so every client's
    actions reach a single consumer in file order. Rejected actions are counted
    and skipped, never retried.
    """

    def __init__(self, num_consumers: int = 4, engine: Optional[Engine] = None):
        if num_consumers < 1:
            raise ValueError(f"num_consumers must be at least 1, got {num_consumers}")
        self._num_consumers = num_consumers
        if engine is None:
            engine = SharedStateEngine() if num_consumers > 1 else SingleOwnerEngine()
        self._engine = engine
        self._stats = ProcessingStats()
        self._publisher_error: Optional[Exception] = None

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[ClientAccount]:
        """Process CSV file and return final account states."""
        if self._num_consumers == 1 or not self._engine.thread_safe:
            logger.info("Processing sequentially")
            with open(filepath, "r", newline="", encoding="utf-8") as f:
                for action in read_actions(f):
                    self._apply(action)
        else:
            self._process_concurrently(filepath)

        logger.info(f"Applied: {self._stats.applied}, rejected: {self._stats.rejected}")
        return self._engine.snapshot()

    def _process_concurrently(self, filepath: str) -> None:
        # 1 publisher thread, N consumer threads each owning one queue
        logger.info(f"Processing with {self._num_consumers} consumers")
        queues = [InMemoryQueue() for _ in range(self._num_consumers)]

        # Opened here so a missing file raises in the caller, not in the publisher thread
        with open(filepath, "r", newline="", encoding="utf-8") as f:
            publisher_thread = threading.Thread(target=self._publish_actions, args=(f, queues))
            publisher_thread.start()

            consumer_threads = []
            for queue in queues:
                consumer_thread = threading.Thread(target=self._consume_actions, args=(queue,))
                consumer_thread.start()
                consumer_threads.append(consumer_thread)

            publisher_thread.join()
            for consumer_thread in consumer_threads:
                consumer_thread.join()

        # Read failures in the publisher raise here, as they do on the sequential path
        if self._publisher_error is not None:
            error, self._publisher_error = self._publisher_error, None
            raise error

    def _publish_actions(self, stream: TextIO, queues: List[InMemoryQueue]) -> None:
        """Read CSV and publish each action to its client's queue."""
        try:
            for action in read_actions(stream):
                queues[action.client_id % len(queues)].publish_message(action)
        except Exception as e:
            logger.error(f"Publisher stopped reading input: {e}")
            self._publisher_error = e
        finally:
            for queue in queues:
                queue.shutdown()

    def _consume_actions(self, queue: InMemoryQueue) -> None:
        """Consumer loop: pull from queue and apply."""
        while True:
            action = queue.consume_message()
            if action is None:
                if queue.is_shutdown() and queue.is_empty():
                    break
                continue
            self._apply(action)

    def _apply(self, action: Action) -> None:
        try:
            self._engine.apply(action)
        except EngineError:
            self._stats.record_failure()
        else:
            self._stats.record_success()
