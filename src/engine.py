from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple

from errors import EngineError
from models import Action, ClientAccount
from rwlock import ReadWriteLock
from state import EngineState
from transaction_processor import ActionProcessor


class Engine(ABC):
    """Apply actions and observe account snapshots. Nothing else reaches the state."""

    # Whether apply may be called from several threads at once
    thread_safe = False

    @abstractmethod
    def apply(self, action: Action) -> None:
        """Apply one action, raising an EngineError if it is rejected."""
        pass

    @abstractmethod
    def snapshot(self) -> List[ClientAccount]:
        """Return copies of every account, ordered by client id."""
        pass

    def apply_all(self, actions: Iterable[Action]) -> List[Tuple[Action, EngineError]]:
        """Apply every action, skipping rejections. Returns the rejected actions with their errors."""
        rejected = []
        for action in actions:
            try:
                self.apply(action)
            except EngineError as e:
                rejected.append((action, e))
        return rejected


class SingleOwnerEngine(Engine):
    """Engine for a single thread of control. No synchronization."""

    def __init__(self):
        self._state = EngineState()
        self._processor = ActionProcessor(self._state)

    def apply(self, action: Action) -> None:
        self._processor.apply(action)

    def snapshot(self) -> List[ClientAccount]:
        return self._state.snapshot_accounts()


class SharedStateEngine(Engine):
    """
    Engine shared between threads.
    apply runs under the write lock for the whole state transition, so writes are
    totally ordered; snapshot takes the read lock and never sees a half-applied action.
    """

    thread_safe = True

    def __init__(self):
        self._state = EngineState()
        self._processor = ActionProcessor(self._state)
        self._lock = ReadWriteLock()

    def apply(self, action: Action) -> None:
        with self._lock.write_locked():
            self._processor.apply(action)

    def snapshot(self) -> List[ClientAccount]:
        with self._lock.read_locked():
            return self._state.snapshot_accounts()


ENGINE_MODES = {
    "single": SingleOwnerEngine,
    "shared": SharedStateEngine,
}


def create_engine(mode: str) -> Engine:
    """Build the engine variant registered under mode."""
    try:
        engine_class = ENGINE_MODES[mode.lower()]
    except KeyError:
        raise ValueError(f"Unknown engine mode {mode!r}, expected one of {sorted(ENGINE_MODES)}") from None
    return engine_class()
