"""Lifecycle state handling for plugin components."""

import threading
from abc import ABC, abstractmethod
from enum import Enum

from aws_s3_service.core import get_logger
from aws_s3_service.core.exceptions import IllegalStateError

logger = get_logger(__name__)


class LifecycleState(str, Enum):
    """States a component moves through."""

    initialized = "initialized"
    started = "started"
    stopped = "stopped"
    closed = "closed"


class LifecycleComponent(ABC):
    """Base class for components with start/stop/close hooks.

    Transitions:
        - start() is ignored when already started, rejected once closed
        - stop() is ignored unless started
        - close() stops a started component first and is idempotent
    """

    def __init__(self):
        self._state = LifecycleState.initialized
        self._state_lock = threading.Lock()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is LifecycleState.closed

    def start(self) -> None:
        with self._state_lock:
            if self._state is LifecycleState.started:
                return
            if self._state is LifecycleState.closed:
                raise IllegalStateError(
                    f"Can't start {type(self).__name__}, it is closed"
                )
            self._do_start()
            self._state = LifecycleState.started
        logger.debug("Component started", component=type(self).__name__)

    def stop(self) -> None:
        with self._state_lock:
            if self._state is not LifecycleState.started:
                return
            self._do_stop()
            self._state = LifecycleState.stopped
        logger.debug("Component stopped", component=type(self).__name__)

    def close(self) -> None:
        with self._state_lock:
            if self._state is LifecycleState.closed:
                return
            if self._state is LifecycleState.started:
                self._do_stop()
                self._state = LifecycleState.stopped
            self._do_close()
            self._state = LifecycleState.closed
        logger.debug("Component closed", component=type(self).__name__)

    @abstractmethod
    def _do_start(self) -> None:
        pass

    @abstractmethod
    def _do_stop(self) -> None:
        pass

    @abstractmethod
    def _do_close(self) -> None:
        pass
