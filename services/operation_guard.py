"""
In-flight flags for admin operations.

Refuses to start an operation while the same one is still running.
Process-local: one API worker.
"""

from contextlib import contextmanager
from threading import Lock
from typing import Iterator

from exceptions import OperationInProgressError

_running: set[str] = set()
_lock = Lock()


def begin(operation: str) -> None:
    """Mark `operation` as running, or raise if it already is."""
    with _lock:
        if operation in _running:
            raise OperationInProgressError(operation)
        _running.add(operation)


def finish(operation: str) -> None:
    with _lock:
        _running.discard(operation)


def is_running(operation: str) -> bool:
    with _lock:
        return operation in _running


@contextmanager
def in_flight(operation: str) -> Iterator[None]:
    """
    Hold the in-flight flag for the duration of the block.

    Usage:
        with in_flight("migrate"):
            service.migrate(source)
    """
    begin(operation)
    try:
        yield
    finally:
        finish(operation)
