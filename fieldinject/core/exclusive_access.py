"""Single-writer capability for document mutation.

A document may only be mutated by the thread currently holding its
``DocumentWriterLock``. Edit points check this before every insertion,
the same way editor integrations refuse to touch the document model off
the designated thread.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from fieldinject.core.errors import ExclusiveAccessError


class DocumentWriterLock:
    """Re-entrant lock that remembers which thread owns the document.

    Example:
        lock = DocumentWriterLock()
        with lock.hold():
            lock.throw_if_not_held()  # passes
        lock.throw_if_not_held()  # raises ExclusiveAccessError
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._owner: Optional[int] = None
        self._depth = 0

    @contextmanager
    def hold(self) -> Iterator["DocumentWriterLock"]:
        """Acquire exclusive write access for the current thread."""
        with self._lock:
            self._owner = threading.get_ident()
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._owner = None

    @property
    def is_held(self) -> bool:
        """True if the calling thread holds the lock."""
        return self._owner == threading.get_ident()

    def throw_if_not_held(self) -> None:
        """Raise unless the calling thread holds the lock.

        Raises:
            ExclusiveAccessError: If the document is not held by this thread
        """
        if not self.is_held:
            raise ExclusiveAccessError("Document must be held for writing before it is modified")
