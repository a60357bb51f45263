"""Native clipboard access.

Uses pyperclip for cross-platform clipboard access. The backend is chosen
once when the handle is opened and reused for the lifetime of the handle.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import pyperclip

logger = logging.getLogger(__name__)


class NativeClipboard:
    """A resolved pyperclip copy/paste pair."""

    def __init__(self, copy: Callable[[str], None], paste: Callable[[], str]):
        self._copy = copy
        self._paste = paste

    @classmethod
    def open(cls) -> Optional["NativeClipboard"]:
        """Resolve the platform clipboard backend.

        Returns None when the host has no usable clipboard (e.g. no display
        server); that is an expected condition, not an error.
        """
        try:
            copy, paste = pyperclip.determine_clipboard()
        except pyperclip.PyperclipException as e:
            logger.debug("no native clipboard: %s", e)
            return None
        # pyperclip returns falsy stubs when it finds no mechanism
        if not copy or not paste:
            logger.debug("no native clipboard mechanism found")
            return None
        return cls(copy, paste)

    def set_text(self, text: str) -> None:
        self._copy(text)

    def get_text(self) -> str:
        return self._paste()


class ClipboardHandle:
    """Caller-owned slot for the native clipboard, guarded by a lock.

    Build one at startup and pass it to ``set_text``. Only one thread at a
    time can hold the native clipboard through :meth:`acquire`.
    """

    def __init__(
        self,
        native: Optional[NativeClipboard] = None,
        opener: Optional[Callable[[], Optional[NativeClipboard]]] = None,
    ):
        self._native = native
        self._opener = opener
        self._opened = opener is None
        self._lock = threading.Lock()

    @classmethod
    def system(cls) -> "ClipboardHandle":
        """Open the native clipboard now."""
        return cls(native=NativeClipboard.open())

    @classmethod
    def lazy(
        cls, opener: Callable[[], Optional[NativeClipboard]] = NativeClipboard.open
    ) -> "ClipboardHandle":
        """Defer opening the native clipboard until the first acquire."""
        return cls(opener=opener)

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    @contextmanager
    def acquire(self) -> Iterator[Optional[NativeClipboard]]:
        """Hold the lock and yield the native clipboard, or None if unavailable."""
        with self._lock:
            if not self._opened:
                try:
                    self._native = self._opener()
                except Exception as e:
                    logger.debug("opening native clipboard failed: %s", e)
                    self._native = None
                # a failed open is not retried
                self._opened = True
            yield self._native
