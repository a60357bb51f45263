"""Clipboard setters: native clipboard first, OSC52 when that is not possible.

Two variants sit behind :class:`ClipboardSetter`:

- :class:`SystemClipboardSetter` for platforms with a clipboard or terminal
- :class:`UnsupportedClipboardSetter` for platforms with neither

:func:`select_setter` picks one for the running platform and :func:`set_text`
is the entry point most callers want.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional

from termclip.config import ClipboardConfig
from .exceptions import ClipboardUnavailableError, CopyError, TermclipError
from .native import ClipboardHandle
from .osc52 import copy_osc52

logger = logging.getLogger(__name__)

UNSUPPORTED_PLATFORMS = ("android", "emscripten", "wasi")


class ClipboardSetter(ABC):
    @abstractmethod
    def set_text(self, text: str) -> str:
        """Place ``text`` on the clipboard and name the method used, or raise."""


class UnsupportedClipboardSetter(ClipboardSetter):
    def set_text(self, text: str) -> str:
        raise ClipboardUnavailableError()


class SystemClipboardSetter(ClipboardSetter):
    """Try the native clipboard, then fall back to OSC52."""

    def __init__(self, handle: ClipboardHandle, config: Optional[ClipboardConfig] = None):
        self.handle = handle
        self.config = config or ClipboardConfig.from_env()

    def _set_native(self, text: str) -> bool:
        with self.handle.acquire() as native:
            if native is None:
                return False
            try:
                native.set_text(text)
            except Exception as e:
                logger.debug("native clipboard failed, using OSC52: %s", e)
                return False
            if self.config.settle_delay:
                time.sleep(self.config.settle_delay)
            return True

    def set_text(self, text: str) -> str:
        if self.config.use_native and self._set_native(text):
            return "native"
        # OSC52 touches no shared state, so it runs outside the lock
        return copy_osc52(text, self.config)


def is_supported_platform(platform: str = sys.platform) -> bool:
    return not platform.startswith(UNSUPPORTED_PLATFORMS)


def select_setter(
    handle: Optional[ClipboardHandle] = None,
    config: Optional[ClipboardConfig] = None,
    platform: str = sys.platform,
) -> ClipboardSetter:
    """Return the setter variant suited to ``platform``."""
    if not is_supported_platform(platform):
        return UnsupportedClipboardSetter()
    return SystemClipboardSetter(handle or default_handle(), config)


_default_handle: Optional[ClipboardHandle] = None
_default_handle_lock = threading.Lock()


def default_handle() -> ClipboardHandle:
    """Process-wide handle for callers that do not manage their own."""
    global _default_handle
    with _default_handle_lock:
        if _default_handle is None:
            _default_handle = ClipboardHandle.lazy()
        return _default_handle


def set_text(
    text: str,
    handle: Optional[ClipboardHandle] = None,
    config: Optional[ClipboardConfig] = None,
) -> str:
    """Copy ``text`` to the clipboard.

    Args:
        text: The text to copy.
        handle: Native clipboard handle; the process-wide default if omitted.
        config: Fallback settings; read from the environment if omitted.

    Returns:
        How the text was delivered: "native", "helper" or "terminal".

    Raises:
        CopyError: if every available method failed. The reason is chained
            as ``__cause__``.
    """
    setter = select_setter(handle, config)
    try:
        method = setter.set_text(text)
    except (TermclipError, OSError, UnicodeError) as e:
        raise CopyError("Failed to copy") from e

    logger.debug("copied %d characters via %s", len(text), method)
    return method
