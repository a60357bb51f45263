"""termclip: copy text to the clipboard, locally or over SSH.

The native clipboard is used when one is available; otherwise the text is
sent to the terminal emulator as an OSC52 escape sequence.
"""

from .config import ClipboardConfig
from .core.clipboard import (
    ClipboardSetter,
    SystemClipboardSetter,
    UnsupportedClipboardSetter,
    select_setter,
    set_text,
)
from .core.exceptions import (
    ClipboardUnavailableError,
    CopyError,
    OSC52DeliveryError,
    TermclipError,
)
from .core.native import ClipboardHandle, NativeClipboard
from .core.osc52 import build_sequence, decode_sequence

__version__ = "0.1.0"

__all__ = [
    "set_text",
    "select_setter",
    "ClipboardSetter",
    "SystemClipboardSetter",
    "UnsupportedClipboardSetter",
    "ClipboardHandle",
    "NativeClipboard",
    "ClipboardConfig",
    "build_sequence",
    "decode_sequence",
    "TermclipError",
    "ClipboardUnavailableError",
    "OSC52DeliveryError",
    "CopyError",
]
