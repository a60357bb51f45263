"""
Exceptions for the termclip core module
Everything raised on purpose derives from TermclipError
"""


class TermclipError(Exception):
    # general container for errors
    pass


class ClipboardUnavailableError(TermclipError):
    # raised on platforms with no clipboard concept at all

    def __init__(self, message: str = "No clipboard available"):
        super().__init__(message)


class OSC52DeliveryError(TermclipError):
    # raised when the escape sequence could not reach any terminal target
    pass


class CopyError(TermclipError):
    """The single error surfaced to callers of ``set_text``.

    The underlying failure is kept as ``__cause__`` and rendered after the
    message, e.g. ``Failed to copy: No clipboard available``.
    """

    def __init__(self, message: str = "Failed to copy"):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        cause = self.__cause__
        if cause is None:
            return self.message
        detail = str(cause) or cause.__class__.__name__
        return f"{self.message}: {detail}"
