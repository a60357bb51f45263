"""OSC52 clipboard fallback.

OSC52 asks the terminal emulator itself to set its clipboard, which works
over SSH and on hosts without a display server:

    ESC ] 52 ; c ; <base64 payload> BEL

Delivery is attempted in two tiers:

1. the external ``osc copy --device $OSC_TTY`` helper, when ``OSC_TTY`` is set
2. writing the sequence straight to the controlling terminal, or to stdout
   when the terminal device cannot be opened
"""

from __future__ import annotations

import base64
import io
import logging
import subprocess
import sys
from typing import BinaryIO, Optional, TextIO, Union

from termclip.config import ClipboardConfig, DEFAULT_HELPER_COMMAND, default_tty_path
from .exceptions import OSC52DeliveryError

logger = logging.getLogger(__name__)

OSC52_PREFIX = b"\x1b]52;c;"
OSC52_TERMINATOR = b"\x07"


def build_sequence(text: str) -> bytes:
    """Return the OSC52 "set clipboard" sequence carrying ``text``."""
    payload = base64.b64encode(text.encode("utf-8"))
    return OSC52_PREFIX + payload + OSC52_TERMINATOR


def decode_sequence(seq: bytes) -> str:
    """Recover the text carried by a sequence made with :func:`build_sequence`.

    Raises:
        ValueError: if ``seq`` is not a clipboard-selection OSC52 sequence or
            its payload is not valid base64 / UTF-8.
    """
    if not seq.startswith(OSC52_PREFIX) or not seq.endswith(OSC52_TERMINATOR):
        raise ValueError("not an OSC52 clipboard sequence")
    payload = seq[len(OSC52_PREFIX):-len(OSC52_TERMINATOR)]
    return base64.b64decode(payload, validate=True).decode("utf-8")


def copy_via_helper(
    text: str,
    device: str,
    command: str = DEFAULT_HELPER_COMMAND,
    timeout: Optional[float] = None,
) -> bool:
    """Hand ``text`` to ``<command> copy --device <device>`` on its stdin.

    Returns True only if the helper ran, took all of ``text`` on stdin and
    exited with status 0. A missing executable, a failed stdin write, a
    timeout or a non-zero exit all return False so the caller can move on
    to the direct terminal write.

    Raises:
        UnicodeEncodeError: if ``text`` cannot be encoded as UTF-8.
    """
    data = text.encode("utf-8")
    argv = [command, "copy", "--device", device]
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("could not run %s: %s", command, e)
        return False

    try:
        try:
            proc.stdin.write(data)
        finally:
            proc.stdin.close()
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", command, timeout)
        proc.kill()
        proc.wait()
        return False
    except OSError as e:
        logger.debug("could not feed %s: %s", command, e)
        proc.kill()
        proc.wait()
        return False

    if returncode != 0:
        logger.debug("%s exited with status %d", command, returncode)
        return False
    return True


def _write(target: Union[BinaryIO, TextIO], seq: bytes) -> None:
    buffer = getattr(target, "buffer", None)
    if buffer is not None:
        # text stream wrapping a binary one; bypass the text layer
        target.flush()
        buffer.write(seq)
        buffer.flush()
    elif isinstance(target, io.TextIOBase):
        target.write(seq.decode("ascii"))
        target.flush()
    else:
        target.write(seq)
        target.flush()


def write_to_terminal(
    text: str,
    tty_path: Optional[str] = None,
    stream: Optional[Union[BinaryIO, TextIO]] = None,
) -> None:
    """Write the OSC52 sequence for ``text`` to the terminal.

    The terminal device is tried first. If it cannot be opened the sequence
    goes to ``stream`` (standard output by default).

    Raises:
        OSC52DeliveryError: if neither target accepted the write.
    """
    seq = build_sequence(text)
    path = tty_path or default_tty_path()

    try:
        tty = open(path, "wb")
    except OSError as e:
        logger.debug("cannot open %s (%s); falling back to stdout", path, e)
        tty = None

    if tty is not None:
        try:
            tty.write(seq)
            tty.flush()
        except OSError as e:
            raise OSC52DeliveryError(f"could not write to {path}") from e
        finally:
            tty.close()
        return

    target = stream if stream is not None else sys.stdout
    if target is None:
        raise OSC52DeliveryError("no terminal device and no standard output")
    try:
        _write(target, seq)
    except (OSError, ValueError) as e:
        raise OSC52DeliveryError("could not write to standard output") from e


def copy_osc52(text: str, config: Optional[ClipboardConfig] = None) -> str:
    """Run the OSC52 fallback chain; each tier is tried at most once.

    Returns the name of the tier that delivered ("helper" or "terminal").
    """
    config = config or ClipboardConfig.from_env()

    if config.osc_tty is not None:
        if copy_via_helper(
            text,
            config.osc_tty,
            command=config.helper_command,
            timeout=config.helper_timeout,
        ):
            return "helper"

    write_to_terminal(text, tty_path=config.tty_path)
    return "terminal"
