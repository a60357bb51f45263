"""Runtime configuration for termclip, read from the environment.

Recognised variables:

- ``OSC_TTY``: device handed to the ``osc`` helper (tier 1 of the OSC52
  fallback). Any present value counts, including an empty one.
- ``TERMCLIP_OSC_COMMAND``: helper executable name (default ``osc``).
- ``TERMCLIP_TTY``: terminal device for the direct write (tier 2).
- ``TERMCLIP_HELPER_TIMEOUT``: seconds to wait for the helper; unset means
  wait indefinitely.
- ``TERMCLIP_NO_NATIVE``: ``1``/``true``/``yes`` skips the native clipboard.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

OSC_TTY_ENV = "OSC_TTY"
DEFAULT_HELPER_COMMAND = "osc"
LINUX_SETTLE_DELAY = 0.05

_TRUTHY = {"1", "true", "yes", "on"}


def default_tty_path(platform: Optional[str] = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return "CONOUT$"
    return "/dev/tty"


def default_settle_delay(platform: Optional[str] = None) -> float:
    platform = platform or sys.platform
    # Linux clipboard owners must stay alive briefly or the selection is lost.
    if platform.startswith("linux"):
        return LINUX_SETTLE_DELAY
    return 0.0


@dataclass
class ClipboardConfig:
    """Knobs for the native clipboard and the OSC52 fallback chain."""

    osc_tty: Optional[str] = None
    helper_command: str = DEFAULT_HELPER_COMMAND
    tty_path: str = field(default_factory=default_tty_path)
    settle_delay: float = field(default_factory=default_settle_delay)
    helper_timeout: Optional[float] = None
    use_native: bool = True

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        platform: Optional[str] = None,
    ) -> "ClipboardConfig":
        env = os.environ if environ is None else environ

        timeout: Optional[float] = None
        raw_timeout = env.get("TERMCLIP_HELPER_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    "Ignoring invalid TERMCLIP_HELPER_TIMEOUT=%r", raw_timeout
                )
            else:
                if timeout <= 0:
                    logger.warning(
                        "Ignoring non-positive TERMCLIP_HELPER_TIMEOUT=%r", raw_timeout
                    )
                    timeout = None

        no_native = env.get("TERMCLIP_NO_NATIVE", "").strip().lower() in _TRUTHY

        return cls(
            osc_tty=env.get(OSC_TTY_ENV),
            helper_command=env.get("TERMCLIP_OSC_COMMAND") or DEFAULT_HELPER_COMMAND,
            tty_path=env.get("TERMCLIP_TTY") or default_tty_path(platform),
            settle_delay=default_settle_delay(platform),
            helper_timeout=timeout,
            use_native=not no_native,
        )
