"""Unit tests for the clipboard setters and the set_text entry point."""

import threading
import time

import pytest
from unittest.mock import Mock, patch

from termclip.config import ClipboardConfig
from termclip.core import clipboard
from termclip.core.clipboard import (
    SystemClipboardSetter,
    UnsupportedClipboardSetter,
    default_handle,
    select_setter,
    set_text,
)
from termclip.core.exceptions import (
    ClipboardUnavailableError,
    CopyError,
    OSC52DeliveryError,
)
from termclip.core.native import ClipboardHandle, NativeClipboard
from termclip.core.osc52 import build_sequence


@pytest.fixture
def config(tmp_path):
    """Config that never touches the real terminal and never sleeps."""
    return ClipboardConfig(osc_tty=None, tty_path=str(tmp_path / "tty"), settle_delay=0.0)


@pytest.fixture
def native():
    return Mock(spec=NativeClipboard)


def test_native_success_skips_osc52(native, config):
    setter = SystemClipboardSetter(ClipboardHandle(native=native), config)

    with patch("termclip.core.clipboard.copy_osc52") as osc:
        assert setter.set_text("hello") == "native"

    native.set_text.assert_called_once_with("hello")
    osc.assert_not_called()


def test_native_success_waits_for_settle_delay(native, config):
    config.settle_delay = 0.05
    setter = SystemClipboardSetter(ClipboardHandle(native=native), config)

    with patch("termclip.core.clipboard.time.sleep") as sleep:
        setter.set_text("hello")

    sleep.assert_called_once_with(0.05)


def test_no_settle_delay_when_zero(native, config):
    setter = SystemClipboardSetter(ClipboardHandle(native=native), config)

    with patch("termclip.core.clipboard.time.sleep") as sleep:
        setter.set_text("hello")

    sleep.assert_not_called()


def test_native_failure_falls_back_to_osc52(native, config):
    native.set_text.side_effect = RuntimeError("clipboard owned by someone else")
    setter = SystemClipboardSetter(ClipboardHandle(native=native), config)

    with patch("termclip.core.clipboard.copy_osc52", return_value="terminal") as osc, \
            patch("termclip.core.clipboard.time.sleep") as sleep:
        assert setter.set_text("hello") == "terminal"

    osc.assert_called_once_with("hello", config)
    sleep.assert_not_called()


def test_missing_native_goes_straight_to_osc52(config):
    setter = SystemClipboardSetter(ClipboardHandle(native=None), config)

    with patch("termclip.core.clipboard.copy_osc52", return_value="terminal") as osc:
        assert setter.set_text("hello") == "terminal"

    osc.assert_called_once()


def test_use_native_false_skips_handle(native, config):
    config.use_native = False
    setter = SystemClipboardSetter(ClipboardHandle(native=native), config)

    with patch("termclip.core.clipboard.copy_osc52", return_value="terminal"):
        setter.set_text("hello")

    native.set_text.assert_not_called()


def test_osc52_runs_outside_the_lock(config):
    handle = ClipboardHandle(native=None)
    setter = SystemClipboardSetter(handle, config)
    seen = []

    def fake_osc(text, cfg):
        seen.append(handle.lock.locked())
        return "terminal"

    with patch("termclip.core.clipboard.copy_osc52", side_effect=fake_osc):
        setter.set_text("x")

    assert seen == [False]


@pytest.mark.parametrize("platform", ["android", "emscripten", "wasi"])
def test_select_setter_unsupported_platforms(platform):
    assert isinstance(select_setter(platform=platform), UnsupportedClipboardSetter)


@pytest.mark.parametrize("platform", ["linux", "darwin", "win32", "freebsd14"])
def test_select_setter_supported_platforms(platform, config):
    handle = ClipboardHandle()
    setter = select_setter(handle, config, platform=platform)

    assert isinstance(setter, SystemClipboardSetter)
    assert setter.handle is handle


def test_unsupported_setter_always_fails():
    with pytest.raises(ClipboardUnavailableError, match="No clipboard available"):
        UnsupportedClipboardSetter().set_text("anything")


def test_default_handle_is_shared():
    assert default_handle() is default_handle()


# --- set_text ---


def test_set_text_native(native, config):
    assert set_text("hello", handle=ClipboardHandle(native=native), config=config) == "native"
    native.set_text.assert_called_once_with("hello")


def test_set_text_unsupported_platform_wraps_error():
    with patch("termclip.core.clipboard.is_supported_platform", return_value=False):
        with pytest.raises(CopyError) as excinfo:
            set_text("anything")

    err = excinfo.value
    assert isinstance(err.__cause__, ClipboardUnavailableError)
    assert str(err) == "Failed to copy: No clipboard available"


def test_set_text_helper_missing_uses_terminal(tmp_path):
    """OSC_TTY set but no helper installed: the terminal write decides."""
    tty = tmp_path / "tty"
    config = ClipboardConfig(
        osc_tty="/dev/pts/9",
        helper_command="termclip-no-such-helper-xyz",
        tty_path=str(tty),
    )

    method = set_text("over ssh", handle=ClipboardHandle(native=None), config=config)

    assert method == "terminal"
    assert tty.read_bytes() == build_sequence("over ssh")


def test_set_text_nowhere_to_write(tmp_path, monkeypatch):
    monkeypatch.setattr(clipboard.sys, "stdout", None)
    config = ClipboardConfig(osc_tty=None, tty_path=str(tmp_path / "missing" / "tty"))

    with pytest.raises(CopyError) as excinfo:
        set_text("x", handle=ClipboardHandle(native=None), config=config)

    assert isinstance(excinfo.value.__cause__, OSC52DeliveryError)
    assert str(excinfo.value).startswith("Failed to copy: ")


def test_set_text_wraps_raw_os_error(config):
    with patch("termclip.core.clipboard.copy_osc52", side_effect=OSError("EIO")):
        with pytest.raises(CopyError) as excinfo:
            set_text("x", handle=ClipboardHandle(native=None), config=config)

    assert isinstance(excinfo.value.__cause__, OSError)


def test_concurrent_set_text_serializes_native_access(config):
    """Threads never use the native clipboard at the same time."""
    state = {"active": 0, "max_active": 0, "calls": 0}
    guard = threading.Lock()

    class SlowNative:
        def set_text(self, text):
            with guard:
                state["active"] += 1
                state["calls"] += 1
                state["max_active"] = max(state["max_active"], state["active"])
            time.sleep(0.005)
            with guard:
                state["active"] -= 1

    handle = ClipboardHandle(native=SlowNative())
    errors = []

    def worker(n):
        try:
            set_text(f"text {n}", handle=handle, config=config)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert state["calls"] == 10
    assert state["max_active"] == 1


def test_default_config_settles_on_linux(native, monkeypatch):
    """A config built without from_env still waits after a native copy on Linux."""
    monkeypatch.setattr("termclip.config.sys.platform", "linux")

    with patch("termclip.core.clipboard.time.sleep") as sleep:
        set_text("x", handle=ClipboardHandle(native=native), config=ClipboardConfig(osc_tty=None))

    sleep.assert_called_once_with(0.05)


def test_default_config_does_not_settle_on_macos(native, monkeypatch):
    monkeypatch.setattr("termclip.config.sys.platform", "darwin")

    with patch("termclip.core.clipboard.time.sleep") as sleep:
        set_text("x", handle=ClipboardHandle(native=native), config=ClipboardConfig())

    sleep.assert_not_called()


def test_set_text_unencodable_text_wraps_error(config):
    """Lone surrogates cannot be sent over OSC52 and surface as CopyError."""
    with pytest.raises(CopyError) as excinfo:
        set_text("bad \udcff byte", handle=ClipboardHandle(native=None), config=config)

    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)
    assert str(excinfo.value).startswith("Failed to copy: ")


def test_set_text_unencodable_text_with_helper(tmp_path):
    config = ClipboardConfig(osc_tty="/dev/pts/9", tty_path=str(tmp_path / "tty"))

    with patch("termclip.core.osc52.subprocess.Popen") as popen:
        with pytest.raises(CopyError):
            set_text("bad \udcff byte", handle=ClipboardHandle(native=None), config=config)

    popen.assert_not_called()
