"""The status loop: render components into one line and publish it."""

from __future__ import annotations

import re
import select
import signal
import socket
import struct
import sys
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .cpu import cpu_perc
from .keyboard import XError, _pad, _read_xauthority, _XConnection
from .memory import ram_total, ram_used
from .system import datetime
from .util import warn

VERSION = "1.0"

# Interval between updates, in milliseconds.
INTERVAL = 1000
# Text shown when a component has no value.
UNKNOWN_STR = "n/a"
# Maximum length of the status line in bytes, terminator included.
MAXLEN = 2048

_X_CHANGE_PROPERTY = 18
_PROP_MODE_REPLACE = 0
_ATOM_STRING = 31
_ATOM_WM_NAME = 39

_CONVERSION = re.compile(r"%(.?)", re.DOTALL)


class UsageError(Exception):
    """The command line could not be understood."""


@dataclass(frozen=True)
class Component:
    """One piece of the status line: a function, its format and its argument."""

    func: Callable[[object], str | None]
    fmt: str = "%s"
    arg: object = None


@dataclass(frozen=True)
class Options:
    """What the command line asked for."""

    stdout: bool = False
    once: bool = False
    version: bool = False


DEFAULT_COMPONENTS: tuple[Component, ...] = (
    Component(cpu_perc, "  %s%%"),
    Component(ram_used, "  %s"),
    Component(ram_total, "/%s"),
    Component(datetime, "  %s", "%m-%d-%Y %I:%M:%S %p "),
)


def parse_args(argv: Sequence[str]) -> Options:
    """Parse the flags -v, -s and -1 (which implies -s).

    Flags may be combined, '--' ends them and no operands are accepted.
    """
    args = list(argv)
    stdout = once = False
    while args and args[0].startswith("-") and len(args[0]) > 1:
        arg = args.pop(0)
        if arg == "--":
            break
        for flag in arg[1:]:
            if flag == "v":
                return Options(version=True)
            if flag == "1":
                once = True
                stdout = True
            elif flag == "s":
                stdout = True
            else:
                raise UsageError(f"unknown option '-{flag}'")
    if args:
        raise UsageError(f"unexpected argument {args[0]!r}")
    return Options(stdout=stdout, once=once)


def _format(fmt: str, value: str) -> str:
    def replace(match: re.Match[str]) -> str:
        spec = match.group(1)
        if spec == "%":
            return "%"
        if spec == "s":
            return value
        raise ValueError(f"unsupported conversion in format {fmt!r}")

    return _CONVERSION.sub(replace, fmt)


def render_status(
    components: Sequence[Component],
    unknown: str = UNKNOWN_STR,
    maxlen: int = MAXLEN,
) -> str:
    """Build the status line from the components, in order.

    A component without a value shows `unknown`.  The line holds at most
    maxlen - 1 bytes; whatever does not fit is cut off and a warning is given.
    """
    limit = maxlen - 1
    out = bytearray()
    for component in components:
        result = component.func(component.arg)
        if result is None:
            result = unknown
        piece = _format(component.fmt, result).encode("utf-8")
        if len(out) + len(piece) > limit:
            out += piece[: max(0, limit - len(out))]
            warn("vsnprintf: Output truncated")
            break
        out += piece
    return out.decode("utf-8", errors="ignore")


class _RootWindowName(_XConnection):
    """An X connection that sets the name of the default root window."""

    root = 0

    def _setup(self, number: int) -> None:
        name, cookie = _read_xauthority(number)
        header = struct.pack("<BxHHHHxx", 0x6C, 11, 0, len(name), len(cookie))
        self._sock.sendall(header + name + _pad(len(name)) + cookie + _pad(len(cookie)))
        status, reason_len, _major, _minor, length = struct.unpack(
            "<BBHHH", self._recv(8)
        )
        body = self._recv(length * 4)
        if status != 1:
            reason = body[:reason_len] if status == 0 else body
            raise XError(reason.decode("latin-1").strip("\0") or "setup refused")
        (vendor_len,) = struct.unpack_from("<H", body, 16)
        formats = body[21]
        offset = 32 + vendor_len + (-vendor_len % 4) + 8 * formats
        (self.root,) = struct.unpack_from("<I", body, offset)

    def store_name(self, name: str) -> None:
        """Replace WM_NAME of the root window."""
        data = name.encode("utf-8")
        padding = _pad(len(data))
        length = 6 + (len(data) + len(padding)) // 4
        request = struct.pack(
            "<BBHIIIBxxxI",
            _X_CHANGE_PROPERTY,
            _PROP_MODE_REPLACE,
            length,
            self.root,
            _ATOM_WM_NAME,
            _ATOM_STRING,
            8,
            len(data),
        )
        self._sock.sendall(request + data + padding)


class _SignalState:
    """Termination flag and an interruptible wait, driven by signals."""

    def __init__(self, done: bool = False) -> None:
        self.done = done
        self._wakeup: socket.socket | None = None

    def handle(self, signo: int, frame: object) -> None:
        if signo != signal.SIGUSR1:
            self.done = True

    def wait(self, timeout: float) -> None:
        if self._wakeup is None:
            time.sleep(timeout)
            return
        readable, _, _ = select.select([self._wakeup], [], [], timeout)
        if readable:
            try:
                while self._wakeup.recv(64):
                    pass
            except BlockingIOError:
                pass


@contextmanager
def _signals(state: _SignalState) -> Iterator[_SignalState]:
    if threading.current_thread() is not threading.main_thread():
        yield state
        return

    reader, writer = socket.socketpair()
    reader.setblocking(False)
    writer.setblocking(False)
    wanted = (signal.SIGINT, signal.SIGTERM, signal.SIGUSR1)
    previous = {signo: signal.getsignal(signo) for signo in wanted}
    old_fd = signal.set_wakeup_fd(writer.fileno(), warn_on_full_buffer=False)
    state._wakeup = reader
    try:
        for signo in wanted:
            signal.signal(signo, state.handle)
        yield state
    finally:
        for signo, handler in previous.items():
            signal.signal(signo, handler)
        signal.set_wakeup_fd(old_fd)
        state._wakeup = None
        reader.close()
        writer.close()


def _open_display() -> _RootWindowName:
    try:
        return _RootWindowName()
    except (XError, OSError, struct.error, IndexError) as exc:
        raise XError("XOpenDisplay: Failed to open display") from exc


def run(
    options: Options,
    components: Sequence[Component] = DEFAULT_COMPONENTS,
    interval: int = INTERVAL,
    out: TextIO | None = None,
) -> None:
    """Render the status every `interval` milliseconds until told to stop.

    With options.stdout the line is printed to `out`, otherwise it becomes
    the name of the X root window.  options.once renders a single line.
    """
    out = sys.stdout if out is None else out
    display = None if options.stdout else _open_display()
    state = _SignalState(done=options.once)

    @contextmanager
    def maybe_signals() -> Iterator[_SignalState]:
        if options.once:
            yield state
        else:
            with _signals(state):
                yield state

    try:
        with maybe_signals():
            while True:
                start = time.monotonic()
                status = render_status(components, UNKNOWN_STR, MAXLEN)
                if display is None:
                    print(status, file=out)
                    out.flush()
                else:
                    display.store_name(status)

                if state.done:
                    break
                remaining = interval / 1000 - (time.monotonic() - start)
                if remaining >= 0:
                    state.wait(remaining)
                if state.done:
                    break
    finally:
        if display is not None:
            try:
                display.store_name("")
            finally:
                display.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    prog = Path(sys.argv[0]).name or "statusbar"
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options = parse_args(args)
    except UsageError:
        print(f"usage: {prog} [-v] [-s] [-1]", file=sys.stderr)
        return 1
    if options.version:
        print(f"slstatus-{VERSION}", file=sys.stderr)
        return 1
    try:
        run(options, DEFAULT_COMPONENTS, INTERVAL, sys.stdout)
    except XError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"puts: {exc.strerror or exc}", file=sys.stderr)
        return 1
    return 0