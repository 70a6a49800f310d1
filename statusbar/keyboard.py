"""Keyboard components: lock indicators and the active layout, read over X11."""

from __future__ import annotations

import os
import re
import socket
import string
import struct
import sys

from .util import warn

_INVALID_SYMBOLS = ("evdev", "inet", "pc", "base")

_X_GET_ATOM_NAME = 17
_X_QUERY_EXTENSION = 98
_X_GET_KEYBOARD_CONTROL = 103
_XKB_USE_EXTENSION = 0
_XKB_GET_STATE = 4
_XKB_GET_NAMES = 17
_XKB_USE_CORE_KBD = 0x100
_XKB_SYMBOLS_NAME_MASK = 1 << 2
_FAMILY_LOCAL = 256
_FAMILY_WILD = 0xFFFF
_COOKIE_NAME = b"MIT-MAGIC-COOKIE-1"


class XError(Exception):
    """A failure talking to the X server."""


def format_indicators(fmt: str, led_mask: int) -> str:
    """Render caps ('c') and num ('n') lock state as described by fmt.

    A letter followed by '?' appears, case preserved, only while its
    indicator is on; otherwise it always appears, upper case when on.
    """
    fmt = fmt[:4]
    out = []
    for i, char in enumerate(fmt):
        key = char.lower()
        if key not in ("c", "n"):
            continue
        togglecase = i + 1 >= len(fmt) or fmt[i + 1] != "?"
        isset = bool(led_mask & (1 << (key == "n")))
        if togglecase:
            out.append(key.upper() if isset else key)
        elif isset:
            out.append(char)
    return "".join(out)


def get_layout(symbols: str, group: int) -> str | None:
    """Pick the layout for a keyboard group out of an XKB symbols name."""
    layout = None
    found = 0
    for token in filter(None, re.split(r"[+:]", symbols)):
        if found > group:
            break
        if token.startswith(_INVALID_SYMBOLS):
            continue
        if len(token) == 1 and token in string.digits:
            continue
        layout = token
        found += 1
    return layout


def _pad(length: int) -> bytes:
    return bytes(-length % 4)


def _parse_display(display: str) -> tuple[str, int]:
    host, sep, rest = display.rpartition(":")
    if not sep:
        raise XError(f"invalid display {display!r}")
    try:
        number = int(rest.split(".", 1)[0])
    except ValueError:
        raise XError(f"invalid display {display!r}") from None
    return host, number


def _connect(host: str, number: int) -> socket.socket:
    if host and host != "unix":
        return socket.create_connection((host, 6000 + number))
    path = f"/tmp/.X11-unix/X{number}"
    candidates = [path]
    if sys.platform.startswith("linux"):
        candidates.append("\0" + path)
    error: OSError | None = None
    for candidate in candidates:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(candidate)
            return sock
        except OSError as exc:
            sock.close()
            error = exc
    assert error is not None
    raise error


def _read_xauthority(number: int) -> tuple[bytes, bytes]:
    path = os.environ.get("XAUTHORITY") or os.path.join(
        os.path.expanduser("~"), ".Xauthority"
    )
    try:
        with open(path, "rb") as fp:
            data = fp.read()
    except OSError:
        return b"", b""

    local = socket.gethostname().encode()
    wanted = (b"", str(number).encode())
    offset = 0
    fallback: bytes | None = None

    def field() -> bytes:
        nonlocal offset
        (length,) = struct.unpack_from(">H", data, offset)
        offset += 2
        value = data[offset : offset + length]
        offset += length
        return value

    while offset < len(data):
        try:
            (family,) = struct.unpack_from(">H", data, offset)
            offset += 2
            address, num, name, cookie = field(), field(), field(), field()
        except struct.error:
            break
        if name != _COOKIE_NAME or num not in wanted:
            continue
        if family == _FAMILY_WILD or (family == _FAMILY_LOCAL and address == local):
            return name, cookie
        if fallback is None:
            fallback = cookie
    if fallback is not None:
        return _COOKIE_NAME, fallback
    return b"", b""


class _XConnection:
    """A minimal X11 protocol connection."""

    def __init__(self, display: str | None = None) -> None:
        display = display if display is not None else os.environ.get("DISPLAY")
        if not display:
            raise XError("DISPLAY is not set")
        host, number = _parse_display(display)
        self._sock = _connect(host, number)
        try:
            self._setup(number)
        except BaseException:
            self._sock.close()
            raise

    def __enter__(self) -> _XConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._sock.close()

    def _recv(self, size: int) -> bytes:
        chunks = []
        while size > 0:
            chunk = self._sock.recv(size)
            if not chunk:
                raise XError("connection closed by the X server")
            chunks.append(chunk)
            size -= len(chunk)
        return b"".join(chunks)

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

    def request(self, data: bytes) -> bytes:
        """Send one request and return its reply."""
        self._sock.sendall(data)
        while True:
            head = self._recv(32)
            kind = head[0] & 0x7F
            if kind == 0:
                raise XError(f"X error code {head[1]}")
            if kind == 1:
                (length,) = struct.unpack_from("<I", head, 4)
                return head + self._recv(length * 4)
            if kind == 35:
                (length,) = struct.unpack_from("<I", head, 4)
                self._recv(length * 4)

    def atom_name(self, atom: int) -> str:
        reply = self.request(struct.pack("<BxHI", _X_GET_ATOM_NAME, 2, atom))
        (length,) = struct.unpack_from("<H", reply, 8)
        return reply[32 : 32 + length].decode("latin-1")

    def extension_opcode(self, name: bytes) -> int:
        length = 2 + (len(name) + 3) // 4
        reply = self.request(
            struct.pack("<BxHHxx", _X_QUERY_EXTENSION, length, len(name))
            + name
            + _pad(len(name))
        )
        if not reply[8]:
            raise XError(f"extension {name.decode()} missing")
        return reply[9]


def _xkb_init(conn: _XConnection) -> int:
    major = conn.extension_opcode(b"XKEYBOARD")
    reply = conn.request(struct.pack("<BBHHH", major, _XKB_USE_EXTENSION, 2, 1, 0))
    if not reply[1]:
        raise XError("XKB version not supported")
    return major


def _xkb_symbols_atom(conn: _XConnection, major: int) -> int:
    reply = conn.request(
        struct.pack(
            "<BBHHxxI", major, _XKB_GET_NAMES, 3, _XKB_USE_CORE_KBD,
            _XKB_SYMBOLS_NAME_MASK,
        )
    )
    (which,) = struct.unpack_from("<I", reply, 8)
    if not which & _XKB_SYMBOLS_NAME_MASK:
        raise XError("no symbols name")
    index = bin(which & (_XKB_SYMBOLS_NAME_MASK - 1)).count("1")
    (atom,) = struct.unpack_from("<I", reply, 32 + 4 * index)
    return atom


def _xkb_group(conn: _XConnection, major: int) -> int:
    reply = conn.request(
        struct.pack("<BBHHxx", major, _XKB_GET_STATE, 2, _XKB_USE_CORE_KBD)
    )
    return reply[12]


_FAILURES = (XError, OSError, struct.error, IndexError)


def keyboard_indicators(fmt: str) -> str | None:
    """Return the caps and num lock indicators formatted by fmt."""
    try:
        conn = _XConnection()
    except _FAILURES:
        warn("XOpenDisplay: Failed to open display")
        return None
    with conn:
        try:
            reply = conn.request(struct.pack("<BxH", _X_GET_KEYBOARD_CONTROL, 1))
            (led_mask,) = struct.unpack_from("<I", reply, 8)
        except _FAILURES:
            warn("XGetKeyboardControl: Failed to read keyboard state")
            return None
    return format_indicators(fmt, led_mask)


def keymap(unused: object = None) -> str | None:
    """Return the layout of the active keyboard group."""
    try:
        conn = _XConnection()
    except _FAILURES:
        warn("XOpenDisplay: Failed to open display")
        return None
    with conn:
        try:
            major = _xkb_init(conn)
            atom = _xkb_symbols_atom(conn, major)
        except _FAILURES:
            warn("XkbGetNames: Failed to retrieve key symbols")
            return None
        try:
            group = _xkb_group(conn, major)
        except _FAILURES:
            warn("XkbGetState: Failed to retrieve keyboard state")
            return None
        try:
            symbols = conn.atom_name(atom)
        except _FAILURES:
            warn("XGetAtomName: Failed to get atom name")
            return None
    return get_layout(symbols, group)