"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, control keys, paging keys, and UTF-8 input.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
CSI_MAX_LENGTH = 16
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x07": "CTRL_G",
    b"\x0b": "CTRL_K",
    b"\x0c": "CTRL_L",
    b"\x15": "CTRL_U",
    b"\x17": "CTRL_W",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_TILDE_TOKENS: dict[bytes, str] = {
    b"1": "HOME",
    b"3": "DELETE",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}

_CSI_FINAL_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_sequence_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_utf8(fd: int, first: bytes) -> str:
    """Collect the continuation bytes of a multi-byte character."""
    data = first
    for _ in range(_utf8_sequence_length(first[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_csi_sequence(fd: int) -> tuple[bytes, bytes] | None:
    """Consume CSI parameter and intermediate bytes up to the final byte.

    Returns ``(params, final)``, or ``None`` when the sequence is cut off or
    overlong. Nothing from the sequence is left unread.
    """
    params = b""
    for _ in range(CSI_MAX_LENGTH):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            return None
        if 0x20 <= nxt[0] <= 0x3F:
            params += nxt
            continue
        return params, nxt
    return None


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Return the next key token, or ``""`` when nothing arrived in time."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    token = _CONTROL_TOKENS.get(ch)
    if token is not None:
        return token

    if ch != b"\x1b":
        if ch[0] < 0x20:
            return f"CTRL_{chr(ch[0] + 0x40)}"
        return _decode_utf8(fd, ch)

    # Escape / arrow / paging sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL_TOKENS.get(final, "ESC")

    sequence = _read_csi_sequence(fd)
    if sequence is None:
        return "ESC"
    params, final = sequence
    if final == b"~":
        return _CSI_TILDE_TOKENS.get(params.split(b";", 1)[0], "ESC")
    # Modifier parameters (Ctrl/Shift/Alt + arrow) map to the plain key.
    return _CSI_FINAL_TOKENS.get(final, "ESC")


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "_PENDING_BYTES", "read_key"]
