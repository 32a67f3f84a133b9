"""Content-Length framing of JSON-RPC messages and stderr line collection."""

from __future__ import annotations

import codecs
import json
import logging
from typing import Any

log = logging.getLogger(__name__)

_HEADER = b"Content-Length:"
_JUNK_LIMIT = 1 << 20
_MAX_PAYLOAD = 1 << 29


def encode_message(message: dict) -> bytes:
    """Frame ``message`` as a JSON-RPC 2.0 message with a Content-Length header."""
    payload = dict(message)
    payload["jsonrpc"] = "2.0"
    body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


def _parse_length(raw: bytes) -> int | None:
    try:
        length = int(raw.strip(), 10)
    except ValueError:
        return None
    return length if length >= 0 else None


class MessageReader:
    """Accumulates a server's output and splits it into decoded messages."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of bytes received but not yet consumed."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[dict[str, Any]]:
        """Append ``data`` and return every complete message now available.

        Invalid headers and unparsable payloads are skipped; junk without any
        header beyond 1 MiB and announced sizes beyond 512 MiB discard the buffer.
        """
        buffer = self._buffer
        buffer.extend(data)
        messages: list[dict[str, Any]] = []
        while True:
            index = buffer.find(_HEADER)
            if index < 0:
                if len(buffer) > _JUNK_LIMIT:
                    buffer.clear()
                break
            index += len(_HEADER)
            end_index = buffer.find(b"\r\n", index)
            start = buffer.find(b"\r\n\r\n", index)
            if end_index < 0 or start < 0:
                break
            start += 4
            length = _parse_length(bytes(buffer[index:end_index]))
            if length is None:
                log.warning("invalid Content-Length")
                del buffer[:start]
                continue
            if length > _MAX_PAYLOAD:
                log.warning("excessive size")
                buffer.clear()
                continue
            if start + length > len(buffer):
                break
            payload = bytes(buffer[start:start + length])
            del buffer[:start + length]
            log.debug("got message payload size %d", length)
            try:
                message = json.loads(payload.decode("utf-8"))
            except (UnicodeDecodeError, ValueError) as exc:
                log.warning("invalid response payload: %s", exc)
                continue
            if not isinstance(message, dict):
                log.warning("response payload is not an object")
                continue
            messages.append(message)
        return messages


class StderrLineBuffer:
    """Collects a server's error output and releases it in whole lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._text = ""

    @property
    def pending(self) -> str:
        """Text received after the last complete line."""
        return self._text

    def feed(self, data: bytes) -> str:
        """Append ``data``; return all complete lines without the final newline."""
        self._text += self._decoder.decode(data)
        cut = self._text.rfind("\n")
        if cut < 0:
            return ""
        lines = self._text[:cut]
        self._text = self._text[cut + 1:]
        return lines