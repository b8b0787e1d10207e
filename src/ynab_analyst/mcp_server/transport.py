"""
transport.py — Content-Length framing for JSON-RPC over a byte stream.

Wire format per message:

    Content-Length: <N>\\r\\n
    \\r\\n
    <N bytes of UTF-8 body>

No other headers are recognized.
"""

from typing import BinaryIO, Final

from ynab_analyst.mcp_server.errors import (
    FramingError,
    MessageEncodingError,
    TruncatedMessageError,
)

HEADER_PREFIX: Final = b"Content-Length:"
MAX_CONTENT_LENGTH: Final = 32 * 1024 * 1024
READ_CHUNK_SIZE: Final = 64 * 1024


class _EndOfStream:
    """Sentinel returned by read_message when the peer closed the stream cleanly."""

    _instance: "_EndOfStream | None" = None

    def __new__(cls) -> "_EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"

    def __bool__(self) -> bool:
        return False


END_OF_STREAM: Final = _EndOfStream()


def read_message(stream: BinaryIO) -> "str | _EndOfStream":
    """
    Read one framed message body from *stream*.

    Returns END_OF_STREAM when the stream is exhausted before any header byte.
    Raises FramingError, TruncatedMessageError or MessageEncodingError for
    malformed input; OSError from the stream propagates unchanged.
    """
    header_line = stream.readline()
    if header_line == b"":
        return END_OF_STREAM

    if not header_line.startswith(HEADER_PREFIX):
        raise FramingError("Expected Content-Length header")

    raw_length = header_line[len(HEADER_PREFIX) :].strip()
    if not raw_length.isdigit():
        raise FramingError(
            f"Invalid Content-Length value: {raw_length.decode('ascii', errors='replace')}"
        )
    significant = raw_length.lstrip(b"0") or b"0"
    if len(significant) > len(str(MAX_CONTENT_LENGTH)) or int(significant) > MAX_CONTENT_LENGTH:
        raise FramingError(f"Content-Length exceeds the {MAX_CONTENT_LENGTH} byte limit")
    content_length = int(significant)

    # Separator line; contents are not validated.
    stream.readline()

    body = _read_exact(stream, content_length)

    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MessageEncodingError("Message content is not valid UTF-8") from exc


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            raise TruncatedMessageError(expected=size, received=size - remaining)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def encode_message(message: str) -> bytes:
    """Return the framed wire bytes for *message*."""
    body = message.encode("utf-8")
    return b"Content-Length: %d\r\n\r\n" % len(body) + body


def write_message(stream: BinaryIO, message: str) -> None:
    """Write *message* with its Content-Length header and flush."""
    stream.write(encode_message(message))
    stream.flush()
