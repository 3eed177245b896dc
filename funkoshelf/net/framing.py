"""Collect one request per connection: everything the peer sends before it half-closes."""
import asyncio
from typing import Optional

READ_CHUNK_SIZE = 64 * 1024


class FramingError(Exception):
    """The connection did not deliver a usable request."""


class EmptyRequestError(FramingError):
    def __init__(self) -> None:
        super().__init__("empty request (peer closed without sending data)")


class RequestTimeoutError(FramingError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"request not completed within {timeout:g}s")
        self.timeout = timeout


class RequestTooLargeError(FramingError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"request exceeds {limit} bytes")
        self.limit = limit


async def _collect(reader: asyncio.StreamReader, max_bytes: Optional[int]) -> bytes:
    buf = bytearray()
    too_large = False
    while True:
        chunk = await reader.read(READ_CHUNK_SIZE)
        if not chunk:
            # EOF: peer half-closed its write side
            break
        if too_large:
            continue
        buf.extend(chunk)
        if max_bytes is not None and len(buf) > max_bytes:
            # Discard the rest of the input up to EOF before answering
            too_large = True
            buf.clear()
    if too_large:
        raise RequestTooLargeError(max_bytes)
    return bytes(buf)


async def read_request(
    reader: asyncio.StreamReader,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> bytes:
    """Return the complete request payload once the peer half-closes.

    timeout bounds the whole receive (None or 0 waits forever). An oversized
    request is still read to EOF, within the same timeout. Raises
    EmptyRequestError, RequestTimeoutError or RequestTooLargeError.
    """
    try:
        if timeout:
            payload = await asyncio.wait_for(_collect(reader, max_bytes), timeout)
        else:
            payload = await _collect(reader, max_bytes)
    except asyncio.TimeoutError:
        raise RequestTimeoutError(timeout) from None
    if not payload:
        raise EmptyRequestError()
    return payload
