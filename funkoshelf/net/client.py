"""Send one request to a Funko server and wait for its response."""
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from funkoshelf.config import CLIENT_HOST, CLIENT_TIMEOUT_SEC, SERVER_PORT
from funkoshelf.models.envelope import Request, Response

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """No usable response came back from the server."""


async def send_request(
    request: Request,
    host: str = CLIENT_HOST,
    port: int = SERVER_PORT,
    timeout: Optional[float] = CLIENT_TIMEOUT_SEC,
) -> Response:
    """Connect, send request, half-close, and read until the server closes.

    Raises ConnectionError (e.g. refused) or ClientError.
    """
    reader, writer = await asyncio.open_connection(host, port)
    logger.debug("Connected to %s:%s, sending %s request", host, port, request.type)
    try:
        writer.write(request.to_json_bytes())
        await writer.drain()
        # End of request is signaled by half-closing our side
        writer.write_eof()
        try:
            data = await asyncio.wait_for(reader.read(), timeout)
        except asyncio.TimeoutError:
            raise ClientError(f"no response from {host}:{port} within {timeout:g}s") from None
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug("Close after response: %s", e)

    if not data:
        raise ClientError("server closed the connection without a response")
    try:
        return Response.model_validate_json(data)
    except ValidationError as e:
        raise ClientError(f"invalid response from server: {e}") from e
