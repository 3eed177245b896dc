"""Send one response document, then close the connection from the server side."""
import asyncio
import logging

from funkoshelf.models.envelope import Response

logger = logging.getLogger(__name__)


async def write_response(writer: asyncio.StreamWriter, response: Response) -> bool:
    """Write response and close once the write has drained.

    On write failure the transport is aborted instead of closed. Returns True
    if the response was delivered to the transport.
    """
    peer = writer.get_extra_info("peername")
    data = response.to_json_bytes()
    logger.debug("Sending response to %s: %.100s", peer, data.decode("utf-8", "replace"))
    try:
        writer.write(data)
        await writer.drain()
    except (ConnectionError, OSError) as e:
        logger.error("Error writing response to %s: %s", peer, e)
        writer.transport.abort()
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except (ConnectionError, OSError) as e:
        # Response already flushed; peer reset during close
        logger.debug("Close after response to %s: %s", peer, e)
    logger.info("Response sent to %s, connection closed", peer)
    return True
