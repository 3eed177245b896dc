"""
TCP request/response server for Funko collections.

One request per connection: the client sends a JSON request and half-closes,
the server answers with one JSON response and closes. All connections are
served on a single asyncio event loop; each one owns its receive buffer.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from funkoshelf.config import MAX_REQUEST_BYTES, REQUEST_TIMEOUT_SEC, SERVER_HOST, SERVER_PORT
from funkoshelf.core.dispatcher import Dispatcher
from funkoshelf.models.envelope import ErrorKind, Response
from funkoshelf.net.framing import (
    FramingError,
    RequestTimeoutError,
    RequestTooLargeError,
    read_request,
)
from funkoshelf.net.response_writer import write_response

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """Registry entry for an open client connection"""
    conn_id: str
    peer: tuple
    writer: asyncio.StreamWriter = field(repr=False)


def framing_error_response(err: FramingError) -> Response:
    """Failure response for a request that never arrived intact."""
    if isinstance(err, RequestTimeoutError):
        kind = ErrorKind.TIMEOUT
    elif isinstance(err, RequestTooLargeError):
        kind = ErrorKind.TOO_LARGE
    else:
        kind = ErrorKind.PARSE_ERROR
    return Response.failure("add", f"Error: Parse error processing request: {err}", kind)


class FunkoServer:
    """Accepts connections and answers exactly one request on each"""

    def __init__(
        self,
        dispatcher: Dispatcher,
        host: str = SERVER_HOST,
        port: int = SERVER_PORT,
        request_timeout: Optional[float] = REQUEST_TIMEOUT_SEC,
        max_request_bytes: Optional[int] = MAX_REQUEST_BYTES,
    ):
        self.dispatcher = dispatcher
        self.host = host
        self.port = port
        self.request_timeout = request_timeout
        self.max_request_bytes = max_request_bytes
        self.server: Optional[asyncio.Server] = None
        self.running = False

        # Open connections keyed by generated id
        self.connections: Dict[str, Connection] = {}
        self._ids = itertools.count(1)

    async def start(self):
        """Bind and start listening. Raises OSError if the address is unavailable."""
        if self.running:
            return

        try:
            self.server = await asyncio.start_server(
                self._handle_client, self.host, self.port
            )
        except OSError as e:
            logger.error("Server error: could not listen on %s:%s: %s", self.host, self.port, e)
            raise

        # Resolve an ephemeral port (port=0)
        sockets = self.server.sockets or ()
        if sockets:
            self.port = sockets[0].getsockname()[1]
        self.running = True
        logger.info("Server listening on %s:%s", self.host, self.port)

    async def serve_forever(self):
        if not self.running:
            await self.start()
        await self.server.serve_forever()

    async def stop(self):
        """Stop accepting and abort any connection still open"""
        if not self.running:
            return

        self.running = False
        self.server.close()
        for conn in list(self.connections.values()):
            logger.debug("Aborting open connection %s (%s)", conn.conn_id, conn.peer)
            conn.writer.transport.abort()
        await self.server.wait_closed()
        logger.info("Server stopped")

    def _register(self, writer: asyncio.StreamWriter) -> Connection:
        conn = Connection(
            conn_id=f"conn-{next(self._ids)}",
            peer=writer.get_extra_info("peername"),
            writer=writer,
        )
        self.connections[conn.conn_id] = conn
        return conn

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Read one request, dispatch it, write the response, close"""
        conn = self._register(writer)
        logger.info("Client connected: %s from %s", conn.conn_id, conn.peer)

        try:
            try:
                payload = await read_request(
                    reader,
                    timeout=self.request_timeout,
                    max_bytes=self.max_request_bytes,
                )
            except FramingError as e:
                logger.warning("Bad request framing on %s: %s", conn.conn_id, e)
                response = framing_error_response(e)
            else:
                logger.debug("Received %d bytes on %s", len(payload), conn.conn_id)
                response = self.dispatcher.dispatch_payload(payload)

            await write_response(writer, response)

        except (ConnectionError, OSError) as e:
            logger.warning("Connection error on %s: %s", conn.conn_id, e)
            writer.transport.abort()
        except Exception:
            logger.exception("Error handling client %s", conn.conn_id)
            writer.transport.abort()
        finally:
            self.connections.pop(conn.conn_id, None)
            logger.debug("Client disconnected: %s", conn.conn_id)
