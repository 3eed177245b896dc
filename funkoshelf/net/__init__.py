"""TCP transport: half-close framing, response writer, server and client."""
from funkoshelf.net.client import ClientError, send_request
from funkoshelf.net.server import FunkoServer

__all__ = ["ClientError", "FunkoServer", "send_request"]
