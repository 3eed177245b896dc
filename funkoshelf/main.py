"""Entry: start the TCP request/response server and the optional HTTP gateway."""
import asyncio
import logging
import sys

import uvicorn

from funkoshelf.api.state import get_state
from funkoshelf.config import (
    HTTP_ENABLED,
    HTTP_HOST,
    HTTP_PORT,
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
    ensure_data_dir,
)
from funkoshelf.net.server import FunkoServer

logger = logging.getLogger(__name__)


async def serve() -> None:
    ensure_data_dir()
    state = get_state()
    server = FunkoServer(state.dispatcher, host=SERVER_HOST, port=SERVER_PORT)
    await server.start()

    tasks = [server.serve_forever()]
    if HTTP_ENABLED:
        config = uvicorn.Config(
            "funkoshelf.api.app:app",
            host=HTTP_HOST,
            port=HTTP_PORT,
            log_level=LOG_LEVEL.lower(),
        )
        tasks.append(uvicorn.Server(config).serve())
        logger.info("HTTP gateway enabled on %s:%s", HTTP_HOST, HTTP_PORT)

    try:
        await asyncio.gather(*tasks)
    finally:
        await server.stop()


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(name)s: %(message)s")
    logger.info("Starting funkoshelf server...")
    try:
        asyncio.run(serve())
    except OSError as e:
        # Listening socket unavailable (e.g. port in use)
        logger.error("Fatal: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
