"""
Lambda HTTP Bridge - entrypoint

Inside the Lambda execution environment the configured handler is driven by
the Runtime Loop; anywhere else an ASGI handler is served locally by uvicorn.
"""

import asyncio
import logging
import sys

import uvicorn

from bridge.common.core.http_client import HttpClientFactory

from .adapters.asgi import AsgiHandler
from .config import RuntimeConfig
from .core.exceptions import HandlerLoadError, RuntimeTransportError
from .core.logging_config import setup_logging
from .core.mode import running_in_lambda
from .core.response_encoder import ResponseEncoderRegistry
from .services.handler_loader import load_handler
from .services.runtime_client import RuntimeApiClient
from .services.runtime_loop import RuntimeLoop

logger = logging.getLogger("bridge.main")


async def run_lambda(config: RuntimeConfig) -> int:
    """
    Run the Runtime Loop until the Runtime API becomes unreachable.

    Returns:
        Process exit code
    """
    factory = HttpClientFactory(config)
    async with factory.create_async_client() as client:
        runtime_client = RuntimeApiClient(client, config)

        try:
            handler = load_handler(config.BRIDGE_HANDLER)
        except HandlerLoadError as e:
            logger.critical(f"Handler initialization failed: {e}", exc_info=True)
            try:
                await runtime_client.post_init_error(e)
            except RuntimeTransportError as report_error:
                logger.critical(f"Could not report init error: {report_error}")
            return 1

        runtime_loop = RuntimeLoop(
            runtime_client=runtime_client,
            handler=handler,
            encoder=ResponseEncoderRegistry(config.TEXT_CONTENT_TYPES),
        )
        try:
            await runtime_loop.run()
        except RuntimeTransportError as e:
            logger.critical(
                f"Lost contact with the Runtime API, exiting: {e}",
                extra={"status_code": e.status_code},
            )
            return 1
    return 0


def serve_locally(config: RuntimeConfig) -> None:
    """Serve the configured ASGI application with uvicorn."""
    handler = load_handler(config.BRIDGE_HANDLER)
    if not isinstance(handler, AsgiHandler):
        raise SystemExit(
            f"Local serving needs an ASGI application; {config.BRIDGE_HANDLER} is {handler!r}"
        )

    host, _, port = config.LOCAL_BIND_ADDR.rpartition(":")
    logger.info(f"Not running inside Lambda; serving {config.BRIDGE_HANDLER} on {host}:{port}")
    # log_config=None keeps the logging configured by setup_logging.
    uvicorn.run(handler.app, host=host or "127.0.0.1", port=int(port), log_config=None)


def main() -> None:
    try:
        config = RuntimeConfig()
    except Exception as e:
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise

    setup_logging(config.LOG_CONFIG_PATH, config.LOG_LEVEL)

    if running_in_lambda():
        sys.exit(asyncio.run(run_lambda(config)))
    serve_locally(config)


if __name__ == "__main__":
    main()
