"""
Main application entry point for Remediator.

Wires the container runtime, invoker, dispatcher and webhook server together
and runs them under uvicorn until a shutdown signal arrives.
"""

import asyncio
import signal
import sys

import structlog
import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import Config, config
from .dispatcher import HealDispatcher
from .invoker import ProcessInvoker
from .logging_config import configure_logging
from .runtime import CLIContainerManager
from .webhook import create_app


logger = structlog.get_logger(__name__)


class RemediatorApp:
    """Main application class for Remediator."""

    def __init__(self, settings: Config = config):
        self.config = settings
        self.app: FastAPI | None = None
        self.server: uvicorn.Server | None = None
        self.running = False
        self.shutdown_event = asyncio.Event()

    def initialize(self) -> FastAPI:
        """Build the remediation pipeline and the webhook application."""
        logger.info(
            "Initializing Remediator",
            version=__version__,
            runtime_cli=self.config.runtime_cli,
            webhook_host=self.config.host,
            webhook_port=self.config.port
        )

        manager = CLIContainerManager(cli=self.config.runtime_cli)
        dispatcher = HealDispatcher(ProcessInvoker(manager))
        self.app = create_app(dispatcher)

        logger.info("Application initialization completed")
        return self.app

    def setup_signal_handlers(self):
        """Setup signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            logger.info(
                "Received shutdown signal",
                signal=signum
            )
            self.shutdown_event.set()
            if self.server:
                self.server.should_exit = True

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    async def run_webhook_server(self):
        """Run the webhook server."""
        try:
            server_config = uvicorn.Config(
                self.app,
                host=self.config.host,
                port=self.config.port,
                log_level=self.config.log_level.lower(),
                access_log=True
            )

            self.server = uvicorn.Server(server_config)

            logger.info(
                "Starting webhook server",
                address=self.config.bind_address
            )

            await self.server.serve()

        except Exception as e:
            logger.error(
                "Webhook server error",
                error=str(e),
                exc_info=True
            )
            raise

    async def run(self):
        """Run the complete application."""
        try:
            self.initialize()
            self.setup_signal_handlers()
            self.running = True

            logger.info("Remediator is running")

            await self.run_webhook_server()

        except Exception as e:
            logger.error(
                "Application error",
                error=str(e),
                exc_info=True
            )
            raise
        finally:
            self.running = False

    async def shutdown(self):
        """Graceful shutdown of the application."""
        logger.info("Starting graceful shutdown")

        self.running = False
        self.shutdown_event.set()

        if self.server:
            logger.info("Stopping webhook server")
            self.server.should_exit = True

        logger.info("Graceful shutdown completed")


async def main(settings: Config = config):
    """Main application entry point."""
    app_instance = RemediatorApp(settings)

    try:
        server_task = asyncio.create_task(app_instance.run())

        # Wait for either the server to complete or shutdown signal
        done, pending = await asyncio.wait(
            [server_task, asyncio.create_task(app_instance.shutdown_event.wait())],
            return_when=asyncio.FIRST_COMPLETED
        )

        if app_instance.shutdown_event.is_set():
            logger.info("Shutdown signal received, stopping application")
            await app_instance.shutdown()

        for task in pending:
            if task is server_task:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # Let uvicorn finish in-flight requests and surface server failures
        await server_task

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        await app_instance.shutdown()
    except Exception as e:
        logger.error(
            "Application failed",
            error=str(e),
            exc_info=True
        )
        await app_instance.shutdown()
        sys.exit(1)


def cli():
    """Command-line interface entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Remediator - restart containers named by AlertManager heal alerts"
    )
    parser.add_argument(
        "--host",
        default=config.host,
        help="Server host (default: %(default)s)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help="Server port (default: %(default)s)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.log_level.upper(),
        help="Log level (default: %(default)s)"
    )
    parser.add_argument(
        "--runtime-cli",
        default=config.runtime_cli,
        help="Container runtime CLI used for restarts (default: %(default)s)"
    )

    args = parser.parse_args()

    # Update config with command-line arguments
    config.host = args.host
    config.port = args.port
    config.log_level = args.log_level
    config.runtime_cli = args.runtime_cli

    configure_logging(config.log_level)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
