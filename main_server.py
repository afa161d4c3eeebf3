#!/usr/bin/env python3
"""
Main entry point for the time server application.

This script binds the UDP time server and serves requests until
interrupted.
"""

import asyncio
import signal
import sys
import os

from config.settings import Config
from server.dispatcher import Dispatcher
from server.lap_timer import LapTimerTable
from server.server import TimeServer
from timekeeping.clock import Clock, resolve_timezone
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError

logger = get_logger(__name__)


class ServerApplication:
    """Main application class for the time server."""

    def __init__(self):
        """Initialize application."""
        self.config = Config()
        self.server: TimeServer = None
        self.shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """
        Run the server application.

        Loads configuration, builds the dispatcher and its lap timer
        table, starts the server and handles graceful shutdown.
        """
        try:
            logger.info("Loading configuration...")
            server_config = self.config.load_server_config()
            tz = resolve_timezone(server_config.timezone)

            logger.info(
                f"Configuration loaded: "
                f"bind={server_config.host}:{server_config.port}, "
                f"timezone={server_config.timezone or 'host'}"
            )

            dispatcher = Dispatcher(Clock(tz=tz), LapTimerTable())
            self.server = TimeServer(server_config, dispatcher)
            await self.server.start()

            logger.info("Server application started successfully")
            logger.info("Press Ctrl+C to stop")

            await self.shutdown_event.wait()

            logger.info("Shutdown signal received, stopping...")
            await self.server.stop()

            logger.info("Server application stopped successfully")
            sys.exit(0)

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for available configuration."
            )
            sys.exit(1)
        except ValueError as e:
            logger.error(f"Configuration validation error: {e}")
            sys.exit(1)
        except OSError as e:
            logger.error(f"Cannot start server: {e}")
            sys.exit(1)
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            sys.exit(1)

    def handle_shutdown(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        logger.info(f"Received signal {signum}")
        self.shutdown_event.set()


async def main():
    """Main entry point."""
    setup_logging(os.getenv('LOG_LEVEL', 'INFO'))

    logger.info("Starting time server application...")

    app = ServerApplication()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: app.handle_shutdown(s, None)
        )

    await app.run()


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown complete")
        sys.exit(0)
