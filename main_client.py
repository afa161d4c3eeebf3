#!/usr/bin/env python3
"""
Main entry point for the time client application.

Shows the request menu, sends the selected request to the time server
and prints the reply. Configuration is loaded from environment variables.
"""

import asyncio
import sys
import os

from config.settings import Config
from client.dispatcher import CITY_MENU, EXIT_CHOICE, MENU, parse_menu_choice
from client.time_client import TimeClient
from protocol.commands import RequestCode
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError, TimeServiceError

logger = get_logger(__name__)


async def prompt(text: str) -> str:
    """Read a line from the console without blocking the event loop."""
    return await asyncio.to_thread(input, text)


class ClientApplication:
    """Main application class for the time client."""

    def __init__(self):
        """Initialize application."""
        self.config = Config()

    async def run(self) -> None:
        """
        Run the client application.

        Loads configuration, opens the client socket and serves the menu
        until the user exits.
        """
        try:
            logger.info("Loading configuration...")
            client_config = self.config.load_client_config()

            logger.info(
                f"Configuration loaded: "
                f"server={client_config.server_host}:{client_config.server_port}, "
                f"timeout={client_config.timeout}s"
            )

            async with TimeClient(client_config) as client:
                await self._menu_loop(client)

            print("Time Client: Closing Connection.")

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
        except TimeServiceError as e:
            logger.error(f"Client error: {e}")
            sys.exit(1)

    async def _menu_loop(self, client: TimeClient) -> None:
        while True:
            print(MENU)
            try:
                choice = parse_menu_choice(await prompt("Enter your choice (1-13) or 0 to exit: "))
            except ValueError as e:
                print(f"Invalid choice. {e}")
                continue

            if choice == EXIT_CHOICE:
                return

            city = None
            if choice == RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY:
                print(CITY_MENU)
                city = await prompt("Enter your choice (no spaces): ")

            try:
                print(await client.execute(choice, city))
            except TimeServiceError as e:
                logger.debug(f"Request {choice} failed", exc_info=True)
                print(f"Request failed: {e}")

            await prompt("Press Enter to continue...")


async def main():
    """Main entry point."""
    setup_logging(os.getenv('LOG_LEVEL', 'INFO'))

    app = ClientApplication()
    await app.run()


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, EOFError):
        print("\nShutdown complete")
        sys.exit(0)
