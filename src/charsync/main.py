"""charsync entry point."""

import asyncio
import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from .config import config_from_env
from .orchestrator import Orchestrator


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    try:
        logging.basicConfig(
            level=os.getenv("CHARSYNC_LOG_LEVEL", "WARNING").upper(),
            format="%(levelname)s %(name)s: %(message)s",
        )
        config = config_from_env()
        asyncio.run(Orchestrator(config).run())
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
