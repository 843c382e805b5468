import logging
import sys
from .cli.service import cli

if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        logging.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
