import logging
import sys
from typing import Optional

from switch_tracker.config.settings import Settings, settings as default_settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(debug: Optional[bool] = None, config: Optional[Settings] = None):
    """Configure logging for the application

    The console handler writes to stderr so the terminal live view on
    stdout is left alone.
    """
    config = config or default_settings
    config.validate_paths()

    if debug is None:
        debug = config.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Don't stack handlers when called twice (e.g. cli group + command)
    for handler in list(root_logger.handlers):
        if getattr(handler, "_switch_tracker", False):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(config.LOG_DIR / "switch_tracker.log")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)

    for handler in (file_handler, console_handler):
        handler._switch_tracker = True
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
