import sys
from typing import TYPE_CHECKING, Optional
from loguru import logger
import os

if TYPE_CHECKING:
    from .config import ConfigManager

def setup_logging(debug_mode: bool = True, log_dir: Optional[str] = None,
                  rotation: str = "10 MB", retention: str = "1 week"):
    """
    Configures Loguru logger.

    archkit only logs; applications call this once at startup if they want
    the framework's console format and an optional rotating log file.
    """
    # Remove default handler
    logger.remove()

    # Console Handler
    level = "DEBUG" if debug_mode else "INFO"
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")

    # File Handler
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(os.path.join(log_dir, "archkit_{time}.log"), rotation=rotation, retention=retention, level="DEBUG")

    logger.info("Logging initialized.")


def setup_logging_from_config(config: "ConfigManager"):
    """Configure logging from the ``general`` and ``logging`` config sections."""
    settings = config.data.logging
    setup_logging(
        debug_mode=config.data.general.debug_mode,
        log_dir=settings.log_dir,
        rotation=settings.rotation,
        retention=settings.retention,
    )
