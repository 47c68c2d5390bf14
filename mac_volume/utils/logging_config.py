import logging
from logging.handlers import TimedRotatingFileHandler

from colorlog import ColoredFormatter


def setup_logging(
    console_level: str = "WARNING",
    file_level: str = "INFO",
    file_enabled: bool = True,
):
    """Configure the logging system.

    The console handler writes to stderr so command output on stdout stays
    clean for scripts.

    Args:
        console_level: Level name for the colored console handler
        file_level: Level name for the rotating log file
        file_enabled: Whether to write the rotating log file at all

    Returns:
        Path | None: Log file path, or None when file logging is disabled
    """
    from .resource_finder import get_user_data_dir

    console_level = logging.getLevelName(str(console_level).upper())
    if not isinstance(console_level, int):
        console_level = logging.WARNING
    file_level = logging.getLevelName(str(file_level).upper())
    if not isinstance(file_level, int):
        file_level = logging.INFO

    # Create the root logger.
    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_level, file_level))

    # Clear existing handlers (avoid duplicates).
    if root_logger.handlers:
        root_logger.handlers.clear()

    # Create console handler.
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)

    # Console color formatter.
    color_formatter = ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s[%(blue)s%(name)s%(reset)s] - "
        "%(log_color)s%(levelname)s%(reset)s - %(green)s%(message)s%(reset)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={"asctime": {"green": "green"}, "name": {"blue": "blue"}},
    )
    console_handler.setFormatter(color_formatter)
    root_logger.addHandler(console_handler)

    if not file_enabled:
        return None

    log_dir = get_user_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "mac-volume.log"

    # Create daily rotating file handler.
    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",  # Rotate at midnight.
        interval=1,  # Every day.
        backupCount=30,  # Keep 30 days of logs.
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.suffix = "%Y-%m-%d.log"
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s[%(name)s] - %(levelname)s - %(message)s")
    )
    root_logger.addHandler(file_handler)

    logging.debug("Logging initialized, log file: %s", log_file)

    return log_file


def get_logger(name):
    """Get a logger with the shared configuration.

    Args:
        name: Logger name, usually the module name

    Returns:
        logging.Logger: Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.warning("Device not found: %s", name)
    """
    logger = logging.getLogger(name)

    # Add helper methods.
    def log_error_with_exc(msg, *args, **kwargs):
        """
        Log an error and automatically include the exception stack.
        """
        kwargs["exc_info"] = True
        logger.error(msg, *args, **kwargs)

    # Attach to logger.
    logger.error_exc = log_error_with_exc

    return logger
