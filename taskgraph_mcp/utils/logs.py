import logging
import os
import sys

ROOT_LOGGER = "taskgraph_mcp"

# Library default: stay silent until the application opts in.
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def setup_logging() -> logging.Logger:
    """Set up logging for the taskgraph_mcp package with environment-based levels.

    Output goes to stderr; stdout carries the MCP stdio transport.
    """
    env_level = os.getenv("TASKGRAPH_LOG_LEVEL", "").upper()
    is_debug = os.getenv("TASKGRAPH_DEBUG", "").lower() in ("1", "true", "yes")

    if is_debug:
        level = logging.DEBUG
    elif env_level:
        level = getattr(logging, env_level, logging.WARNING)
    else:
        level = logging.WARNING

    log_format = (
        "[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
        if is_debug
        else "%(levelname)s: [%(name)s] %(message)s"
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format, "%Y-%m-%d %H:%M:%S"))
    handler.setLevel(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)
