import logging
import sys

from pythonjsonlogger import jsonlogger


def setup_logging():
    """
    Configures and sets up structured JSON logging for the application.

    This function initializes a JSON formatter that includes timestamp, level,
    logger name, message, trace_id, and span_id. It replaces default handlers
    for the root logger and the pika loggers with a custom stream handler
    to ensure consistent log formatting across the three processes.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    # pika is chatty at INFO for every connection state change
    pika_logger = logging.getLogger("pika")
    pika_logger.setLevel(logging.WARNING)
    pika_logger.handlers = []
    pika_logger.addHandler(stream_handler)
    pika_logger.propagate = False

    return root_logger
