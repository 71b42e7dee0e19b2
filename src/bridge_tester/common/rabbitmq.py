import logging

import pika

from .config import RabbitMQConfig

logger = logging.getLogger(__name__)


def get_rabbit_channel(config: RabbitMQConfig):
    """
    Establishes a new blocking connection to RabbitMQ and returns a channel.

    Heartbeats are disabled because handlers may block the single event
    loop for as long as a transcoding or a transcription takes.

    Args:
        config: Broker host and credentials.

    Returns:
        tuple: (connection, channel)

    Raises:
        pika.exceptions.AMQPConnectionError: If the broker is unreachable.
    """
    credentials = pika.PlainCredentials(config.user, config.password)
    parameters = pika.ConnectionParameters(
        host=config.host,
        port=config.port,
        credentials=credentials,
        heartbeat=0,
    )

    try:
        connection = pika.BlockingConnection(parameters)
        channel = connection.channel()

        return connection, channel
    except Exception:
        logger.exception(
            "Failed to connect to RabbitMQ",
            extra={"host": config.host, "username": config.user},
        )
        raise
