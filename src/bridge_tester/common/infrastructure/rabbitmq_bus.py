"""RabbitMQ implementation of the controller and peer message buses."""

from collections.abc import Callable
from typing import Any

import pika
from pika.adapters.blocking_connection import BlockingChannel
from pika.exceptions import UnroutableError
from pydantic import BaseModel, ValidationError

from bridge_tester.common.config import RabbitMQConfig
from bridge_tester.common.exceptions import EventPublishError, PeerNotConnected
from bridge_tester.common.logging import setup_logging
from bridge_tester.common.messages import (
    MESSAGE_MODELS,
    MessageName,
    PeerDiscovery,
    PeerReady,
    PeerRole,
)

from .interfaces import MessageBus, MessageHandler, PeerBus, PeerHandle

logger = setup_logging()


class RabbitMQBus:
    """Typed dispatch of bus messages received on a single queue."""

    def __init__(self, channel: BlockingChannel, config: RabbitMQConfig):
        self._channel = channel
        self._config = config
        self._handlers: dict[MessageName, list[MessageHandler]] = {}
        self._queue_name: str | None = None

    @property
    def queue_name(self) -> str | None:
        return self._queue_name

    def on_message(self, name: MessageName, handler: MessageHandler) -> None:
        self._handlers.setdefault(MessageName(name), []).append(handler)

    def consume(self) -> None:
        """
        Starts consuming messages from this bus's queue.

        Blocks on the calling thread; every handler and every timer of the
        connection runs here, one at a time.
        """
        self._channel.basic_consume(
            queue=self._queue_name,
            on_message_callback=self._on_delivery,
        )
        logger.info("Started consuming", extra={"queue": self._queue_name})
        self._channel.start_consuming()

    def dispatch(self, message_type: str | None, body: bytes | str) -> bool:
        """
        Decodes one message and runs the handlers registered for its name.

        Args:
            message_type: The message name from the AMQP ``type`` property.
            body: The JSON payload.

        Returns:
            True if the message was handled, False if it was dropped.
        """
        try:
            name = MessageName(message_type)
        except ValueError:
            logger.warning("Unknown message name", extra={"type": message_type})
            return False

        handlers = self._handlers.get(name)
        if not handlers:
            logger.info("No handler for message", extra={"message_name": name.value})
            return True

        try:
            message = MESSAGE_MODELS[name].model_validate_json(body)
        except ValidationError as e:
            logger.exception(
                "Invalid message format",
                extra={"message_name": name.value, "error": str(e)},
            )
            return False

        try:
            for handler in handlers:
                handler(message)
        except Exception:
            logger.exception(
                "Message handling failed", extra={"message_name": name.value}
            )
            return False
        return True

    def _on_delivery(self, channel, method, properties, body) -> None:
        message_type = properties.type if properties else None
        if self.dispatch(message_type, body):
            channel.basic_ack(delivery_tag=method.delivery_tag)
        else:
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)

    @property
    def discovery_exchange(self) -> str:
        return f"{self._config.service_id}.discovery"

    def declare_service_queue(self) -> None:
        """
        Declares the controller queue and the discovery exchange.

        Both ends declare them with the same arguments, so whichever process
        starts first creates them and messages to the controller are queued
        until it consumes.
        """
        self._channel.queue_declare(queue=self._config.service_id, durable=False)
        self._channel.exchange_declare(
            exchange=self.discovery_exchange, exchange_type="fanout"
        )

    def _publish(
        self,
        routing_key: str,
        name: MessageName,
        payload: BaseModel,
        mandatory: bool = False,
        exchange: str = "",
    ) -> None:
        self._channel.basic_publish(
            exchange=exchange,
            routing_key=routing_key,
            body=payload.model_dump_json(),
            properties=pika.BasicProperties(
                type=name.value,
                content_type="application/json",
            ),
            mandatory=mandatory,
        )


class RabbitMQControllerBus(RabbitMQBus, MessageBus):
    """
    Controller end of the bus.

    Consumes the queue named by ``service_id`` and keeps exactly one
    ``PeerHandle`` per role, learned from ``peer-ready`` announcements.
    Sends are published mandatory on a confirmed channel so that a peer
    whose exclusive queue vanished surfaces as ``PeerNotConnected``.
    """

    def __init__(self, channel: BlockingChannel, config: RabbitMQConfig):
        super().__init__(channel, config)
        self._peers: dict[PeerRole, PeerHandle] = {}
        self.on_message(MessageName.PEER_READY, self._on_peer_ready)

    def setup(self) -> None:
        """
        Declares the controller queue, enables publisher confirms and asks
        the peers that are already running to announce themselves.
        """
        self.declare_service_queue()
        self._channel.confirm_delivery()
        self._queue_name = self._config.service_id
        logger.info("Controller bus ready", extra={"queue": self._queue_name})
        self.discover_peers()

    def discover_peers(self) -> None:
        """Broadcasts ``peer-discovery``; each connected peer replies with ``peer-ready``."""
        try:
            self._publish(
                "",
                MessageName.PEER_DISCOVERY,
                PeerDiscovery(),
                exchange=self.discovery_exchange,
            )
        except Exception as e:
            logger.exception("Failed to broadcast peer discovery")
            raise EventPublishError(MessageName.PEER_DISCOVERY.value, cause=e) from e
        logger.info("Peer discovery broadcast", extra={"exchange": self.discovery_exchange})

    def register_peer(self, role: PeerRole, address: str) -> PeerHandle:
        handle = PeerHandle(role=role, address=address)
        previous = self._peers.get(handle.role)
        self._peers[handle.role] = handle
        logger.info(
            "Peer registered",
            extra={
                "role": handle.role.value,
                "address": address,
                "replaced": previous.address if previous else None,
            },
        )
        return handle

    def is_connected(self, role: PeerRole) -> bool:
        return PeerRole(role) in self._peers

    def send(self, role: PeerRole, name: MessageName, payload: BaseModel) -> None:
        role = PeerRole(role)
        handle = self._peers.get(role)
        if handle is None:
            raise PeerNotConnected(role.value)

        try:
            self._publish(handle.address, name, payload, mandatory=True)
        except UnroutableError as e:
            logger.warning(
                "Peer address is gone",
                extra={"role": role.value, "address": handle.address},
            )
            self._peers.pop(role, None)
            raise PeerNotConnected(role.value, cause=e) from e
        except Exception as e:
            logger.exception(
                "Failed to send message",
                extra={"role": role.value, "message_name": name.value},
            )
            raise EventPublishError(name.value, cause=e) from e

        logger.info(
            "Message sent",
            extra={"role": role.value, "message_name": name.value},
        )

    def _on_peer_ready(self, message: PeerReady) -> None:
        self.register_peer(message.role, message.address)


class RabbitMQPeerBus(RabbitMQBus, PeerBus):
    """Peer end of the bus, listening on a broker-named exclusive queue."""

    def setup(self) -> None:
        """
        Declares this peer's exclusive queue and binds it to the discovery
        exchange. The broker drops the queue when the peer disconnects.
        """
        self.declare_service_queue()
        self._channel.confirm_delivery()
        result = self._channel.queue_declare(queue="", exclusive=True)
        self._queue_name = result.method.queue
        self._channel.queue_bind(queue=self._queue_name, exchange=self.discovery_exchange)
        logger.info("Peer bus ready", extra={"queue": self._queue_name})

    def announce_ready(self, role: PeerRole) -> None:
        """
        Publishes ``peer-ready`` mandatory to the controller queue.

        An unroutable announcement means the controller queue was deleted;
        it is declared again and the announcement retried.

        Raises:
            EventPublishError: If the announcement is still unroutable after
                ``announce_attempts`` tries, or publishing fails.
        """
        message = PeerReady(role=role, address=self._queue_name)
        for attempt in range(1, self._config.announce_attempts + 1):
            try:
                self._publish(
                    self._config.service_id,
                    MessageName.PEER_READY,
                    message,
                    mandatory=True,
                )
            except UnroutableError as e:
                logger.warning(
                    "Controller queue is gone, declaring it again",
                    extra={"attempt": attempt, "role": role.value},
                )
                if attempt == self._config.announce_attempts:
                    raise EventPublishError(MessageName.PEER_READY.value, cause=e) from e
                self.declare_service_queue()
            except Exception as e:
                logger.exception("Failed to announce peer", extra={"role": role.value})
                raise EventPublishError(MessageName.PEER_READY.value, cause=e) from e
            else:
                logger.info(
                    "Peer announced",
                    extra={"role": role.value, "address": self._queue_name},
                )
                return

    def emit(self, name: MessageName, payload: BaseModel) -> None:
        try:
            self._publish(self._config.service_id, name, payload)
        except Exception as e:
            logger.exception(
                "Failed to emit message", extra={"message_name": name.value}
            )
            raise EventPublishError(name.value, cause=e) from e
        logger.info(
            "Message emitted",
            extra={"message_name": name.value, "queue": self._config.service_id},
        )

    def call_threadsafe(self, callback: Callable[[], Any]) -> None:
        self._channel.connection.add_callback_threadsafe(callback)
