"""Sends one operator command to the controller over the bus."""

import argparse
import os

from bridge_tester.common import MessageName, OperatorCommand, RabbitMQConfig
from bridge_tester.common.infrastructure import RabbitMQPeerBus
from bridge_tester.common.rabbitmq import get_rabbit_channel


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bridge-tester-command",
        description="Send a command to the bridge tester controller, e.g. 'test start'.",
    )
    p.add_argument("command", nargs="+", help="command words, see 'help'")
    p.add_argument("--item-id", default=None, help="conversation item to reply under")
    p.add_argument("--host", default=os.getenv("RABBITMQ_HOST", "localhost"))
    p.add_argument("--port", type=int, default=int(os.getenv("RABBITMQ_PORT", "5672")))
    p.add_argument("--service-id", default=os.getenv("BUS_SERVICE_ID", "circuittestbot"))
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = RabbitMQConfig(
        host=args.host,
        port=args.port,
        user=os.getenv("RABBITMQ_USER", "guest"),
        password=os.getenv("RABBITMQ_PASSWORD", "guest"),
        service_id=args.service_id,
    )

    connection, channel = get_rabbit_channel(config)
    try:
        bus = RabbitMQPeerBus(channel, config)
        bus.declare_service_queue()
        bus.emit(
            MessageName.OPERATOR_COMMAND,
            OperatorCommand(text=" ".join(args.command), item_id=args.item_id),
        )
    finally:
        connection.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
