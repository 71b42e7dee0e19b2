"""Shared configuration models for infrastructure components."""

from pydantic import BaseModel


class RabbitMQConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration."""

    host: str
    user: str
    password: str
    port: int = 5672
    service_id: str = "circuittestbot"
    reconnect_delay_s: float = 1.5
    announce_attempts: int = 3
