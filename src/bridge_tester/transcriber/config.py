"""Application configuration loaded from environment variables."""

import os

from pydantic import BaseModel

from bridge_tester.common import RabbitMQConfig


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    rabbitmq: RabbitMQConfig
    assemblyai: AssemblyAIConfig


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        rabbitmq=RabbitMQConfig(
            host=os.getenv("RABBITMQ_HOST", "localhost"),
            port=int(os.getenv("RABBITMQ_PORT", "5672")),
            user=os.getenv("RABBITMQ_USER", "guest"),
            password=os.getenv("RABBITMQ_PASSWORD", "guest"),
            service_id=os.getenv("BUS_SERVICE_ID", "circuittestbot"),
            reconnect_delay_s=float(os.getenv("BUS_RECONNECT_DELAY_S", "1.5")),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
        ),
    )
