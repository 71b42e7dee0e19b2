"""Application configuration loaded from environment variables."""

import os

from pydantic import BaseModel

from bridge_tester.common import RabbitMQConfig


class CircuitConfig(BaseModel, frozen=True):
    """Circuit bot credentials and the conversation it reports to."""

    domain: str
    client_id: str
    client_secret: str
    conversation_id: str
    nick_name: str = "Bridge Tester"
    request_timeout_s: float = 10.0


class MediaConfig(BaseModel, frozen=True):
    """Fixed paths shared with the capture and transcriber processes."""

    recording_file: str = "/tmp/bridge-tester/recording.webm"
    transcoded_file: str = "/tmp/bridge-tester/recording.wav"


class TimingConfig(BaseModel, frozen=True):
    """Logon pacing and per-state cycle timeouts (0 waits forever)."""

    logon_retry_s: float = 2.0
    logon_settle_s: float = 5.0
    dial_timeout_s: float = 60.0
    recording_timeout_s: float = 120.0
    transcription_timeout_s: float = 120.0


class InitialConfiguration(BaseModel, frozen=True):
    """Initial test configuration, validated by the configuration store."""

    mode: str = "ENGLISH_ONLY"
    repeat: str = "ENDLESS"
    interval_ms: int = 60000


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    rabbitmq: RabbitMQConfig
    circuit: CircuitConfig
    media: MediaConfig
    timing: TimingConfig
    defaults: InitialConfiguration


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        rabbitmq=RabbitMQConfig(
            host=os.getenv("RABBITMQ_HOST", "localhost"),
            port=int(os.getenv("RABBITMQ_PORT", "5672")),
            user=os.getenv("RABBITMQ_USER", "guest"),
            password=os.getenv("RABBITMQ_PASSWORD", "guest"),
            service_id=os.getenv("BUS_SERVICE_ID", "circuittestbot"),
        ),
        circuit=CircuitConfig(
            domain=os.getenv("CIRCUIT_DOMAIN", "circuitsandbox.net"),
            client_id=os.getenv("CIRCUIT_CLIENT_ID", ""),
            client_secret=os.getenv("CIRCUIT_CLIENT_SECRET", ""),
            conversation_id=os.getenv("CIRCUIT_CONVERSATION_ID", ""),
            nick_name=os.getenv("CIRCUIT_NICK_NAME", "Bridge Tester"),
        ),
        media=MediaConfig(
            recording_file=os.getenv(
                "RECORDING_FILE", "/tmp/bridge-tester/recording.webm"
            ),
            transcoded_file=os.getenv(
                "TRANSCODED_FILE", "/tmp/bridge-tester/recording.wav"
            ),
        ),
        timing=TimingConfig(
            logon_retry_s=float(os.getenv("LOGON_RETRY_S", "2")),
            logon_settle_s=float(os.getenv("LOGON_SETTLE_S", "5")),
            dial_timeout_s=float(os.getenv("DIAL_TIMEOUT_S", "60")),
            recording_timeout_s=float(os.getenv("RECORDING_TIMEOUT_S", "120")),
            transcription_timeout_s=float(os.getenv("TRANSCRIPTION_TIMEOUT_S", "120")),
        ),
        defaults=InitialConfiguration(
            mode=os.getenv("TEST_MODE", "ENGLISH_ONLY"),
            repeat=os.getenv("TEST_REPEAT", "ENDLESS"),
            interval_ms=int(os.getenv("TEST_INTERVAL_MS", "60000")),
        ),
    )
