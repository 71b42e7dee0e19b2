"""Posts test progress and results to the bot's conversation."""

from bridge_tester.common import setup_logging
from bridge_tester.controller.domain import Bridge
from bridge_tester.controller.infrastructure.interfaces import ConversationClient

logger = setup_logging()


class ConversationReporter:
    """Formats reports as conversation items; a failed post never propagates."""

    def __init__(self, client: ConversationClient, conversation_id: str):
        self._client = client
        self._conversation_id = conversation_id

    def post(
        self,
        subject: str | None,
        content: str,
        item_id: str | None = None,
    ) -> str | None:
        try:
            return self._client.post_message(
                self._conversation_id, subject, content, parent_item_id=item_id
            )
        except Exception:
            logger.exception(
                "Report could not be posted",
                extra={"subject": subject, "item_id": item_id},
            )
            return None

    def say_hi(self, nick_name: str) -> str | None:
        return self.post(f"Hi from {nick_name}", "I am ready")

    def report_dialing(self, bridge: Bridge, item_id: str | None = None) -> None:
        pin = f" {bridge.pin}" if bridge.pin else ""
        self.post(
            "Dialing Bridge",
            f"Dialing {bridge.number}{pin} with locale {bridge.locale}",
            item_id,
        )

    def report_score(self, score: float, text: str, item_id: str | None = None) -> None:
        self.post(f"Transcription Available: similarity= {score * 100:.2f}%", text, item_id)

    def report_error(self, error: Exception | str, item_id: str | None = None) -> None:
        self.post("ERROR", str(error), item_id)
