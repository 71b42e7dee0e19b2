"""Abstract interface for the conversation platform."""

from abc import ABC, abstractmethod


class ConversationClient(ABC):
    """Abstract base class for the platform the bot logs on to and posts to."""

    @abstractmethod
    def logon(self) -> str:
        """
        Logs the bot on.

        Returns:
            The identity the bot is logged on as.

        Raises:
            ConnectionFailure: If logon fails.
        """
        pass

    @abstractmethod
    def logout(self) -> None:
        """Logs the bot out."""
        pass

    @abstractmethod
    def post_message(
        self,
        conversation_id: str,
        subject: str | None,
        content: str,
        parent_item_id: str | None = None,
    ) -> str | None:
        """
        Adds a text item to a conversation, optionally as a reply.

        Returns:
            The id of the created item, if the platform returns one.

        Raises:
            ConversationError: If the item cannot be posted.
        """
        pass
