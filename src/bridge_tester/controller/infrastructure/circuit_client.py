"""Circuit REST implementation of the ConversationClient interface."""

import requests

from bridge_tester.common import setup_logging
from bridge_tester.controller.exceptions import ConnectionFailure, ConversationError

from .interfaces import ConversationClient

logger = setup_logging()


class CircuitRestClient(ConversationClient):
    """Posts to Circuit conversations with an OAuth client-credentials token."""

    def __init__(
        self,
        session: requests.Session,
        domain: str,
        client_id: str,
        client_secret: str,
        timeout_s: float = 10.0,
    ):
        self._session = session
        self._base_url = f"https://{domain}"
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout_s = timeout_s
        self._token: str | None = None

    @property
    def logged_on(self) -> bool:
        return self._token is not None

    def logon(self) -> str:
        try:
            response = self._session.post(
                f"{self._base_url}/oauth/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "scope": "ALL",
                },
                timeout=self._timeout_s,
            )
            response.raise_for_status()
            self._token = response.json()["access_token"]
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            raise ConnectionFailure(e) from e

        user = self._get_profile()
        logger.info("Logged on to Circuit", extra={"user": user})
        return user

    def logout(self) -> None:
        self._token = None
        logger.info("Logged out of Circuit")

    def post_message(
        self,
        conversation_id: str,
        subject: str | None,
        content: str,
        parent_item_id: str | None = None,
    ) -> str | None:
        url = f"{self._base_url}/rest/v2/conversations/{conversation_id}/messages"
        if parent_item_id:
            url = f"{url}/{parent_item_id}"
        data = {"content": content}
        if subject:
            data["subject"] = subject

        try:
            response = self._session.post(
                url,
                data=data,
                headers=self._auth_headers(),
                timeout=self._timeout_s,
            )
            response.raise_for_status()
            item = response.json() if response.content else {}
            item_id = item.get("itemId")
        except (requests.RequestException, AttributeError, ValueError) as e:
            logger.exception(
                "Circuit post failed",
                extra={"conversation_id": conversation_id, "subject": subject},
            )
            raise ConversationError("post", cause=e) from e

        logger.info(
            "Conversation item posted",
            extra={"conversation_id": conversation_id, "item_id": item_id},
        )
        return item_id

    def _get_profile(self) -> str:
        """Returns the bot's display name, or its client id if the lookup fails."""
        try:
            response = self._session.get(
                f"{self._base_url}/rest/v2/users/profile",
                headers=self._auth_headers(),
                timeout=self._timeout_s,
            )
            response.raise_for_status()
            profile = response.json()
            return profile.get("displayName") or profile.get("userId") or self._client_id
        except (requests.RequestException, AttributeError, ValueError):
            logger.warning("Profile lookup failed", extra={"client_id": self._client_id})
            return self._client_id

    def _auth_headers(self) -> dict[str, str]:
        if self._token is None:
            raise ConversationError("request", cause=Exception("not logged on"))
        return {"Authorization": f"Bearer {self._token}"}
