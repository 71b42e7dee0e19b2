from unittest.mock import MagicMock

import pytest
import requests

from bridge_tester.controller.config import load_config
from bridge_tester.controller.exceptions import (
    ConnectionFailure,
    ConversationError,
    TranscodingError,
)
from bridge_tester.controller.infrastructure import CircuitRestClient, MoviepyTranscoder


def response(payload=None, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload or {}
    resp.content = b"{}" if payload is not None else b""
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return CircuitRestClient(session, "circuit.example.com", "bot-id", "bot-secret")


def test_logon_fetches_token_and_profile(client, session):
    session.post.return_value = response({"access_token": "tok"})
    session.get.return_value = response({"displayName": "Bridge Tester"})

    assert client.logon() == "Bridge Tester"
    assert client.logged_on
    url = session.post.call_args.args[0]
    assert url == "https://circuit.example.com/oauth/token"
    assert session.post.call_args.kwargs["data"]["grant_type"] == "client_credentials"
    assert session.get.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}


def test_logon_failure_raises_connection_failure(client, session):
    session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ConnectionFailure):
        client.logon()
    assert not client.logged_on


def test_logon_without_token_raises_connection_failure(client, session):
    session.post.return_value = response({"error": "invalid_client"})

    with pytest.raises(ConnectionFailure):
        client.logon()


def test_post_message_replies_under_parent_item(client, session):
    session.post.return_value = response({"access_token": "tok"})
    session.get.return_value = response({})
    client.logon()
    session.post.return_value = response({"itemId": "item-42"})

    item_id = client.post_message("conv-1", "Dialing Bridge", "Dialing 5551234", "item-7")

    assert item_id == "item-42"
    url = session.post.call_args.args[0]
    assert url == "https://circuit.example.com/rest/v2/conversations/conv-1/messages/item-7"
    assert session.post.call_args.kwargs["data"] == {
        "content": "Dialing 5551234",
        "subject": "Dialing Bridge",
    }


def test_post_message_failure_raises_conversation_error(client, session):
    session.post.return_value = response({"access_token": "tok"})
    session.get.return_value = response({})
    client.logon()
    session.post.return_value = response(status_error=requests.HTTPError("503"))

    with pytest.raises(ConversationError):
        client.post_message("conv-1", None, "hello")


def test_post_message_requires_logon(client):
    with pytest.raises(ConversationError):
        client.post_message("conv-1", None, "hello")


def test_transcoder_rejects_missing_recording(tmp_path):
    source = str(tmp_path / "missing.webm")

    with pytest.raises(TranscodingError) as exc_info:
        MoviepyTranscoder().transcode(source, str(tmp_path / "out.wav"))
    assert isinstance(exc_info.value.cause, FileNotFoundError)


def test_load_config_reads_environment(monkeypatch):
    monkeypatch.setenv("CIRCUIT_DOMAIN", "circuit.example.com")
    monkeypatch.setenv("BUS_SERVICE_ID", "bridgebot")
    monkeypatch.setenv("TRANSCRIPTION_TIMEOUT_S", "0")
    monkeypatch.setenv("TEST_REPEAT", "ONCE")

    config = load_config()

    assert config.circuit.domain == "circuit.example.com"
    assert config.rabbitmq.service_id == "bridgebot"
    assert config.timing.transcription_timeout_s == 0
    assert config.timing.logon_retry_s == 2.0
    assert config.defaults.repeat == "ONCE"
    assert config.defaults.interval_ms == 60000


def test_pika_timers_delegate_to_connection():
    from bridge_tester.controller.infrastructure import PikaTimerService

    connection = MagicMock()
    connection.call_later.return_value = "timeout-1"
    timers = PikaTimerService(connection)
    callback = MagicMock()

    handle = timers.call_later(60, callback)
    timers.cancel(handle)

    connection.call_later.assert_called_once_with(60, callback)
    connection.remove_timeout.assert_called_once_with("timeout-1")


def test_post_with_non_json_body_raises_conversation_error(client, session):
    session.post.return_value = response({"access_token": "tok"})
    session.get.return_value = response({})
    client.logon()
    html = MagicMock()
    html.content = b"<html>Gateway</html>"
    html.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
    session.post.return_value = html

    with pytest.raises(ConversationError):
        client.post_message("conv-1", "ERROR", "boom")


@pytest.mark.parametrize("payload", [["tok"], "tok"])
def test_logon_with_malformed_token_reply_raises_connection_failure(client, session, payload):
    reply = MagicMock()
    reply.json.return_value = payload
    session.post.return_value = reply

    with pytest.raises(ConnectionFailure):
        client.logon()
