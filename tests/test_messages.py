import pytest
from pydantic import ValidationError

from bridge_tester.common import TranscriptionResult
from bridge_tester.common.messages import MESSAGE_MODELS, MessageName


def test_every_message_name_has_a_model():
    assert set(MESSAGE_MODELS) == set(MessageName)


@pytest.mark.parametrize("fields", [{}, {"text": "hello", "error": "failed"}])
def test_transcription_result_needs_text_or_error(fields):
    with pytest.raises(ValidationError):
        TranscriptionResult(**fields)


def test_empty_transcript_is_a_valid_result():
    assert TranscriptionResult(text="").text == ""
