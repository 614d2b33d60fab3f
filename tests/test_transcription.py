import pytest
from unittest.mock import MagicMock

from orderbot.core.exceptions import TranscriptionError
from orderbot.services.transcription import UNCLEAR_AUDIO, SpeechTranscriber


def make_response(*transcripts):
    """Shape of a RecognizeResponse: results[i].alternatives[j].transcript."""
    response = MagicMock()
    response.results = [
        MagicMock(alternatives=[MagicMock(transcript=t)] if t is not None else [])
        for t in transcripts
    ]
    return response


@pytest.mark.asyncio
async def test_returns_first_alternative():
    client = MagicMock()
    client.recognize.return_value = make_response("สมชาย สั่ง มะนาว 3 ลูก", "ignored")

    transcript = await SpeechTranscriber(client).transcribe(b"audio")

    assert transcript == "สมชาย สั่ง มะนาว 3 ลูก"
    kwargs = client.recognize.call_args.kwargs
    assert kwargs["config"].language_code == "th-TH"
    assert kwargs["config"].enable_automatic_punctuation is True
    assert kwargs["audio"].content == b"audio"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [make_response(), make_response(None), make_response("")])
async def test_no_transcript_returns_placeholder(response):
    client = MagicMock()
    client.recognize.return_value = response

    assert await SpeechTranscriber(client).transcribe(b"audio") == UNCLEAR_AUDIO


@pytest.mark.asyncio
async def test_missing_client_raises():
    with pytest.raises(TranscriptionError):
        await SpeechTranscriber(None).transcribe(b"audio")


@pytest.mark.asyncio
async def test_service_error_raises():
    client = MagicMock()
    client.recognize.side_effect = RuntimeError("permission denied")

    with pytest.raises(TranscriptionError) as excinfo:
        await SpeechTranscriber(client).transcribe(b"audio")
    assert "permission denied" in str(excinfo.value)
