import asyncio
import logging

from google.cloud import speech

from orderbot.core.exceptions import TranscriptionError

log = logging.getLogger(__name__)

UNCLEAR_AUDIO = "ไม่ชัด"


class SpeechTranscriber:
    """Google Cloud Speech-to-Text, synchronous recognize on short voice clips."""

    def __init__(self, client, language_code: str = "th-TH"):
        self.client = client
        self.language_code = language_code

    async def transcribe(self, audio: bytes) -> str:
        """
        Returns the best transcript, or UNCLEAR_AUDIO when nothing was recognized.
        Raises TranscriptionError when the client is missing or the call fails.
        """
        if self.client is None:
            raise TranscriptionError("Speech client not initialized.")

        config = speech.RecognitionConfig(
            language_code=self.language_code,
            enable_automatic_punctuation=True,
        )
        recognition_audio = speech.RecognitionAudio(content=audio)
        try:
            response = await asyncio.to_thread(self.client.recognize, config=config, audio=recognition_audio)
        except Exception as e:
            raise TranscriptionError(f"Speech recognition failed: {e}") from e

        results = list(response.results)
        if results and results[0].alternatives and results[0].alternatives[0].transcript:
            return results[0].alternatives[0].transcript
        log.info("No confident transcript, returning placeholder.")
        return UNCLEAR_AUDIO
