import asyncio
import io
import logging
import time

from googleapiclient.http import MediaIoBaseUpload

log = logging.getLogger(__name__)

AUDIO_MIME_TYPE = "audio/m4a"


class VoiceArchive:
    """
    Uploads received voice clips to a Google Drive folder, when one is configured.
    Like SheetsLedger, uploads run on a fresh transport from `http_factory` when given.
    """

    def __init__(self, drive_service, folder_id, http_factory=None):
        self.drive = drive_service
        self.folder_id = folder_id
        self.http_factory = http_factory

    @property
    def enabled(self) -> bool:
        return self.drive is not None and bool(self.folder_id)

    def _upload(self, audio: bytes, name: str):
        media = MediaIoBaseUpload(io.BytesIO(audio), mimetype=AUDIO_MIME_TYPE)
        request = self.drive.files().create(
            body={"name": name, "parents": [self.folder_id]},
            media_body=media,
            fields="id",
        )
        if self.http_factory is None:
            return request.execute()
        return request.execute(http=self.http_factory())

    async def store(self, audio: bytes):
        """Returns the created Drive file id, or None when archival is disabled. Errors propagate."""
        if not self.enabled:
            return None
        name = f"voice_{int(time.time() * 1000)}.m4a"
        created = await asyncio.to_thread(self._upload, audio, name)
        log.info(f"Archived voice clip as {name}")
        return created.get("id")
