import asyncio
import logging
from typing import List

from tortoise.exceptions import IntegrityError

from orderbot.core.exceptions import ContentFetchError, TranscriptionError
from orderbot.core.services import ServiceContainer
from orderbot.models.processed_event import ProcessedEvent
from orderbot.schemas.webhook import LineEvent

log = logging.getLogger(__name__)

GENERIC_ERROR_REPLY = "เกิดข้อผิดพลาดภายในระบบ"
TRANSCRIPTION_FAILED_REPLY = "STT ล้มเหลว ลองส่ง Text แทน"
AUDIO_MESSAGE_TYPES = ("audio", "voice")


def heard_reply(transcript: str, reply: str) -> str:
    return f'ได้ยิน: "{transcript}"\n{reply}'


async def claim_event(event: LineEvent) -> bool:
    """
    Idempotency check. Inserting the webhookEventId fails on the unique
    constraint if another delivery of the same event got there first.
    Events without an id are always processed.
    """
    if not event.webhook_event_id:
        return True
    try:
        await ProcessedEvent.create(event_id=event.webhook_event_id, event_kind=event.type)
    except IntegrityError:
        log.info(f"Skipping already processed event {event.webhook_event_id}")
        return False
    return True


async def handle_text_message(event: LineEvent, services: ServiceContainer):
    reply = await services.workflow.handle_utterance(event.message.text or "")
    await services.messenger.reply(event.reply_token, reply)


async def handle_audio_message(event: LineEvent, services: ServiceContainer):
    """Fetch -> transcribe -> order workflow -> reply -> archive the clip."""
    try:
        audio = await services.messenger.fetch_content(event.message.id)
        transcript = await services.transcriber.transcribe(audio)
    except (ContentFetchError, TranscriptionError) as e:
        log.error(f"Voice message {event.message.id} could not be transcribed: {e}")
        await services.messenger.reply(event.reply_token, TRANSCRIPTION_FAILED_REPLY)
        return

    log.info(f"Transcript for {event.message.id}: {transcript!r}")
    reply = await services.workflow.handle_utterance(transcript)
    await services.messenger.reply(event.reply_token, heard_reply(transcript, reply))
    await services.archive.store(audio)


async def handle_event(event: LineEvent, services: ServiceContainer):
    """
    Processes one webhook event. Every failure stays inside this call: it is
    logged with its traceback and the customer gets the generic error reply.
    """
    try:
        if event.type != "message" or event.message is None:
            log.debug(f"Ignoring {event.type} event")
            return
        if not await claim_event(event):
            return

        kind = event.message.type
        if kind == "text":
            await handle_text_message(event, services)
        elif kind in AUDIO_MESSAGE_TYPES:
            await handle_audio_message(event, services)
        else:
            log.info(f"No handler for message type: {kind}")

    except Exception:
        log.exception(f"Event handling error (event {event.webhook_event_id})")
        if event.reply_token:
            await services.messenger.reply(event.reply_token, GENERIC_ERROR_REPLY)


async def dispatch_events(events: List[LineEvent], services: ServiceContainer):
    """Runs all events of one webhook call concurrently and independently."""
    if not events:
        return
    log.info(f"Dispatching {len(events)} webhook event(s)")
    await asyncio.gather(*(handle_event(event, services) for event in events))
