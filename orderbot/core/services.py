"""
Construction of the long-lived service objects.

Everything is built once in the FastAPI lifespan and kept on `app.state.services`;
route handlers and consumers receive the container instead of importing globals.
"""
import logging
from dataclasses import dataclass

from fastapi import HTTPException, Request

import httplib2
from google.cloud import speech
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build

from orderbot.core import config
from orderbot.services.archive import VoiceArchive
from orderbot.services.ledger import SheetsLedger
from orderbot.services.messaging import LineMessenger
from orderbot.services.order_service import OrderWorkflow
from orderbot.services.transcription import SpeechTranscriber

log = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass
class ServiceContainer:
    workflow: OrderWorkflow
    ledger: SheetsLedger
    transcriber: SpeechTranscriber
    messenger: LineMessenger
    archive: VoiceArchive


def google_credentials(client_email, private_key, scopes):
    """Service-account credentials, or None when the pair is incomplete."""
    if not client_email or not private_key:
        return None
    return service_account.Credentials.from_service_account_info(
        {"client_email": client_email, "private_key": private_key, "token_uri": TOKEN_URI},
        scopes=scopes,
    )


def authorized_http_factory(credentials, timeout=None):
    """
    Returns a callable producing a new authorized httplib2 transport per call.
    googleapiclient requests executed from worker threads must not share one.
    """
    def make_http():
        return AuthorizedHttp(credentials, http=httplib2.Http(timeout=timeout))
    return make_http


def build_services() -> ServiceContainer:
    """
    Builds the container from config. Broken Google credentials leave the
    ledger, speech and archive clients unset (those features then fail per
    request) instead of stopping the process.
    """
    sheets = drive = speech_client = http_factory = None
    try:
        credentials = google_credentials(config.GOOGLE_CLIENT_EMAIL, config.GOOGLE_PRIVATE_KEY, config.GOOGLE_SCOPES)
        if credentials is not None:
            speech_client = speech.SpeechClient(credentials=credentials)
            sheets = build("sheets", "v4", credentials=credentials, cache_discovery=False)
            drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
            http_factory = authorized_http_factory(credentials, timeout=config.HTTP_TIMEOUT)
    except Exception as e:
        log.error(f"INIT ERROR: Google clients unavailable: {e}")

    ledger = SheetsLedger(
        sheets, config.SHEET_ID, config.STOCK_RANGE, config.ORDERS_RANGE, http_factory=http_factory
    )
    return ServiceContainer(
        workflow=OrderWorkflow(ledger=ledger, recorder=ledger),
        ledger=ledger,
        transcriber=SpeechTranscriber(speech_client, config.SPEECH_LANGUAGE),
        messenger=LineMessenger(
            config.LINE_TOKEN,
            api_base=config.LINE_API_BASE,
            data_api_base=config.LINE_DATA_API_BASE,
            timeout=config.HTTP_TIMEOUT,
        ),
        archive=VoiceArchive(drive, config.VOICE_FOLDER_ID, http_factory=http_factory),
    )


def get_services(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the container built at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Services are not initialized.")
    return services
