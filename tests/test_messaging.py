import pytest
import requests
from unittest.mock import MagicMock

from orderbot.core.exceptions import ContentFetchError
from orderbot.services.archive import VoiceArchive
from orderbot.services.messaging import LineMessenger


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def messenger(session):
    return LineMessenger("token-abc", session=session, timeout=3)


@pytest.mark.asyncio
async def test_reply_posts_text_message(messenger, session):
    session.post.return_value = MagicMock(ok=True, status_code=200)

    assert await messenger.reply("rt-1", "สวัสดี") is True

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.line.me/v2/bot/message/reply"
    assert kwargs["headers"] == {"Authorization": "Bearer token-abc"}
    assert kwargs["json"] == {"replyToken": "rt-1", "messages": [{"type": "text", "text": "สวัสดี"}]}
    assert kwargs["timeout"] == 3


@pytest.mark.asyncio
async def test_reply_network_error_is_logged_not_raised(messenger, session, caplog):
    session.post.side_effect = requests.exceptions.ConnectionError("down")

    assert await messenger.reply("rt-1", "hi") is False
    assert "LINE reply failed" in caplog.text


@pytest.mark.asyncio
async def test_reply_rejected_is_logged_not_raised(messenger, session, caplog):
    session.post.return_value = MagicMock(ok=False, status_code=400, text="Invalid reply token")

    assert await messenger.reply("rt-used", "hi") is False
    assert "Invalid reply token" in caplog.text


@pytest.mark.asyncio
async def test_fetch_content(messenger, session):
    response = MagicMock(content=b"\x00audio")
    session.get.return_value = response

    assert await messenger.fetch_content("m-9") == b"\x00audio"
    args, kwargs = session.get.call_args
    assert args[0] == "https://api-data.line.me/v2/bot/message/m-9/content"
    assert kwargs["headers"]["Authorization"] == "Bearer token-abc"
    response.raise_for_status.assert_called_once()


@pytest.mark.asyncio
async def test_fetch_content_http_error(messenger, session):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
    session.get.return_value = response

    with pytest.raises(ContentFetchError):
        await messenger.fetch_content("m-9")


@pytest.mark.asyncio
async def test_archive_disabled_without_folder():
    drive = MagicMock()
    archive = VoiceArchive(drive, None)

    assert await archive.store(b"audio") is None
    drive.files.assert_not_called()


@pytest.mark.asyncio
async def test_archive_uploads_to_folder():
    drive = MagicMock()
    drive.files.return_value.create.return_value.execute.return_value = {"id": "file-1"}
    archive = VoiceArchive(drive, "folder-1")

    assert await archive.store(b"audio") == "file-1"
    kwargs = drive.files.return_value.create.call_args.kwargs
    assert kwargs["body"]["parents"] == ["folder-1"]
    assert kwargs["body"]["name"].startswith("voice_")
    assert kwargs["body"]["name"].endswith(".m4a")
    assert kwargs["media_body"].mimetype() == "audio/m4a"


@pytest.mark.asyncio
async def test_archive_errors_propagate():
    drive = MagicMock()
    drive.files.return_value.create.return_value.execute.side_effect = RuntimeError("drive down")

    with pytest.raises(RuntimeError):
        await VoiceArchive(drive, "folder-1").store(b"audio")


@pytest.mark.asyncio
async def test_archive_upload_runs_on_a_fresh_transport():
    drive = MagicMock()
    execute = drive.files.return_value.create.return_value.execute
    execute.return_value = {"id": "file-2"}
    transport = object()
    http_factory = MagicMock(return_value=transport)

    archive = VoiceArchive(drive, "folder-1", http_factory=http_factory)

    assert await archive.store(b"audio") == "file-2"
    http_factory.assert_called_once_with()
    execute.assert_called_once_with(http=transport)
