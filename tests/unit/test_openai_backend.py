"""Unit tests for OpenAITranscriptionBackend against a local fake endpoint."""

import asyncio

import pytest
from aiohttp import web

from scribeproxy.transcription.base import TranscriptionError
from scribeproxy.transcription.openai_backend import OpenAITranscriptionBackend


class FakeTranscriptionEndpoint:
    """Minimal stand-in for the transcriptions endpoint."""

    def __init__(self, status=200, body=None, delay=0.0):
        self.status = status
        self.body = {"text": "hello world"} if body is None else body
        self.delay = delay
        self.requests = []

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        upload = form["file"]
        self.requests.append({
            "authorization": request.headers.get("Authorization"),
            "model": form["model"],
            "filename": upload.filename,
            "content_type": upload.content_type,
            "data": upload.file.read(),
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.body, str):
            return web.Response(status=self.status, text=self.body)
        return web.json_response(self.body, status=self.status)


async def transcribe_via(endpoint, audio=b'RIFF....WAVE', timeout_seconds=5.0):
    app = web.Application()
    app.router.add_post("/v1/audio/transcriptions", endpoint.handle)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    backend = OpenAITranscriptionBackend(
        api_key="sk-test",
        model="whisper-1",
        api_url=f"http://127.0.0.1:{port}/v1/audio/transcriptions",
        timeout_seconds=timeout_seconds,
    )
    try:
        return await backend.transcribe("conn-1.window-1", audio)
    finally:
        await backend.cleanup()
        await runner.cleanup()


@pytest.mark.unit
class TestOpenAITranscriptionBackend:
    """Test cases for OpenAITranscriptionBackend."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            OpenAITranscriptionBackend(api_key="")

    def test_successful_transcription(self):
        endpoint = FakeTranscriptionEndpoint()

        result = asyncio.run(transcribe_via(endpoint, audio=b'wav-bytes'))

        assert result.text == "hello world"
        assert result.model == "whisper-1"
        assert result.service == "OpenAI"
        assert result.chunk_id == "conn-1.window-1"
        request = endpoint.requests[0]
        assert request["authorization"] == "Bearer sk-test"
        assert request["model"] == "whisper-1"
        assert request["filename"] == "audio.wav"
        assert request["content_type"] == "audio/wav"
        assert request["data"] == b'wav-bytes'

    def test_error_status_raises(self):
        endpoint = FakeTranscriptionEndpoint(status=401, body={"error": "invalid key"})

        with pytest.raises(TranscriptionError, match="401"):
            asyncio.run(transcribe_via(endpoint))

    @pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": None}])
    def test_missing_text_raises(self, body):
        endpoint = FakeTranscriptionEndpoint(body=body)

        with pytest.raises(TranscriptionError, match="No transcription"):
            asyncio.run(transcribe_via(endpoint))

    def test_invalid_json_raises(self):
        endpoint = FakeTranscriptionEndpoint(body="<html>oops</html>")

        with pytest.raises(TranscriptionError):
            asyncio.run(transcribe_via(endpoint))

    def test_timeout_raises(self):
        endpoint = FakeTranscriptionEndpoint(delay=1.0)

        with pytest.raises(TranscriptionError, match="timeout"):
            asyncio.run(transcribe_via(endpoint, timeout_seconds=0.2))

    def test_connection_error_raises(self):
        backend = OpenAITranscriptionBackend(
            api_key="sk-test", api_url="http://127.0.0.1:1/v1/audio/transcriptions", timeout_seconds=2.0)

        async def scenario():
            try:
                await backend.transcribe("conn-1.window-1", b'wav')
            finally:
                await backend.cleanup()

        with pytest.raises(TranscriptionError, match="request failed"):
            asyncio.run(scenario())
