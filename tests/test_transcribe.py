from unittest import IsolatedAsyncioTestCase, TestCase

from fastapi.testclient import TestClient

from src.config import Settings
from src.feature_modules.transcription.errors import TranscriptionError
from src.feature_modules.transcription.services import (
    TranscriptionInput,
    format_transcription_response,
    transcribe_audio,
)
from src.main import create_app

WORDS = [
    {"word": "hello", "start": 0.08, "end": 0.4, "confidence": 0.99},
    {"word": "world", "start": 0.4, "end": 0.8, "confidence": 0.98},
]

DEEPGRAM_RESULT = {
    "metadata": {
        "request_id": "req-1",
        "model_uuid": "abc",
        "duration": 1.25,
        "model_info": {"abc": {"name": "general-nova-3", "version": "2024-01-01"}},
    },
    "results": {
        "channels": [
            {"alternatives": [{"transcript": "hello world", "confidence": 0.99, "words": WORDS}]}
        ]
    },
}


class _FakeTranscriber:
    def __init__(self, result=None, error=None):
        self.result = DEEPGRAM_RESULT if result is None else result
        self.error = error
        self.calls = []

    async def transcribe_url(self, url, *, model):
        self.calls.append(("url", url, model))
        if self.error:
            raise self.error
        return self.result

    async def transcribe_file(self, data, *, mimetype, model):
        self.calls.append(("file", data, mimetype, model))
        if self.error:
            raise self.error
        return self.result


def _client(transcriber) -> TestClient:
    settings = Settings(DEEPGRAM_API_KEY="test-key", SERVE_MODE="none", _env_file=None)
    return TestClient(create_app(settings, transcriber=transcriber))


class TranscribeEndpointTests(TestCase):
    def test_missing_input_is_validation_error(self):
        fake = _FakeTranscriber()
        resp = _client(fake).post("/stt/transcribe", data={"model": "nova-2"})
        self.assertEqual(resp.status_code, 400)
        err = resp.json()["error"]
        self.assertEqual(err["type"], "ValidationError")
        self.assertEqual(err["code"], "MISSING_INPUT")
        self.assertEqual(err["message"], "Either file or url must be provided")
        self.assertIn("Either file or url must be provided", err["details"]["originalError"])
        self.assertEqual(fake.calls, [])

    def test_empty_body_is_validation_error(self):
        resp = _client(_FakeTranscriber()).post("/stt/transcribe")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["code"], "MISSING_INPUT")

    def test_url_takes_precedence_over_file(self):
        fake = _FakeTranscriber()
        resp = _client(fake).post(
            "/stt/transcribe",
            data={"url": "https://example.com/a.wav"},
            files={"file": ("a.wav", b"RIFF....", "audio/wav")},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(fake.calls, [("url", "https://example.com/a.wav", "nova-3")])

    def test_file_mode_reads_upload(self):
        fake = _FakeTranscriber()
        resp = _client(fake).post(
            "/stt/transcribe",
            data={"model": "nova-2"},
            files={"file": ("a.webm", b"\x1aE\xdf\xa3audio", "audio/webm")},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(fake.calls, [("file", b"\x1aE\xdf\xa3audio", "audio/webm", "nova-2")])
        self.assertEqual(resp.json()["metadata"]["model_name"], "nova-2")

    def test_normalized_response(self):
        resp = _client(_FakeTranscriber()).post("/stt/transcribe", data={"url": "https://example.com/a.wav"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "transcript": "hello world",
                "words": WORDS,
                "metadata": {"model_uuid": "abc", "request_id": "req-1", "model_name": "nova-3"},
                "duration": 1.25,
            },
        )

    def test_optional_fields_are_omitted(self):
        result = {"metadata": {}, "results": {"channels": [{"alternatives": [{}]}]}}
        resp = _client(_FakeTranscriber(result=result)).post("/stt/transcribe", data={"url": "https://x/a.mp3"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body, {"transcript": "", "words": [], "metadata": {"model_name": "nova-3"}})

    def test_missing_alternative_is_transcription_failure(self):
        result = {"metadata": {"request_id": "req-2"}, "results": {"channels": [{"alternatives": []}]}}
        resp = _client(_FakeTranscriber(result=result)).post("/stt/transcribe", data={"url": "https://x/a.mp3"})
        self.assertEqual(resp.status_code, 500)
        err = resp.json()["error"]
        self.assertEqual(err["type"], "TranscriptionError")
        self.assertEqual(err["code"], "TRANSCRIPTION_FAILED")
        self.assertEqual(err["message"], "No transcription results returned from Deepgram")

    def test_provider_exception_is_transcription_failure(self):
        fake = _FakeTranscriber(error=RuntimeError("connection reset"))
        resp = _client(fake).post("/stt/transcribe", data={"url": "https://x/a.mp3"})
        self.assertEqual(resp.status_code, 500)
        err = resp.json()["error"]
        self.assertEqual(err["code"], "TRANSCRIPTION_FAILED")
        self.assertEqual(err["message"], "connection reset")
        self.assertEqual(err["details"]["originalError"], "RuntimeError: connection reset")

    def test_error_without_message_reports_class_name(self):
        resp = _client(_FakeTranscriber(error=TimeoutError())).post("/stt/transcribe", data={"url": "https://x/a.mp3"})
        self.assertEqual(resp.status_code, 500)
        err = resp.json()["error"]
        self.assertEqual(err["message"], "An error occurred during transcription")
        self.assertEqual(err["details"]["originalError"], "TimeoutError")

    def test_get_on_transcribe_path_falls_through(self):
        resp = _client(_FakeTranscriber()).get("/stt/transcribe")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Not Found", "message": "Endpoint not found"})


class TranscriptionServiceTests(IsolatedAsyncioTestCase):
    async def test_transcribe_audio_rejects_empty_request(self):
        with self.assertRaises(TranscriptionError):
            await transcribe_audio(_FakeTranscriber(), TranscriptionInput(mimetype="audio/wav"))

    def test_missing_channels(self):
        with self.assertRaises(TranscriptionError):
            format_transcription_response({"metadata": {}, "results": {}}, "nova-3")

    def test_model_name_is_the_requested_model(self):
        resp = format_transcription_response(DEEPGRAM_RESULT, "nova-2")
        self.assertEqual(resp.metadata.model_name, "nova-2")
        self.assertEqual(resp.metadata.model_uuid, "abc")
