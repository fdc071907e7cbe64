import httpx
from typing import Any, Dict, Optional, Protocol

from src.config import Settings
from src.feature_modules.transcription.errors import DeepgramError

# Deepgram pre-recorded transcription endpoint
# POST {DEEPGRAM_API_BASE}/v1/listen?model=nova-3
#   URL mode:  application/json {"url": "..."}
#   file mode: raw audio bytes, Content-Type = upload mimetype


class Transcriber(Protocol):
    async def transcribe_url(self, url: str, *, model: str) -> Dict[str, Any]: ...

    async def transcribe_file(self, data: bytes, *, mimetype: str, model: str) -> Dict[str, Any]: ...


class DeepgramTranscriber:
    def __init__(
        self,
        *,
        api_key: str,
        api_base: str = "https://api.deepgram.com",
        timeout_s: float = 120,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._url = f"{api_base.rstrip('/')}/v1/listen"
        self._timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeepgramTranscriber":
        return cls(
            api_key=settings.deepgram_api_key,
            api_base=settings.deepgram_api_base,
            timeout_s=settings.request_timeout_seconds,
        )

    async def transcribe_url(self, url: str, *, model: str) -> Dict[str, Any]:
        return await self._listen(model=model, json={"url": url})

    async def transcribe_file(self, data: bytes, *, mimetype: str, model: str) -> Dict[str, Any]:
        return await self._listen(model=model, content=data, content_type=mimetype)

    async def _listen(
        self,
        *,
        model: str,
        json: Optional[Dict[str, Any]] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Token {self._api_key}",
            "Accept": "application/json",
        }
        if content_type:
            headers["Content-Type"] = content_type

        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            resp = await client.post(
                self._url,
                params={"model": model},
                headers=headers,
                json=json,
                content=content,
            )

        if resp.status_code >= 400:
            detail = (resp.text or "")[:300]
            raise DeepgramError(
                f"Deepgram request failed ({resp.status_code}): {detail}",
                status_code=resp.status_code,
                body=detail,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise DeepgramError("Deepgram returned a non-JSON body.", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise DeepgramError("Deepgram returned an unexpected body.", status_code=resp.status_code)
        return data
